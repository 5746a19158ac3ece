"""create images table

Revision ID: 7c1e5a9d2b40
Revises:
Create Date: 2026-10-19 10:12:00
"""

from alembic import op
import sqlalchemy as sa


revision = "7c1e5a9d2b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "images",
        sa.Column("id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), primary_key=True, autoincrement=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("filename", sa.Text(), nullable=False),
        sa.Column("filepath", sa.Text(), nullable=False),
    )
    op.create_index("idx_images_deleted_at", "images", ["deleted_at"])


def downgrade():
    op.drop_index("idx_images_deleted_at", table_name="images")
    op.drop_table("images")
