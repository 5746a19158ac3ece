from datetime import datetime, timezone
from .extensions import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(value):
    return value.isoformat() if value else None


class Image(db.Model):
    """Metadata for one uploaded image. Rows are soft-deleted, never removed."""

    __tablename__ = "images"
    id = db.Column(db.BigInteger().with_variant(db.Integer, "sqlite"), primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime(timezone=True), nullable=True)
    filename = db.Column(db.Text, nullable=False)
    filepath = db.Column(db.Text, nullable=False)

    __table_args__ = (
        # gorm naming; tables created by the previous Go backend already carry it
        db.Index("idx_images_deleted_at", "deleted_at"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
            "deleted_at": _isoformat(self.deleted_at),
            "filename": self.filename,
            "filepath": self.filepath,
        }

    def __repr__(self):
        return f"<Image id={self.id} filename={self.filename!r}>"
