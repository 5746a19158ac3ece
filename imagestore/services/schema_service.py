from contextlib import contextmanager

import sqlalchemy as sa
import structlog
from alembic import command
from alembic.migration import MigrationContext
from alembic.operations import Operations
from alembic.util.exc import CommandError
from flask import current_app
from sqlalchemy import inspect, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError

from ..errors import DatabaseConnectionError, SchemaMigrationError
from ..extensions import db, migrate


logger = structlog.get_logger(__name__)

MIGRATION_LOCK_KEY = 730194855
VERSION_TABLE = "alembic_version"


def connect_database(app) -> None:
    """Check out one pooled connection and ping it. No retry."""
    url = make_url(app.config["SQLALCHEMY_DATABASE_URI"])
    with app.app_context():
        try:
            with db.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Database connection failed", url=url.render_as_string(hide_password=True), error=str(exc))
            raise DatabaseConnectionError("failed to connect database") from exc
    logger.info("Database connected", backend=url.get_backend_name(), host=url.host, database=url.database)


def migrate_schema(app) -> list[str]:
    """
    Bring the schema up to the models, additively.

    Existing tables and columns are never dropped, renamed or altered;
    only missing tables, columns and indexes are created. Databases that
    predate Alembic are adopted and stamped at head, so running this twice
    is a no-op the second time. Returns the ``table.column`` names added.
    """
    with app.app_context():
        engine = db.engine
        alembic_config = migrate.get_config(directory=current_app.config["MIGRATIONS_DIR"])
        alembic_config.attributes["configure_logger"] = False
        try:
            with _migration_lock(engine):
                versioned = inspect(engine).has_table(VERSION_TABLE)
                if versioned:
                    command.upgrade(alembic_config, "head")
                with engine.begin() as conn:
                    db.metadata.create_all(bind=conn)
                    added = _add_missing_columns(conn, db.metadata)
                    _add_missing_indexes(conn, db.metadata)
                if not versioned:
                    command.stamp(alembic_config, "head")
                    logger.info("Schema stamped", revision="head")
        except (SQLAlchemyError, CommandError) as exc:
            logger.error("Schema migration failed", error=str(exc))
            raise SchemaMigrationError(str(exc)) from exc

    if added:
        logger.info("Schema migrated", added_columns=added)
    else:
        logger.info("Schema up to date")
    return added


def _add_missing_columns(conn, metadata) -> list[str]:
    insp = inspect(conn)
    ops = Operations(MigrationContext.configure(conn))
    added = []
    for table in metadata.sorted_tables:
        existing = {col["name"] for col in insp.get_columns(table.name)}
        for column in table.columns:
            if column.name in existing:
                continue
            if column.primary_key:
                raise SchemaMigrationError(
                    f"table {table.name} exists without primary key column {column.name}"
                )
            # nullable so rows already in the table stay valid
            ops.add_column(table.name, sa.Column(column.name, column.type, nullable=True))
            added.append(f"{table.name}.{column.name}")
    return added


def _add_missing_indexes(conn, metadata) -> None:
    insp = inspect(conn)
    for table in metadata.sorted_tables:
        existing = {idx["name"] for idx in insp.get_indexes(table.name)}
        for index in table.indexes:
            if index.name not in existing:
                index.create(bind=conn)
                logger.info("Index created", table=table.name, index=index.name)


@contextmanager
def _migration_lock(engine):
    if engine.dialect.name != "postgresql":
        yield
        return
    with engine.connect() as lock_conn:
        lock_conn.execute(text("SELECT pg_advisory_lock(:key)"), {"key": MIGRATION_LOCK_KEY})
        try:
            yield
        finally:
            lock_conn.execute(text("SELECT pg_advisory_unlock(:key)"), {"key": MIGRATION_LOCK_KEY})
