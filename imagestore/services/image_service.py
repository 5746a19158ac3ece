import structlog
from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from ..errors import ImageNotFoundError, StoreWriteError
from ..models import Image, utcnow


logger = structlog.get_logger(__name__)


class ImageStore:
    """
    Create/read/update/soft-delete access to the ``images`` table.

    Wraps the Flask-SQLAlchemy extension, so every call needs an app
    context. Sessions are scoped per context and draw from the engine's
    pool, which makes one store instance safe to share between request
    threads. Mutations on existing rows are single UPDATE statements
    guarded on ``deleted_at IS NULL``.
    """

    def __init__(self, db):
        self.db = db

    @property
    def session(self):
        return self.db.session

    def create(self, filename: str, filepath: str) -> Image:
        image = Image(filename=filename, filepath=filepath)
        self.session.add(image)
        self._commit("create")
        logger.debug("Image created", image_id=image.id, filename=filename)
        return image

    def get(self, image_id: int, include_deleted: bool = False) -> Image:
        if include_deleted:
            image = self.session.get(Image, image_id)
        else:
            image = Image.query.filter(Image.id == image_id, Image.deleted_at.is_(None)).first()
        if image is None:
            raise ImageNotFoundError(image_id)
        return image

    def update(self, image_id: int, filename: str | None = None, filepath: str | None = None) -> Image:
        values = {"updated_at": utcnow()}
        if filename is not None:
            values["filename"] = filename
        if filepath is not None:
            values["filepath"] = filepath
        self._update_active(image_id, values, "update")
        logger.debug("Image updated", image_id=image_id, fields=sorted(values))
        return self.get(image_id)

    def soft_delete(self, image_id: int) -> None:
        now = utcnow()
        self._update_active(image_id, {"deleted_at": now, "updated_at": now}, "soft_delete")
        logger.debug("Image soft-deleted", image_id=image_id)

    def _update_active(self, image_id, values: dict, operation: str) -> None:
        stmt = (
            update(Image)
            .where(Image.id == image_id, Image.deleted_at.is_(None))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Image write failed", operation=operation, image_id=image_id, error=str(exc))
            raise StoreWriteError(f"{operation} failed for image {image_id}") from exc
        if result.rowcount == 0:
            self.session.rollback()
            raise ImageNotFoundError(image_id)
        self._commit(operation)

    def _commit(self, operation: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Image write failed", operation=operation, error=str(exc))
            raise StoreWriteError(f"{operation} failed") from exc


def get_image_store() -> ImageStore:
    return current_app.extensions["image_store"]
