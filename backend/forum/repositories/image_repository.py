"""Image metadata repository."""

from collections.abc import Callable
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from forum.core.errors import StorageError
from forum.models.image import Image
from forum.storage import new_image_id


class ImageRepository:
    """Database access for Image records.

    Records are created once and never updated. A post may collect several
    images over time; lookups return them newest first.
    """

    def __init__(self, db: Session, id_factory: Callable[[], str] = new_image_id):
        self.db = db
        self.id_factory = id_factory

    def create(self, post_id: str, user_id: str, path: str, thumbnail_path: str) -> Image:
        """Insert a record, assigning its id and creation time.

        Raises:
            StorageError: on constraint or connectivity failure. The session
                is rolled back first.
        """
        image = Image(
            id=self.id_factory(),
            post_id=post_id,
            user_id=user_id,
            path=path,
            thumbnail_path=thumbnail_path,
            created_at=datetime.now(timezone.utc),
        )
        try:
            self.db.add(image)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError("Failed to save record") from exc
        self.db.refresh(image)
        return image

    def get_by_post_id(self, post_id: str) -> Image | None:
        """Most recent image for *post_id*, or None if the post has none."""
        return self._by_post_query(post_id).first()

    def list_by_post_id(self, post_id: str) -> list[Image]:
        return self._by_post_query(post_id).all()

    def _by_post_query(self, post_id: str):
        return (
            self.db.query(Image)
            .filter(Image.post_id == post_id)
            .order_by(Image.created_at.desc(), Image.id.desc())
        )
