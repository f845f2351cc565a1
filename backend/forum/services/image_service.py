"""
Image upload pipeline.

Steps run strictly in order:

1. validate the request (no disk access)
2. allocate the storage paths and create the directories
3. write the original
4. decode the written file as the validated type
5. build the thumbnail
6. encode and write the thumbnail
7. insert the metadata record

There is no rollback. A failure after step 2 can leave the directories, the
original and the thumbnail on disk without a database record; nothing cleans
them up. The record insert is last, so a record only ever exists for a fully
written pair of files.
"""

import logging
import os
from collections.abc import Callable, Iterable
from datetime import date
from typing import BinaryIO

from forum.core.errors import AuthError, DecodeError, StorageError
from forum.models.image import Image
from forum.repositories.image_repository import ImageRepository
from forum.services import image_codec
from forum.services.image_validator import validate_upload
from forum.services.thumbnails import DEFAULT_SIZE, create_thumbnail
from forum.storage import allocate_paths, new_image_id, resolve_extension, save_stream

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 20 * 1024 * 1024
DEFAULT_ALLOWED_TYPES = ("image/jpeg", "image/png", "image/gif")


class ImageUploadService:
    def __init__(
        self,
        repository: ImageRepository,
        base_dir: str | os.PathLike,
        url_prefix: str,
        max_size: int = DEFAULT_MAX_SIZE,
        allowed_types: Iterable[str] = DEFAULT_ALLOWED_TYPES,
        thumbnail_size: tuple[int, int] = DEFAULT_SIZE,
        jpeg_quality: int = image_codec.DEFAULT_JPEG_QUALITY,
        today: Callable[[], date] = date.today,
        id_factory: Callable[[], str] = new_image_id,
    ):
        self.repository = repository
        self.base_dir = base_dir
        self.url_prefix = url_prefix
        self.max_size = max_size
        self.allowed_types = frozenset(allowed_types)
        unsupported = self.allowed_types.difference(image_codec.PIL_FORMATS)
        if unsupported:
            # Every allowed type needs a codec
            raise ValueError(f"No codec for allowed image types: {', '.join(sorted(unsupported))}")
        self.thumbnail_size = thumbnail_size
        self.jpeg_quality = jpeg_quality
        self.today = today
        self.id_factory = id_factory

    def upload(
        self,
        user_id: str | None,
        post_id: str | None,
        file: BinaryIO | None,
        filename: str | None,
        content_type: str | None,
        size: int | None = None,
    ) -> Image:
        """Store an uploaded image and its thumbnail for *post_id*.

        Raises:
            AuthError: no user identity was supplied.
            ValidationError: missing field, oversize file or unsupported type.
            DecodeError: the written file does not parse as its declared type.
            StorageError: directory, file or database failure.
        """
        if not user_id:
            raise AuthError()

        upload = validate_upload(
            post_id,
            file,
            filename,
            content_type,
            max_size=self.max_size,
            allowed_types=self.allowed_types,
            size=size,
        )
        ext = resolve_extension(upload.filename, upload.content_type)

        try:
            paths = allocate_paths(self.base_dir, user_id, ext, today=self.today(), id_factory=self.id_factory)
        except OSError as exc:
            raise StorageError("Failed to create directory") from exc

        try:
            save_stream(upload.file, paths.original_path)
        except OSError as exc:
            raise StorageError("Failed to save image") from exc

        try:
            decoded = image_codec.decode(paths.original_path, upload.content_type)
        except DecodeError:
            logger.warning(
                "Upload for post %s did not decode as %s; original left at %s",
                upload.post_id,
                upload.content_type,
                paths.original_path,
            )
            raise
        except OSError as exc:
            raise StorageError("Failed to process image") from exc

        thumbnail = create_thumbnail(decoded, *self.thumbnail_size)
        try:
            image_codec.encode(thumbnail, paths.thumbnail_path, upload.content_type, self.jpeg_quality)
        except StorageError as exc:
            raise StorageError("Failed to save thumbnail") from exc.__cause__

        path, thumbnail_path = paths.public_urls(self.url_prefix)
        record = self.repository.create(
            post_id=upload.post_id,
            user_id=user_id,
            path=path,
            thumbnail_path=thumbnail_path,
        )
        logger.info(
            "Stored image %s as %s for post %s (user=%s, type=%s, bytes=%d)",
            record.id,
            paths.filename,
            upload.post_id,
            user_id,
            upload.content_type,
            upload.size,
        )
        return record
