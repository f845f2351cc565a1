"""Local disk storage for uploaded images.

Layout under the configured base directory::

    <base>/<user_id>/<YYYY-MM-DD>/<id><ext>              original
    <base>/<user_id>/<YYYY-MM-DD>/thumbnails/<id><ext>   thumbnail

The original and its thumbnail always share the same filename, so either one
can be found from the other without a lookup.
"""

import os
import shutil
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import BinaryIO

THUMBNAIL_DIRNAME = "thumbnails"

EXTENSIONS_BY_TYPE: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}


def new_image_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class StoragePaths:
    directory: Path
    thumbnail_directory: Path
    filename: str
    relative_dir: str  # "<user_id>/<YYYY-MM-DD>", always forward slashes

    @property
    def original_path(self) -> Path:
        return self.directory / self.filename

    @property
    def thumbnail_path(self) -> Path:
        return self.thumbnail_directory / self.filename

    def public_urls(self, url_prefix: str) -> tuple[str, str]:
        """Return (path, thumbnail_path) as public URLs rooted at *url_prefix*."""
        base = f"{url_prefix.rstrip('/')}/{self.relative_dir}"
        return f"{base}/{self.filename}", f"{base}/{THUMBNAIL_DIRNAME}/{self.filename}"


def resolve_extension(original_filename: str | None, mime_type: str) -> str:
    """Extension of the client filename, else the one implied by *mime_type*.

    The client extension is kept even when it disagrees with the type, so
    uploads are served through UploadedImageFiles, which ignores it.
    """
    ext = Path(original_filename).suffix.lower() if original_filename else ""
    return ext or EXTENSIONS_BY_TYPE.get(mime_type, "")


def allocate_paths(
    base_dir: str | os.PathLike,
    user_id: str,
    ext: str,
    today: date | None = None,
    id_factory: Callable[[], str] = new_image_id,
) -> StoragePaths:
    """Pick a fresh filename and create the per-user, per-day directories.

    Raises OSError if the directory tree cannot be created.
    """
    day = (today or date.today()).isoformat()
    directory = Path(base_dir) / user_id / day
    thumbnail_directory = directory / THUMBNAIL_DIRNAME
    os.makedirs(thumbnail_directory, exist_ok=True)
    return StoragePaths(
        directory=directory,
        thumbnail_directory=thumbnail_directory,
        filename=f"{id_factory()}{ext}",
        relative_dir=f"{user_id}/{day}",
    )


def save_stream(src: BinaryIO, dest: Path) -> int:
    """Copy *src* into a new file at *dest* and return the number of bytes written.

    The file is opened in exclusive-create mode, so an existing file is never
    overwritten.
    """
    with open(dest, "xb") as fh:
        shutil.copyfileobj(src, fh)
        return fh.tell()
