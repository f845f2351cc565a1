"""
Upload validation, run before anything touches the disk.

Content type policy: the type declared on the multipart part is trusted when
present. Only when the part carries no Content-Type do we sniff the first
512 bytes, and the stream is rewound afterwards so the full file can still be
copied. Structural validity is checked later, when the stored file is decoded.
"""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import BinaryIO

from forum.core.errors import ValidationError

logger = logging.getLogger(__name__)

SNIFF_LENGTH = 512
UNKNOWN_TYPE = "application/octet-stream"

_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


@dataclass(frozen=True)
class ValidatedUpload:
    post_id: str
    filename: str | None
    content_type: str
    size: int
    file: BinaryIO


def sniff_content_type(head: bytes) -> str:
    """Classify *head* by its leading signature bytes."""
    for signature, content_type in _SIGNATURES:
        if head.startswith(signature):
            return content_type
    return UNKNOWN_TYPE


def detect_content_type(file: BinaryIO, declared: str | None) -> str:
    if declared:
        return declared.split(";", 1)[0].strip().lower()

    head = file.read(SNIFF_LENGTH)
    file.seek(0)
    return sniff_content_type(head)


def _stream_size(file: BinaryIO) -> int:
    position = file.tell()
    file.seek(0, os.SEEK_END)
    size = file.tell()
    file.seek(position)
    return size


def validate_upload(
    post_id: str | None,
    file: BinaryIO | None,
    filename: str | None,
    declared_type: str | None,
    max_size: int,
    allowed_types: Iterable[str],
    size: int | None = None,
) -> ValidatedUpload:
    """Check presence, size ceiling and type allow-list.

    Raises ValidationError on the first failed check.
    """
    if not post_id:
        raise ValidationError("post_id required")
    if file is None:
        raise ValidationError("image field required")

    if size is None:
        size = _stream_size(file)
    if size > max_size:
        raise ValidationError(f"Image exceeds {max_size // (1024 * 1024)} MB limit")

    content_type = detect_content_type(file, declared_type)
    if content_type not in allowed_types:
        logger.info("Rejected upload for post %s: unsupported type %s", post_id, content_type)
        raise ValidationError("Unsupported image type")

    return ValidatedUpload(
        post_id=post_id,
        filename=filename,
        content_type=content_type,
        size=size,
        file=file,
    )
