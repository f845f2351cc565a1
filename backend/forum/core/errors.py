"""
Error taxonomy for the image upload pipeline.

Each error carries the HTTP status it maps to and a message that is safe to
show the client. StorageError messages stay generic; the real cause travels
as ``__cause__`` and is logged by the exception handler in forum.main.

A wrong HTTP method never reaches the pipeline: FastAPI routing answers 405
with the same ``{"detail": ...}`` body.
"""

from fastapi import status


class ImageUploadError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Image upload failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ImageUploadError):
    """Missing or malformed input, unsupported type, oversize file."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid upload"


class AuthError(ImageUploadError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class DecodeError(ImageUploadError):
    """The stored bytes do not parse as the declared image format."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Failed to decode image"


class StorageError(ImageUploadError):
    """Directory, file or database failure on our side."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to store image"
