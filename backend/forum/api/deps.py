from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from forum.config import settings
from forum.database import get_db
from forum.models.user import User
from forum.repositories.image_repository import ImageRepository
from forum.services import auth_service
from forum.services.image_service import ImageUploadService

# auto_error=False so a missing header is a 401 like any other bad credential
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    user = None
    if credentials is not None:
        user = auth_service.get_user_from_token(credentials.credentials, db)

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def get_image_repository(db: Session = Depends(get_db)) -> ImageRepository:
    return ImageRepository(db)


def get_image_service(
    repository: ImageRepository = Depends(get_image_repository),
) -> ImageUploadService:
    """Build the upload pipeline from settings. Tests override this to point
    the storage root at a temporary directory."""
    return ImageUploadService(
        repository,
        base_dir=settings.IMAGE_BASE_DIR,
        url_prefix=settings.IMAGE_URL_PREFIX,
        max_size=settings.MAX_IMAGE_SIZE,
        allowed_types=settings.ALLOWED_IMAGE_TYPES,
        thumbnail_size=(settings.THUMBNAIL_WIDTH, settings.THUMBNAIL_HEIGHT),
        jpeg_quality=settings.JPEG_QUALITY,
    )
