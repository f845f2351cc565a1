from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from forum.api.deps import get_current_user, get_image_repository, get_image_service
from forum.models.user import User
from forum.repositories.image_repository import ImageRepository
from forum.schemas.image import ImageResponse, ImageUploadResponse
from forum.services.image_service import ImageUploadService

router = APIRouter(prefix="/images", tags=["images"])
posts_router = APIRouter(prefix="/posts", tags=["images"])


# Plain def: the pipeline does blocking disk and database work, so FastAPI
# runs it in the threadpool.
@router.post("", response_model=ImageUploadResponse)
def upload_image(
    post_id: str | None = Form(None),
    image: UploadFile | None = File(None),
    current_user: User = Depends(get_current_user),
    service: ImageUploadService = Depends(get_image_service),
) -> ImageUploadResponse:
    """Attach an image to a post. Returns the public URLs of the original and
    its 150x150 thumbnail."""
    record = service.upload(
        user_id=current_user.id,
        post_id=post_id,
        file=image.file if image is not None else None,
        filename=image.filename if image is not None else None,
        content_type=image.content_type if image is not None else None,
        size=image.size if image is not None else None,
    )
    return ImageUploadResponse(path=record.path, thumbnail_path=record.thumbnail_path)


@posts_router.get("/{post_id}/image", response_model=ImageResponse)
async def get_post_image(
    post_id: str,
    repository: ImageRepository = Depends(get_image_repository),
) -> ImageResponse:
    image = repository.get_by_post_id(post_id)
    if image is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return ImageResponse.model_validate(image)


@posts_router.get("/{post_id}/images", response_model=list[ImageResponse])
async def list_post_images(
    post_id: str,
    repository: ImageRepository = Depends(get_image_repository),
) -> list[ImageResponse]:
    return [ImageResponse.model_validate(image) for image in repository.list_by_post_id(post_id)]
