from datetime import datetime

from pydantic import BaseModel


class ImageUploadResponse(BaseModel):
    """Public result of an upload: URLs only, never filesystem paths."""

    path: str
    thumbnail_path: str


class ImageResponse(BaseModel):
    id: str
    post_id: str
    user_id: str
    path: str
    thumbnail_path: str
    created_at: datetime

    model_config = {"from_attributes": True}
