from pydantic import field_validator
from pydantic_settings import BaseSettings

from forum.services.image_codec import PIL_FORMATS


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Static assets: everything under STATIC_DIR is served at /static
    STATIC_DIR: str = "ui/static"

    # Image uploads
    # Originals land in IMAGE_BASE_DIR/<user_id>/<YYYY-MM-DD>/, thumbnails in a
    # thumbnails/ subdirectory next to them. IMAGE_URL_PREFIX is the public
    # URL of IMAGE_BASE_DIR and must stay in sync with STATIC_DIR.
    IMAGE_BASE_DIR: str = "ui/static/uploads/images"
    IMAGE_URL_PREFIX: str = "/static/uploads/images"
    MAX_IMAGE_SIZE: int = 20_971_520  # 20 MB
    ALLOWED_IMAGE_TYPES: list[str] = [
        "image/jpeg",
        "image/png",
        "image/gif",
    ]
    THUMBNAIL_WIDTH: int = 150
    THUMBNAIL_HEIGHT: int = 150
    JPEG_QUALITY: int = 80

    model_config = {"env_file": ".env"}

    @field_validator("ALLOWED_IMAGE_TYPES")
    @classmethod
    def only_decodable_types(cls, v: list[str]) -> list[str]:
        unsupported = sorted(set(v).difference(PIL_FORMATS))
        if unsupported:
            raise ValueError(f"no codec for image types: {', '.join(unsupported)}")
        return v


settings = Settings()
