"""
forum: FastAPI backend entry point for post image uploads.
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from forum.api import auth, health, images
from forum.config import settings
from forum.core.errors import ImageUploadError, StorageError
from forum.core.static_files import UploadedImageFiles

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

os.makedirs(settings.STATIC_DIR, exist_ok=True)
os.makedirs(settings.IMAGE_BASE_DIR, exist_ok=True)


app = FastAPI(
    title="forum",
    description="Forum post image uploads with thumbnails",
    version="1.0.0",
    debug=settings.DEBUG,
)

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
# allow_origins=["*"] is incompatible with allow_credentials=True in the CORS
# standard. When the wildcard is present (dev), switch to allow_origin_regex=".*"
# which achieves the same effect without triggering Starlette's guard.
_cors_origins = [o for o in settings.CORS_ORIGINS if o != "*"]
_cors_regex = ".*" if len(_cors_origins) < len(settings.CORS_ORIGINS) else None

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_origin_regex=_cors_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(health.router)
app.include_router(auth.router, prefix="/api")
app.include_router(images.router, prefix="/api")
app.include_router(images.posts_router, prefix="/api")

# Originals and thumbnails are served straight from disk. The uploads mount
# must come first so it shadows the same prefix under /static.
app.mount(settings.IMAGE_URL_PREFIX, UploadedImageFiles(directory=settings.IMAGE_BASE_DIR), name="uploads")
app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")

# ---------------------------------------------------------------------------
# Custom exception handlers
# ---------------------------------------------------------------------------


@app.exception_handler(ImageUploadError)
async def image_upload_error_handler(request: Request, exc: ImageUploadError) -> JSONResponse:
    if isinstance(exc, StorageError):
        # Client gets the generic message; operators get the cause
        logger.error("Storage failure on %s: %s", request.url.path, exc.message, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
