import logging
import os

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from forum.config import settings
from forum.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: Session = Depends(get_db)) -> dict:
    """Report database connectivity and whether the image root is writable."""
    result = {"status": "healthy", "database": "connected", "storage": "writable"}

    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Health check: database unreachable: %s", exc)
        result.update(status="unhealthy", database="disconnected")

    base_dir = settings.IMAGE_BASE_DIR
    if not (os.path.isdir(base_dir) and os.access(base_dir, os.W_OK)):
        result.update(status="unhealthy", storage="unavailable")

    return result
