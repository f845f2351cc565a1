"""
Pytest fixtures shared across all test modules.
Uses an in-memory SQLite database with StaticPool so all connections
share a single in-memory DB, so no real Postgres required for tests.
Uploaded files go to a per-test temporary directory.
"""

import io
import os
import tempfile
from datetime import date

# Set env vars BEFORE any forum module is imported
_static_dir = tempfile.mkdtemp(prefix="forum-static-")
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-chars-long!!"
os.environ["ALGORITHM"] = "HS256"
os.environ["STATIC_DIR"] = _static_dir
os.environ["IMAGE_BASE_DIR"] = os.path.join(_static_dir, "uploads", "images")

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Import forum modules AFTER env vars are set
from forum.api.deps import get_image_service  # noqa: E402
from forum.config import settings  # noqa: E402
from forum.database import Base, get_db  # noqa: E402
from forum.main import app  # noqa: E402
from forum.models.user import User  # noqa: E402
from forum.repositories.image_repository import ImageRepository  # noqa: E402
from forum.services import auth_service  # noqa: E402
from forum.services.image_service import ImageUploadService  # noqa: E402

# Single shared in-memory SQLite engine. StaticPool ensures all
# connections share the same DB instance.
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

UPLOAD_DAY = date(2026, 3, 14)


@pytest.fixture(autouse=True)
def setup_db():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def image_root(tmp_path):
    root = tmp_path / "images"
    root.mkdir()
    return root


@pytest.fixture()
def client(db, image_root):
    def override_get_db():
        yield db

    def override_get_image_service():
        return make_service(db, image_root)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_service] = override_get_image_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_service(db, base_dir, **kwargs) -> ImageUploadService:
    kwargs.setdefault("today", lambda: UPLOAD_DAY)
    return ImageUploadService(
        ImageRepository(db),
        base_dir=base_dir,
        url_prefix=settings.IMAGE_URL_PREFIX,
        **kwargs,
    )


def make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (10, 10), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, fmt)
    return buf.getvalue()


def create_user(db, user_id: str = "u1") -> dict:
    """Insert a user directly and return bearer headers for it."""
    db.add(
        User(
            id=user_id,
            username=f"user_{user_id}",
            email=f"{user_id}@example.com",
            hashed_password=auth_service.hash_password("Password1!"),
        )
    )
    db.commit()
    token = auth_service.create_access_token(user_id)
    return {"Authorization": f"Bearer {token}"}


def register_user(client: TestClient, username="testuser", email="test@example.com", password="Password1!"):
    return client.post("/api/auth/register", json={"username": username, "email": email, "password": password})


def auth_headers(client: TestClient, username="testuser", email="test@example.com", password="Password1!"):
    resp = register_user(client, username=username, email=email, password=password)
    assert resp.status_code == 200, f"Registration failed: {resp.json()}"
    token = resp.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def list_tree(root) -> list[str]:
    """Every path below *root*, relative and sorted."""
    return sorted(str(p.relative_to(root)) for p in root.rglob("*"))
