"""
Pytest configuration and fixtures for tagfolio tests.
"""

import base64
import io
import json
import tempfile
import time
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from PIL import Image

from tagfolio.config import get_config
from tagfolio.models.photo import PhotoEntry
from tagfolio.services.auth import UserInfo, reset_auth_service
from tagfolio.services.photo_store import reset_photo_store


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_image_data() -> bytes:
    """Provide a small JPEG image."""
    return TestDataFactory.create_image_bytes()


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Set up test environment variables and reset cached globals."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "test-project")
    monkeypatch.setenv("PHOTO_STORE_BACKEND", "duckdb")
    monkeypatch.setenv("DUCKDB_PATH", ":memory:")
    monkeypatch.setenv("PREFERENCES_PATH", str(tmp_path / "preferences.json"))
    for key in ("FIREBASE_API_KEY", "OWNER_EMAIL", "OWNER_PASSWORD", "DEV_OWNER_EMAIL", "DEV_OWNER_PASSWORD"):
        monkeypatch.delenv(key, raising=False)

    get_config().clear_cache()
    reset_auth_service()
    reset_photo_store()
    yield
    get_config().clear_cache()
    reset_auth_service()
    reset_photo_store()


class TestDataFactory:
    """Factory class for creating test data objects."""

    @staticmethod
    def create_user_info(
        user_id: str = "owner-uid-123",
        email: str = "owner@example.com",
        expires_at: float | None = None,
    ) -> UserInfo:
        """Create a UserInfo object for testing."""
        return UserInfo(user_id=user_id, email=email, expires_at=expires_at)

    @staticmethod
    def create_photo(
        photo_id: str = "photo-1",
        tags: list[str] | None = None,
        link: str = "https://example.com/post",
        created_at: datetime | None = None,
    ) -> PhotoEntry:
        """Create a PhotoEntry for testing."""
        return PhotoEntry(
            id=photo_id,
            tags=["travel"] if tags is None else tags,
            link=link,
            image_data="data:image/jpeg;base64,AAAA",
            created_at=created_at or datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
        )

    @staticmethod
    def create_image_bytes(size: tuple[int, int] = (64, 48), fmt: str = "JPEG", mode: str = "RGB") -> bytes:
        """Create encoded image bytes with Pillow."""
        buffer = io.BytesIO()
        Image.new(mode, size, color="red" if mode == "RGB" else None).save(buffer, format=fmt)
        return buffer.getvalue()

    @staticmethod
    def create_id_token(user_id: str = "owner-uid-123", email: str = "owner@example.com") -> str:
        """Create an unsigned Firebase-style ID token."""
        header = {"alg": "RS256", "typ": "JWT"}
        current_time = int(time.time())
        payload = {
            "user_id": user_id,
            "sub": user_id,
            "email": email,
            "iat": current_time,
            "exp": current_time + 3600,
        }

        header_b64 = base64.urlsafe_b64encode(json.dumps(header).encode()).decode().rstrip("=")
        payload_b64 = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
        signature_b64 = base64.urlsafe_b64encode(b"test_signature").decode().rstrip("=")

        return f"{header_b64}.{payload_b64}.{signature_b64}"

    @staticmethod
    def create_sign_in_response(user_id: str = "owner-uid-123", email: str = "owner@example.com") -> dict:
        """Create a signInWithPassword response body."""
        return {
            "idToken": TestDataFactory.create_id_token(user_id, email),
            "localId": user_id,
            "email": email,
            "refreshToken": "refresh-token",
            "expiresIn": "3600",
        }


@pytest.fixture
def test_data_factory() -> TestDataFactory:
    """Provide TestDataFactory instance for tests."""
    return TestDataFactory()
