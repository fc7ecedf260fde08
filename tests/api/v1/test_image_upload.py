"""
Tests for POST /api/v1/upload/image.
"""

import io
import re

import pytest
from httpx import AsyncClient
from PIL import Image

from reviewbox.config import settings


def _png_bytes(size: tuple[int, int] = (8, 8)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 40, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def storage_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_PATH", str(tmp_path))
    monkeypatch.setattr(settings, "IMAGE_BASE_URL", "https://img.example.com")
    return tmp_path


@pytest.mark.api
class TestUploadImage:
    """Tests for image upload validation and storage."""

    async def test_upload_png(self, client: AsyncClient, storage_dir, owner_headers: dict):
        response = await client.post(
            "/api/v1/upload/image",
            files={"file": ("photo.png", _png_bytes(), "image/png")},
            headers=owner_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert re.fullmatch(
            r"https://img\.example\.com/images/review-groups/user-0001_\d+\.png", data["image_url"]
        )

        stored = list((storage_dir / "review-groups").iterdir())
        assert len(stored) == 1
        assert stored[0].name == data["image_url"].rsplit("/", 1)[1]

    async def test_rejects_non_image_content_type(
        self, client: AsyncClient, storage_dir, owner_headers: dict
    ):
        response = await client.post(
            "/api/v1/upload/image",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "File must be an image"

    async def test_rejects_disallowed_extension(
        self, client: AsyncClient, storage_dir, owner_headers: dict
    ):
        response = await client.post(
            "/api/v1/upload/image",
            files={"file": ("photo.bmp", _png_bytes(), "image/bmp")},
            headers=owner_headers,
        )
        assert response.status_code == 400

    async def test_rejects_fake_image(
        self, client: AsyncClient, storage_dir, owner_headers: dict
    ):
        response = await client.post(
            "/api/v1/upload/image",
            files={"file": ("photo.png", b"definitely not a png", "image/png")},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "File is not a valid image"
        assert list((storage_dir / "review-groups").iterdir()) == []

    async def test_rejects_oversized_file(
        self, client: AsyncClient, storage_dir, monkeypatch, owner_headers: dict
    ):
        monkeypatch.setattr(settings, "MAX_IMAGE_SIZE", 10)
        response = await client.post(
            "/api/v1/upload/image",
            files={"file": ("photo.png", _png_bytes(), "image/png")},
            headers=owner_headers,
        )
        assert response.status_code == 400

    async def test_requires_auth(self, client: AsyncClient, storage_dir):
        response = await client.post(
            "/api/v1/upload/image",
            files={"file": ("photo.png", _png_bytes(), "image/png")},
        )
        assert response.status_code == 401
