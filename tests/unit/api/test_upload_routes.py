"""Unit tests for the presign / finalize / delete endpoints."""

from typing import Any

import pytest
from fastapi import FastAPI

from mission_gallery.metadata.index import MetadataIndex


@pytest.mark.asyncio
async def test_generate_presigned_url_defaults_to_guest(client: Any) -> None:
    response = await client.post("/api/generate-presigned-url", json={"filename": "a.jpg", "contentType": "image/jpeg"})

    assert response.status_code == 200
    data = response.json()
    assert data["key"].startswith("guest-uploads/")
    assert data["uploadUrl"].startswith("https://store.test/guest-uploads/")
    assert data["publicUrl"] == f"https://cdn.test/{data['key']}"
    assert data["contentType"] == "image/jpeg"
    assert data["expiresIn"] == 3600
    assert data["headers"] == {"Content-Type": "image/jpeg"}


@pytest.mark.asyncio
async def test_generate_presigned_url_accepts_site_asset_alias(client: Any) -> None:
    response = await client.post(
        "/api/generate-presigned-url",
        json={"filename": "hero.png", "contentType": "image/png", "type": "site_asset"},
    )

    assert response.status_code == 200
    assert response.json()["key"].startswith("site-assets/")
    assert response.json()["headers"]["x-amz-acl"] == "public-read"


@pytest.mark.asyncio
async def test_generate_presigned_url_rejects_non_media(client: Any, gallery_app: FastAPI) -> None:
    response = await client.post(
        "/api/generate-presigned-url", json={"filename": "x.html", "contentType": "text/html", "type": "admin"}
    )

    assert response.status_code == 415
    assert response.json()["error"] == "InvalidMediaType"
    assert gallery_app.state.object_store.presign_calls == []


@pytest.mark.asyncio
async def test_generate_presigned_url_unknown_class(client: Any) -> None:
    response = await client.post("/api/generate-presigned-url", json={"filename": "a.jpg", "type": "root"})

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidUploadClass"


@pytest.mark.asyncio
async def test_finalize_guest_upload(client: Any, gallery_app: FastAPI) -> None:
    gallery_app.state.object_store.put("guest-uploads/abc.jpg")

    response = await client.post("/api/finalize-guest-upload", json={"key": "guest-uploads/abc.jpg", "owner": "Ana"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "image": {"url": "https://cdn.test/guest-uploads/abc.jpg", "filename": "abc.jpg", "owner": "Ana"},
    }
    records = await MetadataIndex(gallery_app.state.redis_client).guest_records()
    assert [(r.filename, r.owner) for r in records] == [("abc.jpg", "Ana")]


@pytest.mark.asyncio
async def test_finalize_without_object_is_conflict(client: Any) -> None:
    response = await client.post("/api/finalize-guest-upload", json={"key": "guest-uploads/missing.jpg"})

    assert response.status_code == 409
    assert response.json() == {"error": "UploadNotVerified", "message": "Upload did not complete for guest-uploads/missing.jpg"}


@pytest.mark.asyncio
async def test_finalize_admin_upload(client: Any, gallery_app: FastAPI) -> None:
    gallery_app.state.object_store.put("admin-uploads/abc.mp4")

    response = await client.post("/api/finalize-upload", json={"key": "admin-uploads/abc.mp4"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["url"] == "https://cdn.test/admin-uploads/abc.mp4"
    assert data["owner"] is None


@pytest.mark.asyncio
async def test_finalize_rejects_key_from_other_class(client: Any, gallery_app: FastAPI) -> None:
    gallery_app.state.object_store.put("guest-uploads/abc.jpg")

    response = await client.post("/api/finalize-upload", json={"key": "guest-uploads/abc.jpg", "type": "admin"})

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidUploadKey"


@pytest.mark.asyncio
async def test_delete_image(client: Any, gallery_app: FastAPI) -> None:
    gallery_app.state.object_store.put("guest-uploads/abc.jpg")
    await client.post("/api/finalize-guest-upload", json={"key": "guest-uploads/abc.jpg", "owner": "Ana"})

    response = await client.delete("/api/images/guest/abc.jpg")

    assert response.status_code == 200
    assert response.json() == {"message": "Deleted successfully", "filename": "abc.jpg"}
    assert "guest-uploads/abc.jpg" not in gallery_app.state.object_store.objects
    assert await MetadataIndex(gallery_app.state.redis_client).guest_records() == []


@pytest.mark.asyncio
async def test_delete_missing_image_is_404(client: Any) -> None:
    response = await client.delete("/api/images/admin/nope.jpg")

    assert response.status_code == 404
    assert response.json()["error"] == "ObjectNotFound"


@pytest.mark.asyncio
async def test_unexpected_error_is_500(client: Any, gallery_app: FastAPI) -> None:
    gallery_app.state.object_store.fail_head = RuntimeError("boom")

    response = await client.post("/api/finalize-guest-upload", json={"key": "guest-uploads/abc.jpg"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to finalize upload"}
