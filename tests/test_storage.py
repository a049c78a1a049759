import hashlib

import httpx
import pytest

from nagar_connect.core.errors import (
    FileTooLarge,
    Misconfigured,
    NotFound,
    StorageServiceError,
    UnsupportedMediaType,
)
from nagar_connect.services.storage import MediaStorage, sign_params


def refuse(request):
    raise AssertionError("no network call expected")


async def test_unsupported_type_rejected_before_network(settings, mock_http):
    storage = MediaStorage(settings, client=mock_http(refuse))

    with pytest.raises(UnsupportedMediaType):
        await storage.upload(b"PK..", "application/zip", "evidence.zip", "nagar-connect/u1")


async def test_oversize_rejected_before_network(settings, mock_http):
    storage = MediaStorage(settings.model_copy(update={"max_upload_bytes": 8}), client=mock_http(refuse))

    with pytest.raises(FileTooLarge):
        await storage.upload(b"123456789", "image/png", "big.png", "nagar-connect/u1")


async def test_upload_posts_to_cloudinary(settings, mock_http):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "public_id": "nagar-connect/u1/abc123",
                "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/nagar-connect/u1/abc123.jpg",
            },
        )

    storage = MediaStorage(settings, client=mock_http(handler))
    stored = await storage.upload(b"\xff\xd8jpeg", "image/jpeg", "pothole.jpg", "nagar-connect/u1")

    assert stored.id == "nagar-connect/u1/abc123"
    assert stored.url.endswith("abc123.jpg")
    assert stored.original_name == "pothole.jpg"
    assert stored.size == 6
    assert stored.type == "image/jpeg"

    request = seen[0]
    assert request.url.path == "/v1_1/demo/auto/upload"
    body = request.read()
    assert b'name="upload_preset"' in body
    assert b"nagar_connect" in body
    assert b"nagar-connect/u1" in body


async def test_upload_rejection_is_storage_error(settings, mock_http):
    storage = MediaStorage(
        settings, client=mock_http(lambda r: httpx.Response(400, json={"error": {"message": "bad preset"}}))
    )

    with pytest.raises(StorageServiceError):
        await storage.upload(b"x", "text/plain", "note.txt", "nagar-connect/u1")


def test_signature_is_sha1_of_sorted_params():
    expected = hashlib.sha1(b"public_id=a/b&timestamp=1700000000secret").hexdigest()
    assert sign_params({"timestamp": 1700000000, "public_id": "a/b"}, "secret") == expected


async def test_delete_sends_signed_request(settings, mock_http):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"result": "ok"})

    storage = MediaStorage(settings, client=mock_http(handler))

    assert await storage.delete("nagar-connect/u1/abc123") is True
    body = seen[0].read().decode()
    assert seen[0].url.path == "/v1_1/demo/image/destroy"
    assert "api_key=123456" in body
    assert "signature=" in body


async def test_delete_not_ok_is_not_found(settings, mock_http):
    storage = MediaStorage(settings, client=mock_http(lambda r: httpx.Response(200, json={"result": "not found"})))

    with pytest.raises(NotFound):
        await storage.delete("nagar-connect/u1/missing")


async def test_delete_requires_api_credentials(settings, mock_http):
    storage = MediaStorage(settings.model_copy(update={"cloudinary_api_secret": None}), client=mock_http(refuse))

    with pytest.raises(Misconfigured):
        await storage.delete("nagar-connect/u1/abc123")


def test_url_for(settings):
    storage = MediaStorage(settings)
    assert storage.url_for("nagar-connect/u1/abc") == "https://res.cloudinary.com/demo/image/upload/nagar-connect/u1/abc"
