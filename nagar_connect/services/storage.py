from __future__ import annotations

import hashlib
import logging
import time
from typing import Optional

import httpx
from pydantic import BaseModel

from nagar_connect.core.config import Settings
from nagar_connect.core.errors import (
    FileTooLarge,
    Misconfigured,
    NotFound,
    StorageServiceError,
    UnsupportedMediaType,
)

logger = logging.getLogger(__name__)

CLOUDINARY_API = "https://api.cloudinary.com/v1_1"

ALLOWED = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})


class StoredFile(BaseModel):
    id: str
    url: str
    original_name: str
    size: int
    type: str


def sign_params(params: dict, api_secret: str) -> str:
    """Cloudinary signature: sha1 of the sorted k=v pairs joined by & plus the secret."""
    payload = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.sha1(f"{payload}{api_secret}".encode("utf-8")).hexdigest()


class MediaStorage:
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        if not settings.cloudinary_cloud_name:
            raise Misconfigured(["CLOUDINARY_CLOUD_NAME"])
        self.cloud_name = settings.cloudinary_cloud_name
        self.upload_preset = settings.cloudinary_upload_preset
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret
        self.max_bytes = settings.max_upload_bytes
        self.timeout = settings.http_timeout_seconds
        self._client = client

    def validate(self, content_type: Optional[str], size: int) -> None:
        if content_type not in ALLOWED:
            raise UnsupportedMediaType()
        if size > self.max_bytes:
            raise FileTooLarge(
                f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB"
            )

    def url_for(self, public_id: str) -> str:
        return f"https://res.cloudinary.com/{self.cloud_name}/image/upload/{public_id}"

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(url, **kwargs)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, **kwargs)

    async def upload(
        self,
        data: bytes,
        content_type: Optional[str],
        filename: str,
        folder: str,
    ) -> StoredFile:
        # reject before spending a network call
        self.validate(content_type, len(data))

        url = f"{CLOUDINARY_API}/{self.cloud_name}/auto/upload"
        try:
            r = await self._post(
                url,
                data={"upload_preset": self.upload_preset, "folder": folder},
                files={"file": (filename, data, content_type)},
            )
        except httpx.HTTPError as exc:
            logger.error("Cloudinary upload transport error: %s", exc)
            raise StorageServiceError() from exc

        if r.status_code != 200:
            logger.error("Cloudinary upload failed (%s): %s", r.status_code, r.text[:300])
            raise StorageServiceError()

        body = r.json()
        logger.info("Stored %s as %s", filename, body.get("public_id"))
        return StoredFile(
            id=body["public_id"],
            url=body["secure_url"],
            original_name=filename,
            size=len(data),
            type=content_type,
        )

    async def delete(self, public_id: str) -> bool:
        if not (self.api_key and self.api_secret):
            raise Misconfigured(["CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"])

        params = {"public_id": public_id, "timestamp": int(time.time())}
        payload = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }

        url = f"{CLOUDINARY_API}/{self.cloud_name}/image/destroy"
        try:
            r = await self._post(url, data=payload)
        except httpx.HTTPError as exc:
            logger.error("Cloudinary delete transport error: %s", exc)
            raise StorageServiceError("Delete failed") from exc

        if r.status_code != 200:
            logger.error("Cloudinary delete failed (%s): %s", r.status_code, r.text[:300])
            raise StorageServiceError("Delete failed")

        if r.json().get("result") != "ok":
            raise NotFound("File not found or already deleted")

        logger.info("Deleted stored file %s", public_id)
        return True
