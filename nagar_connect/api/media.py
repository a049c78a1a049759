# nagar_connect/api/media.py
import logging
from typing import Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, File, UploadFile

from nagar_connect.api.deps import get_classifier, get_storage
from nagar_connect.core.errors import ValidationFailed
from nagar_connect.core.security import CurrentUser, get_current_user
from nagar_connect.models.common import utcnow
from nagar_connect.schemas.media import (
    ClassifyBody,
    ClassifyResponse,
    FileRefResponse,
    UploadResponse,
)
from nagar_connect.services.classifier import ImageClassifier
from nagar_connect.services.storage import MediaStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Media"])


def upload_folder(user: CurrentUser) -> str:
    return f"nagar-connect/{user.id}"


# =========================
# Upload
# =========================
@router.post("/media", response_model=UploadResponse)
async def upload_media(
    file: Optional[UploadFile] = File(None),
    user: CurrentUser = Depends(get_current_user),
    storage: MediaStorage = Depends(get_storage),
):
    if file is None:
        raise ValidationFailed("No file uploaded")

    data = await file.read()
    stored = await storage.upload(data, file.content_type, file.filename or "upload", upload_folder(user))

    return UploadResponse(
        file={
            "id": stored.id,
            "url": stored.url,
            "originalName": stored.original_name,
            "size": stored.size,
            "type": stored.type,
            "uploadedAt": utcnow(),
            "uploadedBy": user.id,
        }
    )


# public ids carry the folder, so the path segment may contain slashes
@router.get("/media/{public_id:path}", response_model=FileRefResponse)
async def get_media(
    public_id: str,
    user: CurrentUser = Depends(get_current_user),
    storage: MediaStorage = Depends(get_storage),
):
    return FileRefResponse(file={"id": public_id, "url": storage.url_for(public_id)})


@router.delete("/media/{public_id:path}")
async def delete_media(
    public_id: str,
    user: CurrentUser = Depends(get_current_user),
    storage: MediaStorage = Depends(get_storage),
):
    await storage.delete(public_id)
    logger.info("User %s deleted %s", user.id, public_id)
    return {"success": True, "message": "File deleted successfully"}


# =========================
# AI category suggestion
# =========================
def _check_image_url(value: Optional[str]) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationFailed("Image URL is required")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationFailed("Invalid image URL")
    return value


@router.post("/classify", response_model=ClassifyResponse)
async def classify_image(
    body: ClassifyBody,
    user: CurrentUser = Depends(get_current_user),
    classifier: ImageClassifier = Depends(get_classifier),
):
    image_url = _check_image_url(body.imageUrl)
    analysis = await classifier.classify(image_url)

    return ClassifyResponse(
        analysis={
            "suggestedCategory": analysis.category,
            "confidence": analysis.confidence,
            "description": analysis.description,
            "tags": analysis.tags,
            "timestamp": utcnow(),
        }
    )
