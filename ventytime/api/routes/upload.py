"""Upload Route — authenticated image upload returning full and thumbnail URLs."""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from ventytime.api.deps import get_current_user, read_upload
from ventytime.config import Settings, get_settings
from ventytime.models.user import User
from ventytime.schemas.upload import UploadResult
from ventytime.services.image_service import ImageService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/upload", tags=["upload"])


@router.post("", response_model=UploadResult)
async def upload_image(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    data = await read_upload(file, settings.max_upload_bytes)
    result = await ImageService(settings).upload(file.filename, data)
    logger.info(f"Image uploaded: {result.url}", extra={"user_id": user.id})
    return result
