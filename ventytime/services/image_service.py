"""Image Service — validates uploads and stores resized images off the event loop.

Invariants:
    - Extension and size are checked before any decoding (core/enforce_upload.py)
    - Decoding, resizing and disk writes run in a worker thread
    - Returned URLs are rooted at uploads_url_prefix ("/uploads" by default)
"""

import logging
from pathlib import PurePosixPath

from starlette.concurrency import run_in_threadpool

from ventytime.config import Settings
from ventytime.core.enforce_upload import image_extension, validate_image_upload
from ventytime.infrastructure.image_storage import (
    THUMBNAIL_PREFIX, delete_image, save_image,
)
from ventytime.schemas.upload import UploadResult

logger = logging.getLogger(__name__)


class ImageService:

    def __init__(self, settings: Settings):
        self.upload_dir = settings.upload_dir
        self.url_prefix = settings.uploads_url_prefix.rstrip("/")
        self.max_bytes = settings.max_upload_bytes

    def url_for(self, file_name: str) -> str:
        return f"{self.url_prefix}/{file_name}"

    async def upload(self, filename: str | None, data: bytes) -> UploadResult:
        error = validate_image_upload(filename, len(data), self.max_bytes)
        if error:
            raise error
        stored = await run_in_threadpool(
            save_image, data, image_extension(filename), self.upload_dir,
        )
        return UploadResult(
            url=self.url_for(stored.file_name),
            thumbnail_url=self.url_for(stored.thumbnail_name),
        )

    async def delete(self, url: str | None) -> bool:
        """Delete an image previously returned by upload(). Foreign URLs are ignored."""
        if not url or not url.startswith(f"{self.url_prefix}/"):
            return False
        file_name = PurePosixPath(url).name
        if file_name.startswith(THUMBNAIL_PREFIX):
            file_name = file_name[len(THUMBNAIL_PREFIX):]
        removed = await run_in_threadpool(delete_image, file_name, self.upload_dir)
        if removed:
            logger.info(f"Deleted image {file_name}")
        return removed
