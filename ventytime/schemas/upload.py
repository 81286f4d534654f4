"""Upload Schemas."""

from pydantic import BaseModel


class UploadResult(BaseModel):
    url: str
    thumbnail_url: str
