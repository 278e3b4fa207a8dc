"""
Media Schemas

Pydantic models for upload API responses.
"""
from pydantic import BaseModel

from ..models.media import MediaItem


class UploadResponse(BaseModel):
    """Result of an upload."""
    ok: bool = True
    item: MediaItem
