"""
Media Model

An uploaded image file in the uploads directory.
"""
from pydantic import BaseModel, Field


class MediaItem(BaseModel):
    """Uploaded asset. Name is server-generated and unique."""
    name: str
    url: str
    size: int
    mtime_ms: float = Field(alias="mtimeMs")

    model_config = {"populate_by_name": True}
