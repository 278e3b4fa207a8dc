"""
Gallery Schemas

Pydantic models for gallery manifest API responses.
"""
from pydantic import BaseModel


class SaveGalleryResponse(BaseModel):
    """Result of saving the gallery manifest."""
    success: bool = True
    version: str
