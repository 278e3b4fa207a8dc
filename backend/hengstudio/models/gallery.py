"""
Gallery Model

One image in the ordered gallery manifest.
"""
from typing import List

from pydantic import BaseModel, Field


class GalleryEntry(BaseModel):
    """
    A gallery image and its position.

    number is the 1-based position in the persisted ordering and must equal
    index + 1 for every entry of a saved manifest.
    """
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    number: int = Field(..., ge=1)


def renumber(entries: List[GalleryEntry]) -> List[GalleryEntry]:
    """Re-derive every number from its position."""
    return [entry.model_copy(update={"number": i + 1}) for i, entry in enumerate(entries)]


def is_densely_numbered(entries: List[GalleryEntry]) -> bool:
    return all(entry.number == i + 1 for i, entry in enumerate(entries))
