"""
Project Model

Portfolio projects are the records behind the site's project grid.
The canonical list lives in one JSON document owned by ProjectStore.
"""
import enum
import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Category(str, enum.Enum):
    """Portfolio categories shown on the site."""
    FASHION = "Fashion"
    WEDDING = "Wedding"
    KUNQU_OPERA = "Kunqu Opera"
    DANCE_THEATER = "Dance/Theater"
    STYLING = "Styling"


METADATA_FIELDS = ("iso", "aperture", "shutter", "date")


class ProjectMetadata(BaseModel):
    """Shooting metadata. Either complete or absent, never partial."""
    iso: str
    aperture: str
    shutter: str
    date: str


def new_project_id() -> str:
    return str(uuid.uuid4())


class Project(BaseModel):
    """
    A portfolio entry as persisted.

    The id is assigned by the store on create and never changes.
    JSON uses camelCase (imageUrl), absent metadata is omitted.
    """
    id: str = Field(default_factory=new_project_id)
    title: str
    category: Category
    image_url: str = Field(alias="imageUrl")
    metadata: Optional[ProjectMetadata] = None

    model_config = {"populate_by_name": True}

    def to_document(self) -> Dict[str, Any]:
        """Serialize for the canonical JSON document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title={self.title})>"
