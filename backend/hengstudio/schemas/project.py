"""
Project Schemas

Pydantic models for project API requests and responses.
Strings are trimmed before length checks; unknown keys are ignored.
"""
from typing import Any, List, Optional

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, field_validator, model_validator

from ..models.project import Category, METADATA_FIELDS, Project, ProjectMetadata

_absolute_url = TypeAdapter(AnyUrl)

IMAGE_URL_MESSAGE = "imageUrl must be an absolute URL or a local path starting with /uploads/"
METADATA_MESSAGE = "metadata must be either omitted/empty or include iso/aperture/shutter/date"


def is_valid_image_url(value: str) -> bool:
    """Local upload path or a well-formed absolute URL."""
    if value.startswith("/uploads/"):
        return True
    try:
        _absolute_url.validate_python(value)
    except ValueError:
        return False
    return True


class MetadataInput(BaseModel):
    """Shooting metadata as submitted. All four fields or none."""
    iso: str = ""
    aperture: str = ""
    shutter: str = ""
    date: str = ""

    model_config = {"extra": "ignore", "str_strip_whitespace": True}

    @model_validator(mode="after")
    def all_or_nothing(self) -> "MetadataInput":
        filled = [name for name in METADATA_FIELDS if getattr(self, name)]
        if filled and len(filled) != len(METADATA_FIELDS):
            raise ValueError(METADATA_MESSAGE)
        return self

    def normalized(self) -> Optional[ProjectMetadata]:
        """All-blank metadata means absent."""
        if not self.iso:
            return None
        return ProjectMetadata(
            iso=self.iso,
            aperture=self.aperture,
            shutter=self.shutter,
            date=self.date,
        )


class ProjectCreate(BaseModel):
    """Request to create or fully replace a project."""
    title: str = Field(..., min_length=1, max_length=120)
    category: Category
    image_url: str = Field(..., alias="imageUrl", min_length=1)
    metadata: Optional[MetadataInput] = None

    model_config = {"extra": "ignore", "str_strip_whitespace": True, "populate_by_name": True}

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, v: str) -> str:
        if not is_valid_image_url(v):
            raise ValueError(IMAGE_URL_MESSAGE)
        return v

    def to_project(self, project_id: Optional[str] = None) -> Project:
        """Build the stored record; a new id is generated when none is given."""
        fields = {
            "title": self.title,
            "category": self.category,
            "image_url": self.image_url,
            "metadata": self.metadata.normalized() if self.metadata else None,
        }
        if project_id is not None:
            fields["id"] = project_id
        return Project(**fields)


class ProjectUpdate(BaseModel):
    """Request to patch a project. At least one known field is required."""
    title: Optional[str] = Field(None, min_length=1, max_length=120)
    category: Optional[Category] = None
    image_url: Optional[str] = Field(None, alias="imageUrl", min_length=1)
    metadata: Optional[MetadataInput] = None

    model_config = {"extra": "ignore", "str_strip_whitespace": True, "populate_by_name": True}

    @field_validator("title", "category", "image_url", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, v: str) -> str:
        if not is_valid_image_url(v):
            raise ValueError(IMAGE_URL_MESSAGE)
        return v

    @model_validator(mode="after")
    def at_least_one_field(self) -> "ProjectUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field is required")
        return self

    def apply_to(self, current: Project) -> Project:
        """Merge provided fields onto an existing record. Metadata is replaced wholesale."""
        changes = {}
        for name in ("title", "category", "image_url"):
            if name in self.model_fields_set:
                changes[name] = getattr(self, name)
        if "metadata" in self.model_fields_set:
            changes["metadata"] = self.metadata.normalized() if self.metadata else None
        return current.model_copy(update=changes)


class FieldIssue(BaseModel):
    """One field-level validation problem."""
    path: str
    message: str


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""
    error: str
    issues: Optional[List[FieldIssue]] = None


class ProjectDeleteResponse(BaseModel):
    """Result of deleting a project."""
    ok: bool = True
    deleted: Project
