# Studio Models
from .project import Project, ProjectMetadata, Category, METADATA_FIELDS
from .media import MediaItem
from .gallery import GalleryEntry, renumber, is_densely_numbered

__all__ = [
    "Project",
    "ProjectMetadata",
    "Category",
    "METADATA_FIELDS",
    "MediaItem",
    "GalleryEntry",
    "renumber",
    "is_densely_numbered",
]
