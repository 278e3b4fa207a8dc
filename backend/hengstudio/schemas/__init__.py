# Request/response schemas
from .project import ProjectCreate, ProjectUpdate, MetadataInput, ProjectDeleteResponse, ErrorResponse, FieldIssue
from .media import UploadResponse
from .gallery import SaveGalleryResponse

__all__ = [
    "ProjectCreate",
    "ProjectUpdate",
    "MetadataInput",
    "ProjectDeleteResponse",
    "ErrorResponse",
    "FieldIssue",
    "UploadResponse",
    "SaveGalleryResponse",
]
