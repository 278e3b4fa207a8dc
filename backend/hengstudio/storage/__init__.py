# File-backed stores
from .project_store import ProjectStore
from .media_store import MediaStore
from .gallery_store import GalleryManifestStore, scan_gallery_directory, manifest_version

__all__ = [
    "ProjectStore",
    "MediaStore",
    "GalleryManifestStore",
    "scan_gallery_directory",
    "manifest_version",
]
