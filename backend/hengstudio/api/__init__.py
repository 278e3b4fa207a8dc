# API Routes
from .projects import router as projects_router
from .media import router as media_router
from .gallery import router as gallery_router

__all__ = [
    "projects_router",
    "media_router",
    "gallery_router",
]
