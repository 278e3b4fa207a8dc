# Gallery ordering
from .ordering import GallerySession, OrderingError, SelectMode

__all__ = ["GallerySession", "OrderingError", "SelectMode"]
