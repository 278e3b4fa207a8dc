"""
Gallery API

Directory-derived gallery listing plus the manifest used by the ordering tools.
"""
import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse

from ..errors import PayloadValidationError
from ..models.gallery import GalleryEntry, is_densely_numbered
from ..schemas.gallery import SaveGalleryResponse
from ..security import admin_token_header
from ..storage.gallery_store import GalleryManifestStore, scan_gallery_directory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["gallery"])


def get_manifest_store(request: Request) -> GalleryManifestStore:
    return request.app.state.gallery_manifest


def require_gallery_admin(request: Request, token: Optional[str] = Depends(admin_token_header)) -> None:
    """Admin gate for manifest saves, unless disabled for local dev tooling."""
    if request.app.state.settings.gallery_save_requires_admin:
        request.app.state.admin_gate.require(token)


def _etag(version: str) -> str:
    return f'"{version}"'


def _strip_etag(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    # "*" matches whatever version is current
    if value == "*":
        return None
    if value.startswith("W/"):
        value = value[2:]
    return value.strip('"') or None


@router.get("/gallery", response_model=List[GalleryEntry])
async def list_gallery(request: Request):
    """Numbered images found in the gallery directory, ordered by number."""
    gallery_dir = request.app.state.settings.gallery_dir
    try:
        return await asyncio.to_thread(scan_gallery_directory, gallery_dir)
    except OSError as e:
        logger.error(f"Failed to read gallery directory {gallery_dir}: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to read gallery", "detail": str(e)})


@router.get("/gallery/manifest", response_model=List[GalleryEntry])
async def get_gallery_manifest(response: Response, store: GalleryManifestStore = Depends(get_manifest_store)):
    """The saved gallery order. The ETag identifies this version for save-gallery."""
    entries, version = await asyncio.to_thread(store.load_versioned)
    response.headers["ETag"] = _etag(version)
    return entries


@router.post(
    "/save-gallery",
    response_model=SaveGalleryResponse,
    dependencies=[Depends(require_gallery_admin)],
)
async def save_gallery(
    entries: List[GalleryEntry],
    response: Response,
    if_match: Optional[str] = Header(None),
    store: GalleryManifestStore = Depends(get_manifest_store),
):
    """
    Replace the gallery manifest with the given order.

    Entries must already be numbered 1..N. Send If-Match with the manifest
    ETag to refuse the save when someone else saved in between.
    """
    if not is_densely_numbered(entries):
        raise PayloadValidationError(
            [{"path": "number", "message": "entries must be numbered 1..N in order"}],
            message="Invalid gallery order",
        )

    version = await asyncio.to_thread(store.save, entries, _strip_etag(if_match))
    response.headers["ETag"] = _etag(version)
    return SaveGalleryResponse(version=version)
