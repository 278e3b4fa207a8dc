"""
Media API

Upload listing and image uploads. Both require the admin token.
"""
from typing import List

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from ..errors import UploadRejectedError
from ..models.media import MediaItem
from ..schemas.media import UploadResponse
from ..security import require_admin
from ..storage.media_store import MediaStore

router = APIRouter(prefix="/api", tags=["media"], dependencies=[Depends(require_admin)])

# Room for multipart boundaries and part headers around the file itself
MULTIPART_OVERHEAD = 64 * 1024


def get_media_store(request: Request) -> MediaStore:
    return request.app.state.media_store


@router.get("/media", response_model=List[MediaItem])
async def list_media(store: MediaStore = Depends(get_media_store)):
    """List uploaded files, most recently modified first."""
    return await store.list()


@router.post("/uploads", response_model=UploadResponse)
async def upload_media(request: Request, store: MediaStore = Depends(get_media_store)):
    """
    Upload one image in the multipart field "file".

    A declared Content-Length above the limit is refused before the body is read.
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit():
        store.reject_oversized(max(0, int(declared) - MULTIPART_OVERHEAD))

    form = await request.form()
    try:
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise UploadRejectedError("No file uploaded")
        item = await store.save_upload(upload, upload.filename, upload.content_type)
    finally:
        await form.close()

    return UploadResponse(item=item)
