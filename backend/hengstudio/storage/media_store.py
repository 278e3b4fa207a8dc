"""
Media Store

Directory-backed store for uploaded images.

Uploaded files get a fresh random name (uuid + original extension); the
client-supplied filename is only used to read the extension. Content is
streamed to a hidden .part file, size-checked chunk by chunk, and renamed into
place once complete.
"""
import asyncio
import logging
import os
import uuid
from pathlib import Path
from typing import List, Optional, Protocol
from urllib.parse import quote

from ..errors import UploadRejectedError
from ..models.media import MediaItem
from ..tracer import trace_disk, trace_rejected, trace_step

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".avif"}
CHUNK_SIZE = 1024 * 1024
MAX_EXTENSION_LENGTH = 12
TRACE_MODULE = "storage.media"


class AsyncReadable(Protocol):
    async def read(self, size: int = -1) -> bytes: ...


def media_url(name: str) -> str:
    return f"/uploads/{quote(name)}"


def check_image_upload(filename: Optional[str], content_type: Optional[str]) -> str:
    """
    Validate declared type and extension of an upload.

    Returns:
        The original extension (case preserved) to use for the stored name.

    Raises:
        UploadRejectedError: If either check fails.
    """
    ext = os.path.splitext(filename or "")[1][:MAX_EXTENSION_LENGTH]
    ok_type = bool(content_type) and content_type.startswith("image/")
    ok_ext = ext.lower() in ALLOWED_EXTENSIONS
    if not (ok_type and ok_ext):
        raise UploadRejectedError("Only image uploads are allowed")
    return ext


class MediaStore:
    """Lists and accepts uploads in a single directory."""

    def __init__(self, upload_dir: Path, max_bytes: int = 15 * 1024 * 1024):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    def reject_oversized(self, declared_length: Optional[int]) -> None:
        """Fail fast on a declared size that can only exceed the limit."""
        if declared_length is not None and declared_length > self.max_bytes:
            raise UploadRejectedError(self._too_large_message())

    def _too_large_message(self) -> str:
        return f"File too large (max {self.max_bytes // (1024 * 1024)} MiB)"

    async def list(self) -> List[MediaItem]:
        """Every upload, most recently modified first."""
        return await asyncio.to_thread(self._list_sync)

    def _list_sync(self) -> List[MediaItem]:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        items = []
        for entry in os.scandir(self.upload_dir):
            if not entry.is_file() or entry.name.startswith("."):
                continue
            stat = entry.stat()
            items.append(self._item(entry.name, stat))
        items.sort(key=lambda item: item.mtime_ms, reverse=True)
        return items

    @staticmethod
    def _item(name: str, stat: os.stat_result) -> MediaItem:
        return MediaItem(
            name=name,
            url=media_url(name),
            size=stat.st_size,
            mtime_ms=stat.st_mtime_ns / 1_000_000,
        )

    async def save_upload(
        self,
        source: AsyncReadable,
        filename: Optional[str],
        content_type: Optional[str],
    ) -> MediaItem:
        """
        Persist an uploaded image under a fresh name.

        Args:
            source: Async file-like object (e.g. Starlette UploadFile)
            filename: Client filename, used only for its extension
            content_type: Declared MIME type

        Raises:
            UploadRejectedError: Wrong type/extension or over the size limit.
        """
        try:
            ext = check_image_upload(filename, content_type)
        except UploadRejectedError as e:
            trace_rejected(TRACE_MODULE, f"{filename!r} ({content_type}): {e.message}")
            raise
        await asyncio.to_thread(self.upload_dir.mkdir, parents=True, exist_ok=True)

        name = f"{uuid.uuid4()}{ext}"
        final_path = self.upload_dir / name
        part_path = self.upload_dir / f".{name}.part"
        trace_step(TRACE_MODULE, f"streaming {filename!r} into {part_path.name}")

        size = 0
        out = await asyncio.to_thread(open, part_path, "wb")
        try:
            try:
                while True:
                    chunk = await source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        trace_rejected(TRACE_MODULE, f"{filename!r} exceeds {self.max_bytes} bytes")
                        raise UploadRejectedError(self._too_large_message())
                    await asyncio.to_thread(out.write, chunk)
            finally:
                await asyncio.to_thread(out.close)
            if size == 0:
                raise UploadRejectedError("No file uploaded")
            await asyncio.to_thread(os.replace, part_path, final_path)
        except BaseException:
            part_path.unlink(missing_ok=True)
            raise

        logger.info(f"Stored upload {name} ({size} bytes)")
        trace_disk(TRACE_MODULE, "store", final_path, f"{size} bytes")
        stat = await asyncio.to_thread(final_path.stat)
        return self._item(name, stat)
