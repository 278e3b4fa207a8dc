"""
Studio CMS Client

Async HTTP client for the studio API, used by admin scripts and tooling.
Sends X-Admin-Token when a token is configured and turns error bodies into
StudioAPIError. Idempotent reads are retried on transport failures.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .models.gallery import GalleryEntry
from .models.media import MediaItem
from .models.project import Project
from .security import ADMIN_TOKEN_HEADER

logger = logging.getLogger(__name__)


class StudioAPIError(Exception):
    """Non-2xx response from the studio API."""

    def __init__(self, status_code: int, message: str, issues: Optional[List[Dict[str, str]]] = None):
        self.status_code = status_code
        self.message = message
        self.issues = issues or []
        super().__init__(f"{status_code}: {message}")


def _project_body(project: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in project.items() if k != "id"}


class StudioClient:
    """
    Client for the studio CMS REST API.

    Usage:
        async with StudioClient("http://localhost:8787", admin_token="...") as cms:
            created = await cms.create_project({"title": "A", "category": "Fashion", "imageUrl": "https://x/y.jpg"})
    """

    def __init__(
        self,
        base_url: str,
        admin_token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {}
        token = (admin_token or "").strip()
        if token:
            headers[ADMIN_TOKEN_HEADER] = token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "StudioClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("error") or f"{response.status_code} {response.reason_phrase}"
        logger.debug(f"{response.request.method} {response.request.url} -> {response.status_code}: {message}")
        raise StudioAPIError(response.status_code, message, body.get("issues"))

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get(self, path: str) -> httpx.Response:
        response = await self._client.get(path)
        self._raise_for_error(response)
        return response

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = await self._client.request(method, path, **kwargs)
        self._raise_for_error(response)
        return response

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def list_projects(self) -> List[Project]:
        response = await self._get("/api/projects")
        return [Project.model_validate(p) for p in response.json()]

    async def get_project(self, project_id: str) -> Project:
        response = await self._get(f"/api/projects/{quote(project_id, safe='')}")
        return Project.model_validate(response.json())

    async def create_project(self, data: Dict[str, Any]) -> Project:
        response = await self._send("POST", "/api/projects", json=_project_body(data))
        return Project.model_validate(response.json())

    async def update_project(self, project_id: str, data: Dict[str, Any]) -> Project:
        """Full replace (PUT)."""
        response = await self._send("PUT", f"/api/projects/{quote(project_id, safe='')}", json=_project_body(data))
        return Project.model_validate(response.json())

    async def patch_project(self, project_id: str, changes: Dict[str, Any]) -> Project:
        response = await self._send("PATCH", f"/api/projects/{quote(project_id, safe='')}", json=changes)
        return Project.model_validate(response.json())

    async def delete_project(self, project_id: str) -> Project:
        response = await self._send("DELETE", f"/api/projects/{quote(project_id, safe='')}")
        return Project.model_validate(response.json()["deleted"])

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    async def list_media(self) -> List[MediaItem]:
        response = await self._get("/api/media")
        return [MediaItem.model_validate(m) for m in response.json()]

    async def upload_media(self, path: Path, content_type: str) -> MediaItem:
        path = Path(path)
        response = await self._send(
            "POST",
            "/api/uploads",
            files={"file": (path.name, path.read_bytes(), content_type)},
        )
        return MediaItem.model_validate(response.json()["item"])

    # ------------------------------------------------------------------
    # Gallery
    # ------------------------------------------------------------------

    async def list_gallery(self) -> List[GalleryEntry]:
        response = await self._get("/api/gallery")
        return [GalleryEntry.model_validate(e) for e in response.json()]

    async def get_gallery_manifest(self) -> Tuple[List[GalleryEntry], Optional[str]]:
        """Saved gallery order and its ETag."""
        response = await self._get("/api/gallery/manifest")
        entries = [GalleryEntry.model_validate(e) for e in response.json()]
        return entries, response.headers.get("etag")

    async def save_gallery(self, entries: List[GalleryEntry], etag: Optional[str] = None) -> str:
        """Save a renumbered order. Pass the loaded ETag to refuse stale saves."""
        headers = {"If-Match": etag} if etag else None
        response = await self._send(
            "POST",
            "/api/save-gallery",
            json=[e.model_dump() for e in entries],
            headers=headers,
        )
        return response.json()["version"]
