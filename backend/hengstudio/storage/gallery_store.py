"""
Gallery Storage

Two sources of gallery entries:

- scan_gallery_directory() derives entries from numerically named image files
  (001.jpg, 002.webp, ...) in the gallery directory.
- GalleryManifestStore owns gallery.json, the persisted display order that the
  ordering tools edit.

The manifest is saved by atomic replace under a single-writer lock. Each load
reports a content version so a saver can detect that someone else wrote in
between (optimistic concurrency). Without an expected version the last writer
wins.
"""
import hashlib
import json
import logging
import re
import threading
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

from pydantic import ValidationError

from ..errors import ManifestConflictError, StorageError
from ..models.gallery import GalleryEntry
from .json_document import read_json, write_json_atomic

logger = logging.getLogger(__name__)

NUMBERED_IMAGE = re.compile(r"^(\d+)\.(jpe?g|png|webp|avif)$", re.IGNORECASE)
CANONICAL_DIGITS = 3


def scan_gallery_directory(gallery_dir: Path, url_prefix: str = "/images/gallery") -> List[GalleryEntry]:
    """
    List numbered images in gallery_dir ordered by their number.

    When two files share a number, the canonical 3-digit name wins
    (010.jpg over 0010.jpg). Non-matching files are ignored.

    Raises:
        OSError: If the directory cannot be read.
    """
    by_number: Dict[int, Tuple[GalleryEntry, int]] = {}
    for entry in sorted(Path(gallery_dir).iterdir()):
        if not entry.is_file():
            continue
        match = NUMBERED_IMAGE.match(entry.name)
        if not match:
            continue
        digits = match.group(1)
        number = int(digits)
        if number < 1:
            continue
        candidate = GalleryEntry(name=entry.name, url=f"{url_prefix}/{quote(entry.name)}", number=number)

        current = by_number.get(number)
        if current is None or (len(digits) == CANONICAL_DIGITS and current[1] != CANONICAL_DIGITS):
            by_number[number] = (candidate, len(digits))

    return [by_number[n][0] for n in sorted(by_number)]


def manifest_version(entries: List[GalleryEntry]) -> str:
    """Content hash of a manifest, stable across formatting."""
    canonical = json.dumps([e.model_dump() for e in entries], sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class GalleryManifestStore:
    """Durable gallery ordering document (gallery.json)."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> List[GalleryEntry]:
        """Entries sorted by number. A missing manifest is empty."""
        return self.load_versioned()[0]

    def load_versioned(self) -> Tuple[List[GalleryEntry], str]:
        try:
            data = read_json(self.path)
        except FileNotFoundError:
            data = []
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read gallery manifest: {e}") from e

        if not isinstance(data, list):
            raise StorageError(f"{self.path} must be a JSON array")
        try:
            entries = [GalleryEntry.model_validate(item) for item in data]
        except ValidationError as e:
            raise StorageError(f"Invalid gallery entry in {self.path}") from e

        entries.sort(key=lambda e: e.number)
        return entries, manifest_version(entries)

    def version(self) -> str:
        return self.load_versioned()[1]

    def save(self, entries: List[GalleryEntry], expected_version: Optional[str] = None) -> str:
        """
        Replace the manifest with entries, verbatim.

        Args:
            entries: Full ordered sequence, already renumbered
            expected_version: Version the caller loaded; None skips the check

        Returns:
            Version of the saved manifest.

        Raises:
            ManifestConflictError: If expected_version is stale.
            StorageError: If the write fails.
        """
        with self._lock:
            if expected_version is not None and expected_version != self.version():
                raise ManifestConflictError()
            try:
                write_json_atomic(self.path, [e.model_dump() for e in entries])
            except OSError as e:
                raise StorageError(f"Failed to write gallery manifest: {e}") from e
        logger.info(f"Saved gallery manifest with {len(entries)} entries")
        return manifest_version(entries)
