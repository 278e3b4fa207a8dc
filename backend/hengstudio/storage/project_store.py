"""
Project Store

File-backed durable store for portfolio projects.

The canonical document is a JSON array of projects. write_all() is the only
mutation primitive: before replacing the document, the current contents are
copied to a timestamped backup (best effort), and old backups are pruned so
only the most recent ones are kept.

Writes are serialized with an asyncio.Lock. update() runs a whole
read-modify-write under that lock so concurrent mutations cannot lose each
other's effects. Reads are lock-free snapshots.
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional, Tuple, TypeVar

from pydantic import ValidationError

from ..errors import ProjectNotFoundError, StorageError
from ..models.project import Project
from ..tracer import trace_disk, trace_step
from .json_document import read_json, write_json_atomic

logger = logging.getLogger(__name__)

R = TypeVar("R")

# (new sequence, value returned to the caller)
Mutator = Callable[[List[Project]], Tuple[List[Project], R]]

TRACE_MODULE = "storage.projects"


def backup_stamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp made filename safe (':' and '.' become '-')."""
    return moment.strftime("%Y-%m-%dT%H-%M-%S-%fZ")


class ProjectStore:
    """Owns the canonical projects document and its backups."""

    def __init__(self, path: Path, backup_dir: Path, retention: int = 20):
        self.path = Path(path)
        self.backup_dir = Path(backup_dir)
        self.retention = retention
        self._lock = asyncio.Lock()
        self._last_backup_at: Optional[datetime] = None

    @property
    def backup_prefix(self) -> str:
        return f"{self.path.stem}."

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def read_all(self) -> List[Project]:
        """Snapshot of every project, newest first. Bootstraps a missing document."""
        try:
            return await asyncio.to_thread(self._read_sync)
        except FileNotFoundError:
            async with self._lock:
                if not self.path.exists():
                    logger.info(f"Initializing empty projects document at {self.path}")
                    await asyncio.to_thread(self._write_sync, [])
            return await asyncio.to_thread(self._read_sync)

    async def read_one(self, project_id: str) -> Project:
        for project in await self.read_all():
            if project.id == project_id:
                return project
        raise ProjectNotFoundError()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def write_all(self, projects: List[Project]) -> None:
        """Replace the canonical document with projects."""
        async with self._lock:
            await asyncio.to_thread(self._write_sync, projects)

    async def update(self, mutate: Mutator) -> R:
        """
        Read, transform and write under the store's write lock.

        Args:
            mutate: Receives the current sequence and returns
                (new sequence, result). Exceptions abort before any write.

        Returns:
            The result part of mutate's return value.
        """
        async with self._lock:
            try:
                current = await asyncio.to_thread(self._read_sync)
            except FileNotFoundError:
                current = []
            trace_step(TRACE_MODULE, f"read {len(current)} records from {self.path.name}")
            updated, result = mutate(current)
            await asyncio.to_thread(self._write_sync, updated)
            return result

    # ------------------------------------------------------------------
    # Sync internals (run in worker threads)
    # ------------------------------------------------------------------

    def _read_sync(self) -> List[Project]:
        try:
            data = read_json(self.path)
        except FileNotFoundError:
            raise
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read projects: {e}") from e

        if not isinstance(data, list):
            logger.warning(f"{self.path} does not hold a JSON array, treating as empty")
            return []

        try:
            return [Project.model_validate(item) for item in data]
        except ValidationError as e:
            raise StorageError(f"Invalid project record in {self.path}") from e

    def _write_sync(self, projects: List[Project]) -> None:
        self._backup_current()
        try:
            write_json_atomic(self.path, [p.to_document() for p in projects])
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            raise StorageError(f"Failed to write projects: {e}") from e
        logger.debug(f"Wrote {len(projects)} projects to {self.path}")
        trace_disk(TRACE_MODULE, "write", self.path, f"{len(projects)} records")

    def _next_backup_time(self) -> datetime:
        now = datetime.now(timezone.utc)
        # Keep names unique and chronologically sortable within this process
        if self._last_backup_at is not None and now <= self._last_backup_at:
            now = self._last_backup_at + timedelta(microseconds=1)
        self._last_backup_at = now
        return now

    def _backup_current(self) -> None:
        """Copy the current document aside. Failures never block the write."""
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning(f"Skipping backup, cannot read {self.path}: {e}")
            return

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            name = f"{self.backup_prefix}{backup_stamp(self._next_backup_time())}.json"
            (self.backup_dir / name).write_bytes(raw)
            trace_disk(TRACE_MODULE, "backup", self.backup_dir / name)
            self._prune_backups()
        except OSError as e:
            logger.warning(f"Backup of {self.path} failed: {e}")

    def list_backups(self) -> List[Path]:
        """Backup files, most recent first."""
        if not self.backup_dir.is_dir():
            return []
        names = sorted(
            (
                entry.name
                for entry in self.backup_dir.iterdir()
                if entry.is_file()
                and entry.name.startswith(self.backup_prefix)
                and entry.name.endswith(".json")
            ),
            reverse=True,
        )
        return [self.backup_dir / name for name in names]

    def _prune_backups(self) -> None:
        for stale in self.list_backups()[self.retention:]:
            try:
                stale.unlink()
                trace_disk(TRACE_MODULE, "prune", stale)
            except OSError as e:
                logger.warning(f"Could not remove old backup {stale.name}: {e}")
