"""
Project Service

Create/read/update/delete for portfolio projects.

Every mutation validates first and only then enters the store's
read-modify-write, so a rejected payload never touches the document.
Authorization happens before the service is called (see security.require_admin).
"""
import logging
from typing import Any, List, Optional, Tuple

from ..errors import ProjectNotFoundError, PayloadValidationError
from ..models.project import Project
from ..storage.project_store import ProjectStore
from ..tracer import trace_step, traced
from .validator import Invalid, ProjectValidator

logger = logging.getLogger(__name__)


def _index_of(projects: List[Project], project_id: str) -> int:
    for i, project in enumerate(projects):
        if project.id == project_id:
            return i
    raise ProjectNotFoundError()


class ProjectService:
    """Orchestrates ProjectValidator and ProjectStore."""

    def __init__(self, store: ProjectStore, validator: Optional[ProjectValidator] = None):
        self.store = store
        self.validator = validator or ProjectValidator()

    @staticmethod
    def _unwrap(result):
        if isinstance(result, Invalid):
            trace_step("services.projects", f"validation failed: {result.issues}")
            raise PayloadValidationError(result.issues)
        return result.value

    async def list(self) -> List[Project]:
        return await self.store.read_all()

    async def get(self, project_id: str) -> Project:
        return await self.store.read_one(project_id)

    @traced("services.projects")
    async def create(self, payload: Any) -> Project:
        """Validate, assign a new id and prepend to the list."""
        data = self._unwrap(self.validator.validate_create(payload))

        def prepend(projects: List[Project]) -> Tuple[List[Project], Project]:
            ids = {p.id for p in projects}
            project = data.to_project()
            while project.id in ids:
                project = data.to_project()
            return [project] + projects, project

        project = await self.store.update(prepend)
        logger.info(f"Created project {project.id} ({project.title})")
        return project

    @traced("services.projects")
    async def replace(self, project_id: str, payload: Any) -> Project:
        """Full replace; only the id survives from the old record."""
        data = self._unwrap(self.validator.validate_create(payload))

        def swap_in(projects: List[Project]) -> Tuple[List[Project], Project]:
            idx = _index_of(projects, project_id)
            updated = data.to_project(project_id=projects[idx].id)
            return projects[:idx] + [updated] + projects[idx + 1:], updated

        project = await self.store.update(swap_in)
        logger.info(f"Replaced project {project_id}")
        return project

    @traced("services.projects")
    async def patch(self, project_id: str, payload: Any) -> Project:
        """Merge provided fields onto the existing record."""
        data = self._unwrap(self.validator.validate_update(payload))

        def merge(projects: List[Project]) -> Tuple[List[Project], Project]:
            idx = _index_of(projects, project_id)
            updated = data.apply_to(projects[idx])
            return projects[:idx] + [updated] + projects[idx + 1:], updated

        project = await self.store.update(merge)
        logger.info(f"Patched project {project_id}: {sorted(data.model_fields_set)}")
        return project

    @traced("services.projects")
    async def remove(self, project_id: str) -> Project:
        """Delete a project and return the removed record."""
        def drop(projects: List[Project]) -> Tuple[List[Project], Project]:
            idx = _index_of(projects, project_id)
            return projects[:idx] + projects[idx + 1:], projects[idx]

        deleted = await self.store.update(drop)
        logger.info(f"Deleted project {project_id}")
        return deleted
