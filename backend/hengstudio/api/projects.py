"""
Projects API

Endpoints for portfolio project management.
Reads are public; every mutation requires the admin token.
"""
from typing import Any, List

from fastapi import APIRouter, Body, Depends, Request, status

from ..models.project import Project
from ..schemas.project import ErrorResponse, ProjectDeleteResponse
from ..security import require_admin
from ..services.project_service import ProjectService

router = APIRouter(prefix="/api/projects", tags=["projects"])

# Documented error bodies for admin routes
ADMIN_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def get_project_service(request: Request) -> ProjectService:
    return request.app.state.project_service


@router.get("", response_model=List[Project], response_model_exclude_none=True)
async def list_projects(service: ProjectService = Depends(get_project_service)):
    """List all projects, newest first."""
    return await service.list()


@router.get(
    "/{project_id}",
    response_model=Project,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}},
)
async def get_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    """Get a project by ID."""
    return await service.get(project_id)


@router.post(
    "",
    response_model=Project,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
    responses=ADMIN_ERRORS,
)
async def create_project(
    payload: Any = Body(None),
    service: ProjectService = Depends(get_project_service),
):
    """Create a new project. It is listed first."""
    return await service.create(payload)


@router.put(
    "/{project_id}",
    response_model=Project,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
    responses=ADMIN_ERRORS,
)
async def replace_project(
    project_id: str,
    payload: Any = Body(None),
    service: ProjectService = Depends(get_project_service),
):
    """Replace every field of a project except its id."""
    return await service.replace(project_id, payload)


@router.patch(
    "/{project_id}",
    response_model=Project,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
    responses=ADMIN_ERRORS,
)
async def update_project(
    project_id: str,
    payload: Any = Body(None),
    service: ProjectService = Depends(get_project_service),
):
    """Update only the provided fields of a project."""
    return await service.patch(project_id, payload)


@router.delete(
    "/{project_id}",
    response_model=ProjectDeleteResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin)],
    responses=ADMIN_ERRORS,
)
async def delete_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    """Delete a project and return it."""
    deleted = await service.remove(project_id)
    return ProjectDeleteResponse(deleted=deleted)
