"""Project API routes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import Query
from fastapi import Request
from sqlalchemy.orm import Session

from app.core.propagation import NormalizingRoute
from app.core.validation import validate_or_raise
from app.db.base import get_db_session
from app.schemas.envelope import ListEnvelope
from app.schemas.envelope import SuccessEnvelope
from app.schemas.envelope import build_pagination
from app.schemas.envelope import render_success
from app.schemas.envelope import resolve_page_params
from app.schemas.project import Project
from app.schemas.project import ProjectCreate
from app.schemas.project import ProjectIdentifier
from app.schemas.project import ProjectOptions
from app.schemas.project import ProjectUpdate
from app.schemas.project import project_options
from app.services.projects import create_project_service
from app.services.projects import delete_project_service
from app.services.projects import get_project_service
from app.services.projects import list_projects_service
from app.services.projects import update_project_service

router = APIRouter(prefix="/api", tags=["projects"], route_class=NormalizingRoute)


def valid_project_id(project_id: str) -> str:
    """Reject identifiers that are not 24 hexadecimal characters."""
    return validate_or_raise(ProjectIdentifier, {"id": project_id}).id


def valid_create_payload(body: Any = Body(default=None)) -> ProjectCreate:
    return validate_or_raise(ProjectCreate, body)


def valid_update_payload(body: Any = Body(default=None)) -> ProjectUpdate:
    return validate_or_raise(ProjectUpdate, body)


def _project(project) -> Project:
    return Project.model_validate(project)


@router.post(
    "/projects",
    response_model=SuccessEnvelope[Project],
    response_model_exclude_unset=True,
    status_code=201,
)
def create_project_endpoint(
    payload: ProjectCreate = Depends(valid_create_payload),
    session: Session = Depends(get_db_session),
) -> dict[str, Any]:
    """Create a project."""
    project = create_project_service(session, payload)
    return render_success(_project(project), message="Project created successfully")


@router.get(
    "/projects",
    response_model=ListEnvelope[list[Project]],
    response_model_exclude_unset=True,
)
def list_projects_endpoint(
    request: Request,
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    session: Session = Depends(get_db_session),
) -> dict[str, Any]:
    """List projects, newest first, one page at a time."""
    default_limit = request.app.state.settings.default_page_limit
    page_number, page_size = resolve_page_params(page, limit, default_limit=default_limit)
    projects, total = list_projects_service(session, page=page_number, limit=page_size)
    return render_success(
        [_project(project) for project in projects],
        pagination=build_pagination(page_number, page_size, total),
    )


@router.get(
    "/projects/options",
    response_model=SuccessEnvelope[ProjectOptions],
    response_model_exclude_unset=True,
)
def project_options_endpoint() -> dict[str, Any]:
    """List selectable category, priority, and status values with labels."""
    return render_success(project_options())


@router.get(
    "/projects/{project_id}",
    response_model=SuccessEnvelope[Project],
    response_model_exclude_unset=True,
)
def get_project_endpoint(
    project_id: str = Depends(valid_project_id),
    session: Session = Depends(get_db_session),
) -> dict[str, Any]:
    """Get a single project by id."""
    return render_success(_project(get_project_service(session, project_id)))


@router.put(
    "/projects/{project_id}",
    response_model=SuccessEnvelope[Project],
    response_model_exclude_unset=True,
)
def update_project_endpoint(
    project_id: str = Depends(valid_project_id),
    payload: ProjectUpdate = Depends(valid_update_payload),
    session: Session = Depends(get_db_session),
) -> dict[str, Any]:
    """Update the fields present in the request body."""
    project = update_project_service(session, project_id, payload)
    return render_success(_project(project), message="Project updated successfully")


@router.delete(
    "/projects/{project_id}",
    response_model=SuccessEnvelope[None],
    response_model_exclude_unset=True,
)
def delete_project_endpoint(
    project_id: str = Depends(valid_project_id),
    session: Session = Depends(get_db_session),
) -> dict[str, Any]:
    """Delete a project."""
    delete_project_service(session, project_id)
    return render_success(None, message="Project deleted successfully")
