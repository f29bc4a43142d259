"""Service helpers for project API operations.

Nothing here catches storage failures: they propagate to the route wrapper,
which normalizes them, and the session dependency rolls the transaction back.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.core.errors import not_found
from app.db.models.project import Project
from app.db.repository.projects import PROJECT_NOT_FOUND
from app.db.repository.projects import count_projects
from app.db.repository.projects import create_project
from app.db.repository.projects import delete_project
from app.db.repository.projects import get_project
from app.db.repository.projects import list_projects
from app.db.repository.projects import update_project
from app.schemas.project import ProjectCreate
from app.schemas.project import ProjectUpdate


def create_project_service(session: Session, payload: ProjectCreate) -> Project:
    """Create and persist a new project."""
    project = create_project(
        session,
        client_name=payload.client_name,
        client_email=payload.client_email,
        category=payload.category,
        priority=payload.priority,
        terms_accepted=payload.terms_accepted,
    )
    session.commit()
    return project


def list_projects_service(session: Session, *, page: int, limit: int) -> tuple[list[Project], int]:
    """Return one page of projects and the total project count."""
    projects = list_projects(session, skip=(page - 1) * limit, take=limit)
    return projects, count_projects(session)


def get_project_service(session: Session, project_id: str) -> Project:
    """Fetch a project or raise not found."""
    project = get_project(session, project_id)
    if project is None:
        raise not_found(PROJECT_NOT_FOUND)
    return project


def update_project_service(session: Session, project_id: str, payload: ProjectUpdate) -> Project:
    """Apply the fields present in ``payload`` to an existing project."""
    project = update_project(session, project_id, payload.changes())
    session.commit()
    return project


def delete_project_service(session: Session, project_id: str) -> None:
    """Delete an existing project."""
    delete_project(session, project_id)
    session.commit()
