"""Repository primitives for project entities."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.errors import PersistenceError
from app.db.errors import PersistenceErrorCode
from app.db.errors import translate_persistence_error
from app.db.models.project import Project
from app.db.models.project import ProjectCategory
from app.db.models.project import ProjectPriority

PROJECT_NOT_FOUND = "Project not found"


@contextmanager
def _storage_errors() -> Generator[None, None, None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise translate_persistence_error(exc) from exc


def create_project(
    session: Session,
    *,
    client_name: str,
    client_email: str,
    category: ProjectCategory,
    priority: ProjectPriority,
    terms_accepted: bool,
) -> Project:
    """Create and return a project row."""
    project = Project(
        client_name=client_name,
        client_email=client_email,
        category=category,
        priority=priority,
        terms_accepted=terms_accepted,
    )
    with _storage_errors():
        session.add(project)
        session.flush()
        session.refresh(project)
    return project


def get_project(session: Session, project_id: str) -> Project | None:
    """Fetch a project by id."""
    with _storage_errors():
        return session.get(Project, project_id)


def list_projects(session: Session, *, skip: int = 0, take: int = 10) -> list[Project]:
    """List projects, newest first."""
    stmt = select(Project).order_by(Project.created_at.desc(), Project.id.desc()).offset(skip).limit(take)
    with _storage_errors():
        return list(session.scalars(stmt))


def count_projects(session: Session) -> int:
    """Count all projects."""
    with _storage_errors():
        return session.scalar(select(func.count()).select_from(Project)) or 0


def update_project(session: Session, project_id: str, fields: dict[str, Any]) -> Project:
    """Apply ``fields`` to an existing project.

    Raises ``PersistenceError(RECORD_NOT_FOUND)`` when the project does not exist.
    """
    with _storage_errors():
        project = session.get(Project, project_id)
        if project is None:
            raise PersistenceError(PersistenceErrorCode.RECORD_NOT_FOUND, PROJECT_NOT_FOUND)
        for name, value in fields.items():
            setattr(project, name, value)
        session.flush()
        session.refresh(project)
    return project


def delete_project(session: Session, project_id: str) -> None:
    """Delete a project.

    Raises ``PersistenceError(RECORD_NOT_FOUND)`` when the project does not exist.
    """
    with _storage_errors():
        project = session.get(Project, project_id)
        if project is None:
            raise PersistenceError(PersistenceErrorCode.RECORD_NOT_FOUND, PROJECT_NOT_FOUND)
        session.delete(project)
        session.flush()
