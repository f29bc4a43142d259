"""Repository behaviour and storage failure classification against SQLite."""

from __future__ import annotations

import re

import pytest
from sqlalchemy.orm import Session

from app.db.errors import PersistenceError
from app.db.errors import PersistenceErrorCode
from app.db.models.project import ProjectCategory
from app.db.models.project import ProjectPriority
from app.db.models.project import ProjectStatus
from app.db.models.project import new_object_id
from app.db.repository.projects import count_projects
from app.db.repository.projects import create_project
from app.db.repository.projects import delete_project
from app.db.repository.projects import get_project
from app.db.repository.projects import list_projects
from app.db.repository.projects import update_project


def _create(session: Session, email: str = "john@x.com"):
    project = create_project(
        session,
        client_name="John Doe",
        client_email=email,
        category=ProjectCategory.MOBILE_APP,
        priority=ProjectPriority.MEDIUM,
        terms_accepted=True,
    )
    session.commit()
    return project


def test_new_object_ids_are_24_hex_characters() -> None:
    ids = {new_object_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(re.fullmatch(r"[0-9a-f]{24}", value) for value in ids)


def test_create_sets_defaults(db_session: Session) -> None:
    project = _create(db_session)

    assert re.fullmatch(r"[0-9a-f]{24}", project.id)
    assert project.status is ProjectStatus.PENDING
    assert project.created_at is not None
    assert project.updated_at is not None


def test_duplicate_email_raises_unique_violation(db_session: Session) -> None:
    _create(db_session)

    with pytest.raises(PersistenceError) as excinfo:
        _create(db_session)

    assert excinfo.value.code is PersistenceErrorCode.UNIQUE_VIOLATION
    assert excinfo.value.fields == ("clientEmail",)
    db_session.rollback()
    assert count_projects(db_session) == 1


def test_get_returns_none_for_missing_project(db_session: Session) -> None:
    assert get_project(db_session, new_object_id()) is None


def test_list_and_count(db_session: Session) -> None:
    for index in range(3):
        _create(db_session, email=f"c{index}@x.com")

    assert count_projects(db_session) == 3
    assert len(list_projects(db_session, skip=0, take=2)) == 2
    assert len(list_projects(db_session, skip=2, take=2)) == 1


def test_update_applies_fields(db_session: Session) -> None:
    project = _create(db_session)

    updated = update_project(db_session, project.id, {"status": ProjectStatus.COMPLETED})
    db_session.commit()

    assert updated.status is ProjectStatus.COMPLETED
    assert updated.client_name == "John Doe"


def test_update_missing_project_raises_not_found(db_session: Session) -> None:
    with pytest.raises(PersistenceError) as excinfo:
        update_project(db_session, new_object_id(), {"client_name": "Nobody"})

    assert excinfo.value.code is PersistenceErrorCode.RECORD_NOT_FOUND


def test_delete_removes_project(db_session: Session) -> None:
    project = _create(db_session)

    delete_project(db_session, project.id)
    db_session.commit()

    assert get_project(db_session, project.id) is None


def test_delete_missing_project_raises_not_found(db_session: Session) -> None:
    with pytest.raises(PersistenceError) as excinfo:
        delete_project(db_session, new_object_id())

    assert excinfo.value.code is PersistenceErrorCode.RECORD_NOT_FOUND
