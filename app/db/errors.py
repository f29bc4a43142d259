"""Typed failures reported by the persistence layer."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
import re

from pydantic.alias_generators import to_camel
from sqlalchemy.exc import DataError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import NoResultFound

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w., ]+)")
_POSTGRES_UNIQUE_KEY = re.compile(r"Key \((?P<columns>[^)]+)\)=")
_CONSTRAINT_NAME = re.compile(r"uq_[a-z0-9]+?_(?P<columns>[a-z0-9_]+)")


class PersistenceErrorCode(str, Enum):
    UNIQUE_VIOLATION = "unique_violation"
    RECORD_NOT_FOUND = "record_not_found"
    MALFORMED_QUERY = "malformed_query"
    UNCLASSIFIED = "unclassified"


class PersistenceError(Exception):
    """Storage failure carrying a stable code and, for conflicts, the offending fields."""

    def __init__(
        self,
        code: PersistenceErrorCode,
        message: str = "",
        *,
        fields: Sequence[str] = (),
    ) -> None:
        super().__init__(message or code.value)
        self.code = code
        self.message = message
        self.fields = tuple(fields)


def is_unique_violation(exc: IntegrityError) -> bool:
    text = str(exc.orig).lower()
    return "unique" in text or "duplicate key" in text


def unique_violation_fields(exc: IntegrityError) -> list[str]:
    """Best-effort extraction of the API field names behind a unique violation."""
    text = str(exc.orig)
    columns: list[str] = []
    for pattern in (_SQLITE_UNIQUE, _POSTGRES_UNIQUE_KEY):
        match = pattern.search(text)
        if match:
            columns = [part.strip().split(".")[-1] for part in match.group("columns").split(",")]
            break
    if not columns:
        constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", None) or text
        match = _CONSTRAINT_NAME.search(constraint)
        if match:
            columns = [match.group("columns")]
    return [to_camel(column) for column in columns if column]


def translate_persistence_error(exc: Exception) -> PersistenceError:
    """Classify a SQLAlchemy failure into a :class:`PersistenceError`."""
    if isinstance(exc, IntegrityError) and is_unique_violation(exc):
        return PersistenceError(
            PersistenceErrorCode.UNIQUE_VIOLATION,
            "Unique constraint violated",
            fields=unique_violation_fields(exc),
        )
    if isinstance(exc, NoResultFound):
        return PersistenceError(PersistenceErrorCode.RECORD_NOT_FOUND, "Record not found")
    if isinstance(exc, DataError):
        return PersistenceError(PersistenceErrorCode.MALFORMED_QUERY, "Malformed query")
    return PersistenceError(PersistenceErrorCode.UNCLASSIFIED, str(exc))
