"""Response envelope shared by every endpoint, success or failure."""

from __future__ import annotations

from collections.abc import Mapping
import math
import traceback
from typing import TYPE_CHECKING
from typing import Any
from typing import Generic
from typing import Literal
from typing import TypeVar

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from app.core.errors import NormalizedFailure

GENERIC_ERROR_MESSAGE = "Something went wrong"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
MAX_PAGE = 1_000_000

DataT = TypeVar("DataT")


class Pagination(BaseModel):
    """Pagination block attached to list responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int


class SuccessEnvelope(BaseModel, Generic[DataT]):
    """Success response envelope."""

    success: Literal[True] = True
    message: str | None = None
    data: DataT


class ListEnvelope(SuccessEnvelope[DataT], Generic[DataT]):
    """Success envelope for paginated collections."""

    pagination: Pagination


class FailureEnvelope(BaseModel):
    """Failure response envelope."""

    success: Literal[False] = False
    status: Literal["fail", "error"]
    message: str
    errors: list[str] | None = None
    stack: str | None = None


def _positive_int(raw: Any, default: int, ceiling: int) -> int:
    if isinstance(raw, bool):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    return min(value, ceiling)


def resolve_page_params(page: Any = None, limit: Any = None, *, default_limit: int = DEFAULT_LIMIT) -> tuple[int, int]:
    """Coerce raw query values to a positive ``(page, limit)`` pair.

    Values above ``MAX_PAGE`` or ``MAX_LIMIT`` are clamped so the resulting
    offset always fits a 64-bit storage integer.
    """
    default_limit = min(default_limit, MAX_LIMIT)
    return _positive_int(page, DEFAULT_PAGE, MAX_PAGE), _positive_int(limit, default_limit, MAX_LIMIT)


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit),
    )


def render_success(
    data: Any,
    message: str | None = None,
    pagination: Pagination | Mapping[str, int] | None = None,
) -> dict[str, Any]:
    """Render ``{success: true, data, message?, pagination?}``."""
    envelope: dict[str, Any] = {"success": True}
    if message is not None:
        envelope["message"] = message
    envelope["data"] = jsonable_encoder(data, by_alias=True)
    if pagination is not None:
        envelope["pagination"] = jsonable_encoder(pagination)
    return envelope


def render_failure(failure: NormalizedFailure, *, dev_mode: bool = False) -> dict[str, Any]:
    """Render ``{success: false, status, message}`` for a normalized failure.

    Non-operational failures only reveal their real message in development,
    and only development responses carry the ``stack`` diagnostic.
    """
    error = failure.error
    message = error.message
    if not error.is_operational and not dev_mode:
        message = GENERIC_ERROR_MESSAGE

    envelope: dict[str, Any] = {
        "success": False,
        "status": error.status,
        "message": message,
    }
    if error.errors:
        envelope["errors"] = list(error.errors)
    if dev_mode:
        cause = failure.cause or error
        envelope["stack"] = "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))
    return envelope
