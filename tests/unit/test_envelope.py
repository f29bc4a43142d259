"""Unit tests for success/failure envelope rendering and pagination."""

from __future__ import annotations

import math

import pytest

from app.core.errors import NormalizedFailure
from app.core.errors import bad_request
from app.core.errors import conflict
from app.core.errors import normalize
from app.schemas.envelope import GENERIC_ERROR_MESSAGE
from app.schemas.envelope import MAX_LIMIT
from app.schemas.envelope import MAX_PAGE
from app.schemas.envelope import build_pagination
from app.schemas.envelope import render_failure
from app.schemas.envelope import render_success
from app.schemas.envelope import resolve_page_params


def test_success_envelope_minimal_shape() -> None:
    assert render_success({"id": "abc"}) == {"success": True, "data": {"id": "abc"}}


def test_success_envelope_with_message_and_pagination() -> None:
    envelope = render_success([], message="Listed", pagination=build_pagination(2, 5, 11))

    assert envelope == {
        "success": True,
        "message": "Listed",
        "data": [],
        "pagination": {"page": 2, "limit": 5, "total": 11, "totalPages": 3},
    }


def test_success_envelope_keeps_null_data() -> None:
    envelope = render_success(None, message="Project deleted successfully")

    assert envelope == {"success": True, "message": "Project deleted successfully", "data": None}


@pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 99, 100, 101])
@pytest.mark.parametrize("limit", [1, 3, 10, 25])
def test_total_pages_is_ceiling_of_total_over_limit(total: int, limit: int) -> None:
    assert build_pagination(1, limit, total).total_pages == math.ceil(total / limit)


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        (None, None, (1, 10)),
        ("3", "20", (3, 20)),
        ("abc", "x", (1, 10)),
        ("0", "-5", (1, 10)),
        ("", "", (1, 10)),
        ("2.5", "7", (1, 7)),
        (4, 15, (4, 15)),
    ],
)
def test_page_params_default_when_missing_or_invalid(page: object, limit: object, expected: tuple[int, int]) -> None:
    assert resolve_page_params(page, limit) == expected


def test_operational_failure_renders_true_message() -> None:
    envelope = render_failure(normalize(conflict("A record with this clientEmail already exists")))

    assert envelope == {
        "success": False,
        "status": "fail",
        "message": "A record with this clientEmail already exists",
    }


def test_validation_failure_lists_each_violation() -> None:
    error = bad_request("a; b", errors=["a", "b"])

    envelope = render_failure(NormalizedFailure(error=error))

    assert envelope["errors"] == ["a", "b"]
    assert envelope["status"] == "fail"


def test_non_operational_failure_is_redacted_outside_development() -> None:
    failure = normalize(RuntimeError("connection string leaked"))

    envelope = render_failure(failure, dev_mode=False)

    assert envelope == {"success": False, "status": "error", "message": GENERIC_ERROR_MESSAGE}


def test_development_mode_reveals_message_and_stack() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        failure = normalize(exc)

    envelope = render_failure(failure, dev_mode=True)

    assert envelope["message"] == "boom"
    assert envelope["status"] == "error"
    assert "RuntimeError: boom" in envelope["stack"]


def test_production_envelope_never_has_stack() -> None:
    try:
        raise ValueError("bad")
    except ValueError as exc:
        failure = normalize(exc)

    assert "stack" not in render_failure(failure, dev_mode=False)
    assert "stack" not in render_failure(normalize(conflict()), dev_mode=False)


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        ("99999999999999999999", "5", (MAX_PAGE, 5)),
        ("2", "100000", (2, MAX_LIMIT)),
        (str(MAX_PAGE), str(MAX_LIMIT), (MAX_PAGE, MAX_LIMIT)),
    ],
)
def test_page_params_are_clamped_to_storage_safe_bounds(page: str, limit: str, expected: tuple[int, int]) -> None:
    assert resolve_page_params(page, limit) == expected


def test_configured_default_limit_is_clamped() -> None:
    assert resolve_page_params(None, None, default_limit=500) == (1, MAX_LIMIT)
