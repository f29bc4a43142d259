"""Error taxonomy, failure normalization, and exception handler registration."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jose import ExpiredSignatureError
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.exc import DataError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.validation import ValidationRejected
from app.core.validation import violation_messages
from app.db.errors import PersistenceError
from app.db.errors import PersistenceErrorCode
from app.db.errors import is_unique_violation
from app.db.errors import unique_violation_fields
from app.schemas.envelope import GENERIC_ERROR_MESSAGE
from app.schemas.envelope import render_failure

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """Closed set of failure categories rendered by the API."""

    BAD_REQUEST = (status.HTTP_400_BAD_REQUEST, "Bad request")
    UNAUTHORIZED = (status.HTTP_401_UNAUTHORIZED, "Authentication required")
    FORBIDDEN = (status.HTTP_403_FORBIDDEN, "You do not have permission to perform this action")
    NOT_FOUND = (status.HTTP_404_NOT_FOUND, "Resource not found")
    CONFLICT = (status.HTTP_409_CONFLICT, "Resource already exists")
    INTERNAL_ERROR = (status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)

    def __init__(self, status_code: int, default_message: str) -> None:
        self.status_code = status_code
        self.default_message = default_message

    @property
    def status(self) -> str:
        """Machine category tag: ``fail`` for client errors, ``error`` otherwise."""
        return "fail" if 400 <= self.status_code < 500 else "error"

    @property
    def is_operational(self) -> bool:
        return self is not ErrorKind.INTERNAL_ERROR

    @classmethod
    def from_status_code(cls, status_code: int) -> ErrorKind:
        for kind in cls:
            if kind.status_code == status_code:
                return kind
        if 400 <= status_code < 500:
            return cls.BAD_REQUEST
        return cls.INTERNAL_ERROR


class APIError(Exception):
    """A raised instance of an :class:`ErrorKind`.

    Build these through the factory functions below rather than subclassing.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        *,
        is_operational: bool | None = None,
        errors: Sequence[str] | None = None,
    ) -> None:
        self.kind = kind
        self.message = message or kind.default_message
        self.is_operational = kind.is_operational if is_operational is None else is_operational
        self.errors = list(errors) if errors else None
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def status(self) -> str:
        return self.kind.status


def bad_request(message: str | None = None, *, errors: Sequence[str] | None = None) -> APIError:
    return APIError(ErrorKind.BAD_REQUEST, message, errors=errors)


def unauthorized(message: str | None = None) -> APIError:
    return APIError(ErrorKind.UNAUTHORIZED, message)


def forbidden(message: str | None = None) -> APIError:
    return APIError(ErrorKind.FORBIDDEN, message)


def not_found(message: str | None = None) -> APIError:
    return APIError(ErrorKind.NOT_FOUND, message)


def conflict(message: str | None = None) -> APIError:
    return APIError(ErrorKind.CONFLICT, message)


def internal_error(message: str | None = None, *, is_operational: bool = False) -> APIError:
    return APIError(ErrorKind.INTERNAL_ERROR, message, is_operational=is_operational)


@dataclass(frozen=True)
class NormalizedFailure:
    """An :class:`APIError` plus the raw cause kept for diagnostics only."""

    error: APIError
    cause: BaseException | None = None

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def status_code(self) -> int:
        return self.error.status_code


def _conflict_message(fields: Sequence[str]) -> str:
    if fields:
        return f"A record with this {', '.join(fields)} already exists"
    return "A record with these values already exists"


def _from_persistence(failure: Exception) -> APIError | None:
    if isinstance(failure, PersistenceError):
        if failure.code is PersistenceErrorCode.UNIQUE_VIOLATION:
            return conflict(_conflict_message(failure.fields))
        if failure.code is PersistenceErrorCode.RECORD_NOT_FOUND:
            return not_found(failure.message or "Record not found")
        if failure.code is PersistenceErrorCode.MALFORMED_QUERY:
            return bad_request(failure.message or "Malformed query")
        return None
    if isinstance(failure, IntegrityError) and is_unique_violation(failure):
        return conflict(_conflict_message(unique_violation_fields(failure)))
    if isinstance(failure, NoResultFound):
        return not_found("Record not found")
    if isinstance(failure, DataError):
        return bad_request("Malformed query")
    return None


def _from_validation(failure: Exception) -> APIError | None:
    if isinstance(failure, ValidationRejected):
        messages: Sequence[str] = failure.messages
    elif isinstance(failure, RequestValidationError):
        messages = violation_messages(failure.errors())
    elif isinstance(failure, ValidationError):
        messages = violation_messages(failure.errors())
    else:
        return None
    messages = list(messages) or ["Validation failed"]
    return bad_request("; ".join(messages), errors=messages)


def _from_credentials(failure: Exception) -> APIError | None:
    if isinstance(failure, ExpiredSignatureError):
        return unauthorized("Your token has expired. Please log in again.")
    if isinstance(failure, JWTError):
        return unauthorized("Invalid token. Please log in again.")
    return None


def _from_http_exception(failure: Exception) -> APIError | None:
    if not isinstance(failure, StarletteHTTPException):
        return None
    kind = ErrorKind.from_status_code(failure.status_code)
    message = failure.detail if isinstance(failure.detail, str) and failure.detail else None
    return APIError(kind, message)


_MATCHERS = (
    _from_persistence,
    _from_validation,
    _from_credentials,
    _from_http_exception,
)


def normalize(failure: BaseException) -> NormalizedFailure:
    """Map any raised failure onto exactly one :class:`ErrorKind`.

    Matchers are tried in priority order and the first match wins; anything
    unrecognized becomes a non-operational internal error.
    """
    if isinstance(failure, APIError):
        return NormalizedFailure(error=failure, cause=failure.__cause__)
    if isinstance(failure, Exception):
        for matcher in _MATCHERS:
            error = matcher(failure)
            if error is not None:
                return NormalizedFailure(error=error, cause=failure)
    return NormalizedFailure(error=internal_error(str(failure) or None), cause=failure)


def log_failure(failure: NormalizedFailure, request: Request | None = None) -> None:
    """Log a normalized failure once, with the cause for non-operational errors."""
    where = f"{request.method} {request.url.path}" if request is not None else "request"
    if failure.error.is_operational:
        logger.warning(
            "%s failed with %s: %s",
            where,
            failure.status_code,
            failure.error.message,
        )
        return
    cause = failure.cause or failure.error
    logger.error(
        "%s failed with unexpected %s",
        where,
        type(cause).__name__,
        exc_info=(type(cause), cause, cause.__traceback__),
    )


def register_error_handlers(app: FastAPI, *, dev_mode: bool = False) -> None:
    """Attach handlers that render every failure through the shared envelope."""
    def respond(request: Request, failure: NormalizedFailure, headers: dict[str, str] | None = None) -> JSONResponse:
        log_failure(failure, request)
        return JSONResponse(
            status_code=failure.status_code,
            content=render_failure(failure, dev_mode=dev_mode),
            headers=headers,
        )

    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        return respond(request, normalize(exc))

    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            failure = NormalizedFailure(error=not_found(f"Route {request.url.path} not found"), cause=exc)
            return respond(request, failure)
        return respond(request, normalize(exc), headers=exc.headers)

    async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return respond(request, normalize(exc))

    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        return respond(request, normalize(exc))

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
