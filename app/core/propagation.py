"""Route wrapper that delivers every handler failure to the normalizer once."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from typing import TypeVar

from fastapi import Request
from fastapi import Response
from fastapi.routing import APIRoute

from app.core.errors import APIError
from app.core.errors import normalize

T = TypeVar("T")


async def propagate(operation: Callable[[], Awaitable[T]]) -> T:
    """Await ``operation`` and re-raise any failure as a normalized :class:`APIError`.

    An :class:`APIError` passes through untouched; anything else is normalized
    here and chained to its original cause.
    """
    try:
        return await operation()
    except APIError:
        raise
    except Exception as exc:
        raise normalize(exc).error from exc


class NormalizingRoute(APIRoute):
    """API route whose handler only ever fails with an :class:`APIError`.

    Covers dependency resolution (request validation), the endpoint itself and
    anything it awaits, so endpoints never attach their own error handling.
    """

    def get_route_handler(self) -> Callable[[Request], Awaitable[Response]]:
        handler = super().get_route_handler()

        async def normalized_handler(request: Request) -> Response:
            return await propagate(lambda: handler(request))

        return normalized_handler
