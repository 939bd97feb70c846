"""Request logging middleware feeding the HTTP metrics."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .monitoring import observe_request

logger = logging.getLogger("vietqr.http")


def route_path(request: Request) -> str:
    """Templated route when the router matched one, raw path otherwise."""

    route = request.scope.get("route")
    return route.path if route else request.url.path


def _log_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, route, status and latency of every request."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            fields = self._record(request, 500, start)
            logger.exception("request failed", extra=fields)
            raise

        fields = self._record(request, response.status_code, start)
        logger.log(_log_level(response.status_code), "request completed", extra=fields)
        return response

    @staticmethod
    def _record(request: Request, status_code: int, start: float) -> dict[str, Any]:
        # The router fills scope["route"] during call_next.
        duration_ms = (time.perf_counter() - start) * 1000
        path = route_path(request)
        observe_request(request.method, path, status_code, duration_ms)
        return {
            "method": request.method,
            "path": path,
            "status_code": status_code,
            "client": request.client.host if request.client else None,
            "duration_ms": round(duration_ms, 2),
        }
