"""Middleware: request IDs and cache headers."""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

# Context var accessible from anywhere during a request lifecycle
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a unique request ID to every request/response cycle.

    Reads ``X-Request-ID`` from the incoming request headers; if absent,
    generates a new UUID4. The ID is echoed back on the response and exposed
    to log records through ``RequestIDLogFilter``.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = rid
        return response


class RequestIDLogFilter(logging.Filter):
    """Populate ``record.request_id`` ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class CacheControlMiddleware(BaseHTTPMiddleware):
    """Set ``Cache-Control`` on successful GET responses by path prefix.

    *rules* is an ordered list of ``(prefix, header_value)``; the first
    matching prefix wins. Responses that already carry the header are left
    alone.
    """

    def __init__(self, app: ASGIApp, rules: list[tuple[str, str]]) -> None:
        super().__init__(app)
        self._rules = rules

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        if request.method != "GET" or response.status_code != 200:
            return response
        if "cache-control" in response.headers:
            return response
        path = request.url.path
        for prefix, value in self._rules:
            if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
                response.headers["Cache-Control"] = value
                break
        return response
