"""Request tracing middleware."""
from __future__ import annotations

import uuid
from typing import Awaitable, Callable

import structlog
from aiohttp import web

REQUEST_ID_HEADER = "X-Request-ID"

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def create_trace_middleware(service_name: str):
    """Bind a request id to the structlog context for the lifetime of each request."""

    @web.middleware
    async def trace_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            service=service_name,
            request_id=request_id,
            method=request.method,
            path=request.path,
        )
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            exc.headers[REQUEST_ID_HEADER] = request_id
            raise
        finally:
            structlog.contextvars.clear_contextvars()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    return trace_middleware
