"""FastAPI middleware for request/response handling."""

from __future__ import annotations

import time

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from shortbox.core.tracing import generate_trace_id, trace_context

logger = structlog.get_logger("shortbox.middleware")

TRACE_HEADER = "X-Trace-ID"


class TracingMiddleware(BaseHTTPMiddleware):
    """Bind a trace id to every request and echo it in the response headers."""

    async def dispatch(self, request: Request, call_next):
        """Reuse an incoming X-Trace-ID header or generate a new trace id.

        All logs during request processing include this trace_id.
        """
        trace_id = request.headers.get(TRACE_HEADER) or generate_trace_id()

        with trace_context(trace_id):
            started = time.perf_counter()
            response = await call_next(request)
            response.headers[TRACE_HEADER] = trace_id

            logger.debug(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
