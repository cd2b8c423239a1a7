# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
API Middleware — Trace ID propagation and request logging.
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("mise.api")


class TraceMiddleware(BaseHTTPMiddleware):
    """
    Generates or propagates X-Trace-Id header for every request.
    Also logs request duration and the resolved restaurant, if any.
    """

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get("X-Trace-Id") or str(uuid.uuid4())
        request.state.trace_id = trace_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000

        response.headers["X-Trace-Id"] = trace_id
        logger.info(
            "%s %s -> %d (%.0fms)",
            request.method, request.url.path, response.status_code, elapsed,
            extra={
                "trace_id": trace_id,
                "tenant_id": getattr(request.state, "tenant_id", None),
            },
        )
        return response
