# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
API Error Handling — Unified error structure.

Domain errors from ``mise_os.core.errors`` are translated here; nothing
below the API layer knows about status codes.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from mise_os.core.errors import (
    AccessDenied,
    AuthenticationFailed,
    InvalidReorder,
    MiseError,
    NotFound,
    StorageFailure,
    TenantContextRequired,
)


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.trace_id = trace_id or str(uuid.uuid4())
        super().__init__(message)


def _trace_id(request: Request) -> Optional[str]:
    return getattr(request.state, "trace_id", None)


def to_api_error(exc: MiseError, trace_id: Optional[str] = None) -> APIError:
    """Map a domain error to its HTTP representation."""
    if isinstance(exc, TenantContextRequired):
        return APIError(
            "TENANT_CONTEXT_REQUIRED", exc.message, 400,
            details={"accessible_restaurant_ids": exc.accessible_ids},
            trace_id=trace_id,
        )
    if isinstance(exc, AccessDenied):
        return APIError("ACCESS_DENIED", exc.message, 403, trace_id=trace_id)
    if isinstance(exc, AuthenticationFailed):
        return APIError("UNAUTHORIZED", exc.message, 401, trace_id=trace_id)
    if isinstance(exc, InvalidReorder):
        return APIError(
            "INVALID_REORDER", exc.message, 422,
            details={
                "missing": exc.missing,
                "unexpected": exc.unexpected,
                "duplicates": exc.duplicates,
            },
            trace_id=trace_id,
        )
    if isinstance(exc, NotFound):
        return APIError("NOT_FOUND", exc.message, 404, trace_id=trace_id)
    if isinstance(exc, StorageFailure):
        return APIError(
            "STORAGE_FAILURE", "Storage temporarily unavailable", 503, trace_id=trace_id,
        )
    return APIError("INTERNAL_ERROR", exc.message, 500, trace_id=trace_id)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Global exception handler for APIError."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": exc.code,
            "message": exc.message,
            "trace_id": exc.trace_id,
            "details": exc.details,
        },
        headers=headers,
    )


async def domain_error_handler(request: Request, exc: MiseError) -> JSONResponse:
    """Global exception handler for MiseError."""
    return await api_error_handler(request, to_api_error(exc, _trace_id(request)))


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Item payloads are validated inside the manager, outside FastAPI's own checks."""
    error = APIError(
        "VALIDATION_ERROR", "Invalid item payload", 422,
        details={"errors": exc.errors(include_url=False, include_context=False)},
        trace_id=_trace_id(request),
    )
    return await api_error_handler(request, error)
