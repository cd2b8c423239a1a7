# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Observability API — Metrics and health check.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from mise_os.core.config import settings
from mise_os.core.metrics import platform_metrics
from mise_os.storage.database import get_engine

logger = logging.getLogger("mise.api")

router = APIRouter(tags=["observability"])


@router.get("/health")
async def health_check():
    """Health check with database status."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.warning("Health check database probe failed: %s", e)
        database = "unavailable"
    return {
        "status": "ok" if database == "connected" else "degraded",
        "version": "0.1.0",
        "env": settings.MISE_ENV,
        "database": database,
        "metrics": platform_metrics.snapshot(),
    }


@router.get("/api/metrics")
async def get_metrics():
    """Return current platform metrics."""
    return platform_metrics.snapshot()
