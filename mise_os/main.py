# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Mise OS Application Entry Point.

FastAPI app with lifespan, middleware, error handlers and all API routers.
Every restaurant-scoped router is mounted twice: under ``/api`` (hint via
header, query or singleton fallback) and under
``/api/restaurants/{restaurant_id}`` (hint via path).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from mise_os.api.collections import collection_routers
from mise_os.api.errors import (
    APIError,
    api_error_handler,
    domain_error_handler,
    validation_error_handler,
)
from mise_os.api.middleware import TraceMiddleware
from mise_os.api.observability import router as observability_router
from mise_os.api.public import router as public_router
from mise_os.api.restaurants import router as restaurants_router
from mise_os.core.config import settings
from mise_os.core.errors import MiseError
from mise_os.core.logging import setup_logging
from mise_os.storage.database import close_db, init_db

logger = logging.getLogger("mise.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup/shutdown of platform resources."""
    setup_logging(settings.LOG_LEVEL)
    await init_db()
    logger.info("[Mise OS] Platform ready (env=%s)", settings.MISE_ENV)
    yield
    await close_db()
    logger.info("[Mise OS] Shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Mise OS",
        description="Multi-restaurant operations platform",
        version="0.1.0",
        lifespan=lifespan,
    )

    # ── Middleware ───────────────────────────────────────────
    app.add_middleware(TraceMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error Handlers ──────────────────────────────────────
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(MiseError, domain_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)

    # ── Routes ──────────────────────────────────────────────
    scoped_routers = [restaurants_router, *collection_routers]
    for router in scoped_routers:
        app.include_router(router, prefix="/api")
    for router in scoped_routers:
        app.include_router(router, prefix="/api/restaurants/{%s}" % settings.TENANT_PATH_PARAM)
    app.include_router(public_router, prefix="/api")
    app.include_router(observability_router)
    return app


app = create_app()
