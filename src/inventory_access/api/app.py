"""
inventory_access.api.app

FastAPI app factory for the inventory access service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Start and close the process-wide `AccessContext` with the app lifespan.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from inventory_access.api.routers.health import router as health_router
from inventory_access.api.routers.navigation import router as navigation_router
from inventory_access.api.routers.notifications import router as notifications_router
from inventory_access.api.routers.profile import router as profile_router
from inventory_access.api.routers.records import router as records_router
from inventory_access.api.routers.session import router as session_router
from inventory_access.context import AccessContext
from inventory_access.observability.logging import configure_logging, get_logger
from inventory_access.observability.middleware import RequestContextMiddleware
from inventory_access.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings, context: AccessContext | None = None) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        access = context or AccessContext.from_settings(settings)
        app.state.access = access
        log.info("startup", env=settings.env)
        await access.start()
        try:
            yield
        finally:
            await access.close()
            log.info("shutdown")

    app = FastAPI(
        title="Inventory Access",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(session_router)
    app.include_router(profile_router)
    app.include_router(navigation_router)
    app.include_router(records_router)
    app.include_router(notifications_router)
    return app


# --- Module Notes -----------------------------------------------------------
# Tests pass a prebuilt `AccessContext` (fake provider, temp database); the
# lifespan still owns its start/close.
