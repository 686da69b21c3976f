"""
inventory_access.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`): the session has left `loading` and the DB answers.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from inventory_access.api.deps import access_context
from inventory_access.context import AccessContext

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(context: AccessContext = Depends(access_context)) -> dict[str, str]:
    if context.session.state.is_resolving:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Session loading")
    if context.engine is not None:
        async with context.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    return {"status": "ready", "session": context.session.state.status.value}


# --- Module Notes -----------------------------------------------------------
# The UI shows its loading placeholder until /readyz answers.
