"""
inventory_access.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the process `AccessContext` and its members to routers.
- Map auth errors onto HTTP errors in one place.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_502_BAD_GATEWAY,
)

from inventory_access.auth.errors import (
    AccessError,
    AdoptionConflict,
    DataStoreError,
    Forbidden,
    ProviderError,
    RecordNotFound,
    Unauthenticated,
)
from inventory_access.auth.session import SessionManager
from inventory_access.context import AccessContext

_STATUS_BY_ERROR: tuple[tuple[type[AccessError], int], ...] = (
    (Unauthenticated, HTTP_401_UNAUTHORIZED),
    (Forbidden, HTTP_403_FORBIDDEN),
    (RecordNotFound, HTTP_404_NOT_FOUND),
    (AdoptionConflict, HTTP_409_CONFLICT),
    (ProviderError, HTTP_400_BAD_REQUEST),
    (DataStoreError, HTTP_502_BAD_GATEWAY),
)


def access_context(request: Request) -> AccessContext:
    # The context is created by the app lifespan in `inventory_access.api.app.create_app`.
    return request.app.state.access  # type: ignore[attr-defined]


def session_manager(context: AccessContext = Depends(access_context)) -> SessionManager:
    return context.session


def http_error(e: AccessError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            return HTTPException(status_code=status_code, detail=e.message)
    return HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=e.message)


# --- Module Notes -----------------------------------------------------------
# Routers raise `http_error(e) from e` so tracebacks keep the original cause.
