"""
inventory_access.api.routers.session

Session endpoints for the UI.

Responsibilities:
- Report the current session snapshot.
- Forward sign-in/sign-up/sign-out/password-reset to the session manager.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_400_BAD_REQUEST

from inventory_access.api.deps import session_manager
from inventory_access.api.schemas import CredentialRequest, ResetPasswordRequest, SessionResponse
from inventory_access.auth.models import Credential
from inventory_access.auth.session import SessionManager

router = APIRouter(prefix="/v1/session", tags=["session"])


def _failed(detail: str) -> HTTPException:
    # The provider message has already been queued for the UI as a notification.
    return HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=detail)


@router.get("", response_model=SessionResponse)
async def get_session(session: SessionManager = Depends(session_manager)) -> SessionResponse:
    return SessionResponse.from_state(session.state)


@router.post("/sign-in", response_model=SessionResponse)
async def sign_in(
    body: CredentialRequest,
    session: SessionManager = Depends(session_manager),
) -> SessionResponse:
    if not await session.sign_in(Credential(email=body.email, password=body.password)):
        raise _failed("Sign-in failed")
    return SessionResponse.from_state(session.state)


@router.post("/sign-up", response_model=SessionResponse)
async def sign_up(
    body: CredentialRequest,
    session: SessionManager = Depends(session_manager),
) -> SessionResponse:
    if not await session.sign_up(Credential(email=body.email, password=body.password)):
        raise _failed("Sign-up failed")
    return SessionResponse.from_state(session.state)


@router.post("/sign-out", response_model=SessionResponse)
async def sign_out(session: SessionManager = Depends(session_manager)) -> SessionResponse:
    # The local session ends even if the provider call failed.
    await session.sign_out()
    return SessionResponse.from_state(session.state)


@router.post("/reset-password")
async def reset_password(
    body: ResetPasswordRequest,
    session: SessionManager = Depends(session_manager),
) -> dict[str, str]:
    if not await session.reset_password(body.email):
        raise _failed("Password reset failed")
    return {"status": "sent"}
