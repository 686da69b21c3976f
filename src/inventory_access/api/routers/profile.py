"""
inventory_access.api.routers.profile

Profile endpoints for the signed-in subject.

Responsibilities:
- Resolve the current profile (cache first).
- Apply self-service profile edits and manager role changes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from inventory_access.api.deps import http_error, session_manager
from inventory_access.api.schemas import ProfileResponse
from inventory_access.auth.errors import AccessError, Unauthenticated
from inventory_access.auth.models import ProfileUpdate
from inventory_access.auth.roles import Role
from inventory_access.auth.session import SessionManager

router = APIRouter(tags=["profile"])


class ProfilePatchRequest(BaseModel):
    display_name: str | None = Field(default=None, max_length=256)
    avatar_url: str | None = Field(default=None, max_length=2048)


class RoleChangeRequest(BaseModel):
    role: Role


@router.get("/v1/profile", response_model=ProfileResponse)
async def get_profile(session: SessionManager = Depends(session_manager)) -> ProfileResponse:
    profile = await session.refresh_profile()
    if profile is None:
        raise http_error(Unauthenticated())
    return ProfileResponse.from_profile(profile)


@router.patch("/v1/profile", response_model=ProfileResponse)
async def patch_profile(
    body: ProfilePatchRequest,
    session: SessionManager = Depends(session_manager),
) -> ProfileResponse:
    try:
        profile = await session.update_profile(
            ProfileUpdate(display_name=body.display_name, avatar_url=body.avatar_url)
        )
    except AccessError as e:
        raise http_error(e) from e
    return ProfileResponse.from_profile(profile)


@router.put("/v1/users/{subject_id}/role", response_model=ProfileResponse)
async def change_role(
    subject_id: str,
    body: RoleChangeRequest,
    session: SessionManager = Depends(session_manager),
) -> ProfileResponse:
    try:
        profile = await session.set_role(subject_id, body.role)
    except AccessError as e:
        raise http_error(e) from e
    return ProfileResponse.from_profile(profile)
