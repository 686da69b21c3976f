"""
inventory_access.api.schemas

Request/response models shared by the routers.

Responsibilities:
- Serialize session snapshots, profiles and guard decisions for the UI.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from inventory_access.auth.guards import GuardDecision
from inventory_access.auth.models import Profile, SessionState


class ProfileResponse(BaseModel):
    subject_id: str
    display_name: str | None
    avatar_url: str | None
    role: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_profile(cls, profile: Profile) -> ProfileResponse:
        return cls(
            subject_id=profile.subject_id,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            role=profile.role.value,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class SessionResponse(BaseModel):
    status: str
    subject_id: str | None
    profile: ProfileResponse | None

    @classmethod
    def from_state(cls, state: SessionState) -> SessionResponse:
        return cls(
            status=state.status.value,
            subject_id=state.subject_id,
            profile=ProfileResponse.from_profile(state.profile) if state.profile else None,
        )


class CredentialRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=6, max_length=256)


class ResetPasswordRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)


class GuardDecisionResponse(BaseModel):
    path: str
    state: str
    redirect_to: str | None
    return_to: str | None

    @classmethod
    def from_decision(cls, path: str, decision: GuardDecision) -> GuardDecisionResponse:
        return cls(
            path=path,
            state=decision.state.value,
            redirect_to=decision.redirect_to,
            return_to=decision.return_to,
        )
