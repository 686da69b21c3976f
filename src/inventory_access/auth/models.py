"""
inventory_access.auth.models

Auth domain models.

Responsibilities:
- Define the role profile of an authenticated subject (`Profile`).
- Define identity-provider events and the session snapshot observed by guards and UI.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime

from inventory_access.auth.roles import Role


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class Profile:
    """
    Role and display metadata for one subject.
    """

    subject_id: str
    display_name: str | None
    role: Role
    avatar_url: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def degraded(cls, subject_id: str) -> Profile:
        # Placeholder used when the profile lookup fails: most restrictive role.
        return cls(subject_id=subject_id, display_name="unknown", role=Role.intruso)


@dataclass(frozen=True, slots=True)
class ProfileUpdate:
    # `None` means "leave unchanged". Roles change through `SessionManager.set_role`.
    display_name: str | None = None
    avatar_url: str | None = None

    def as_changes(self) -> dict[str, object]:
        changes: dict[str, object] = {}
        if self.display_name is not None:
            changes["display_name"] = self.display_name
        if self.avatar_url is not None:
            changes["avatar_url"] = self.avatar_url
        return changes


@dataclass(frozen=True, slots=True)
class Credential:
    email: str
    password: str = field(repr=False)


class AuthEventKind(enum.StrEnum):
    signed_in = "SIGNED_IN"
    signed_out = "SIGNED_OUT"
    token_refreshed = "TOKEN_REFRESHED"
    user_updated = "USER_UPDATED"


@dataclass(frozen=True, slots=True)
class AuthEvent:
    kind: AuthEventKind
    subject_id: str | None


class SessionStatus(enum.StrEnum):
    uninitialized = "uninitialized"
    loading = "loading"
    anonymous = "anonymous"
    authenticated = "authenticated"


@dataclass(frozen=True, slots=True)
class SessionState:
    status: SessionStatus
    subject_id: str | None = None
    profile: Profile | None = None

    @property
    def is_resolving(self) -> bool:
        return self.status in (SessionStatus.uninitialized, SessionStatus.loading)

    @property
    def role(self) -> Role | None:
        return self.profile.role if self.profile is not None else None


# --- Module Notes -----------------------------------------------------------
# These models are shared by the session manager, guards and adoption service;
# keep them free of I/O.
