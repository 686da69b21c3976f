"""
inventory_access.db.repositories.profiles

Repository for `UserProfile` entities.

Responsibilities:
- Fetch a subject's profile and create it on first sign-in.
- Apply partial profile updates.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_access.auth.roles import Role
from inventory_access.db.base import utcnow
from inventory_access.db.models import UserProfile

# Columns a profile update may touch; everything else is managed by the store.
_UPDATABLE = frozenset({"full_name", "avatar_url", "role"})


class ProfileRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, subject_id: str) -> UserProfile | None:
        return await self._session.get(UserProfile, subject_id)

    async def create(self, *, subject_id: str, full_name: str | None = None) -> UserProfile:
        # New subjects start with no access until a manager promotes them.
        profile = UserProfile(id=subject_id, full_name=full_name, role=Role.intruso)
        self._session.add(profile)
        await self._session.flush()
        return profile

    async def update(self, subject_id: str, changes: dict[str, Any]) -> UserProfile | None:
        profile = await self._session.get(UserProfile, subject_id, with_for_update=True)
        if profile is None:
            return None
        for key, value in changes.items():
            if key not in _UPDATABLE:
                raise ValueError(f"profile column {key!r} is not updatable")
            setattr(profile, key, value)
        profile.updated_at = utcnow()
        await self._session.flush()
        return profile


# --- Module Notes -----------------------------------------------------------
# Profiles are never deleted here; sign-out only invalidates the client cache.
