"""
inventory_access.auth.cache

Time-bounded profile cache.

Responsibilities:
- Map subject id -> profile with a per-entry expiry.
- Never hand out an expired entry (expiry is checked on read).
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

from inventory_access.auth.models import Profile

DEFAULT_TTL = timedelta(minutes=5)


@dataclass(frozen=True, slots=True)
class CacheEntry:
    profile: Profile
    expires_at: float


class ProfileCache:
    """
    Single dict keyed by subject id; one entry per subject, last write wins.

    Expiry is lazy: `get` drops an entry once `now >= expires_at`.
    `purge_expired` is available for callers that want a periodic sweep.
    """

    def __init__(
        self,
        *,
        default_ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._default_ttl = default_ttl
        self._clock = clock

    def get(self, subject_id: str) -> Profile | None:
        entry = self._entries.get(subject_id)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[subject_id]
            return None
        return entry.profile

    def put(self, subject_id: str, profile: Profile, ttl: timedelta | None = None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        self._entries[subject_id] = CacheEntry(
            profile=profile, expires_at=self._clock() + ttl.total_seconds()
        )

    def invalidate(self, subject_id: str) -> None:
        self._entries.pop(subject_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if now >= e.expires_at]
        for k in expired:
            del self._entries[k]
        return len(expired)

    def __contains__(self, subject_id: object) -> bool:
        return isinstance(subject_id, str) and self.get(subject_id) is not None

    def __len__(self) -> int:
        self.purge_expired()
        return len(self._entries)


# --- Module Notes -----------------------------------------------------------
# Only the session manager and explicit profile-mutation paths write here; the
# process has one logical writer so no locking is needed.
