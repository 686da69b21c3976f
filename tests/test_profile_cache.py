"""
tests.test_profile_cache

Expiry, invalidation and overwrite behavior of `ProfileCache`.
"""

from __future__ import annotations

from datetime import timedelta

from inventory_access.auth.cache import ProfileCache
from inventory_access.auth.models import Profile
from inventory_access.auth.roles import Role


def _profile(subject_id: str = "U1", role: Role = Role.membro) -> Profile:
    return Profile(subject_id=subject_id, display_name="Ana", role=role)


def test_entry_live_until_ttl_then_absent(cache: ProfileCache, clock) -> None:
    profile = _profile()
    cache.put("U1", profile, timedelta(seconds=10))

    clock.advance(9.999)
    assert cache.get("U1") == profile

    clock.advance(0.002)
    assert cache.get("U1") is None
    assert len(cache) == 0


def test_default_ttl_is_five_minutes(clock) -> None:
    cache = ProfileCache(clock=clock)
    cache.put("U1", _profile())

    clock.advance(299)
    assert "U1" in cache
    clock.advance(2)
    assert "U1" not in cache


def test_invalidate_removes_live_entry(cache: ProfileCache) -> None:
    cache.put("U1", _profile())
    cache.invalidate("U1")
    assert cache.get("U1") is None
    # Invalidating a missing key is a no-op.
    cache.invalidate("U1")


def test_last_put_wins(cache: ProfileCache) -> None:
    cache.put("U1", _profile(role=Role.intruso))
    cache.put("U1", _profile(role=Role.gerente))
    assert cache.get("U1").role is Role.gerente
    assert len(cache) == 1


def test_clear_and_purge(cache: ProfileCache, clock) -> None:
    cache.put("U1", _profile("U1"), timedelta(seconds=1))
    cache.put("U2", _profile("U2"), timedelta(seconds=100))

    clock.advance(5)
    assert cache.purge_expired() == 1
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0
