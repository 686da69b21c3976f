"""
tests.test_session_manager

Session state machine, profile resolution through the cache, and provider
error handling.
"""

from __future__ import annotations

import asyncio

import pytest

from inventory_access.auth.errors import Forbidden, ProviderError, Unauthenticated
from inventory_access.auth.models import (
    AuthEvent,
    AuthEventKind,
    Credential,
    ProfileUpdate,
    SessionState,
    SessionStatus,
)
from inventory_access.auth.roles import Role
from inventory_access.auth.session import SessionManager
from inventory_access.services.notifications import NotificationLevel


@pytest.mark.asyncio
async def test_start_without_session_is_anonymous(session: SessionManager) -> None:
    seen: list[SessionState] = []
    session.subscribe(seen.append)

    await session.start()

    assert [s.status for s in seen] == [SessionStatus.loading, SessionStatus.anonymous]
    assert session.state.subject_id is None


@pytest.mark.asyncio
async def test_start_with_session_resolves_and_caches_profile(
    session: SessionManager, provider, store
) -> None:
    provider.current = "U1"
    store.add_profile("U1", Role.membro, "Ana")

    await session.start()

    assert session.state.status is SessionStatus.authenticated
    assert session.state.role is Role.membro
    assert session.cache.get("U1") is not None
    assert store.fetch_calls == ["U1"]


@pytest.mark.asyncio
async def test_bootstrap_provider_error_degrades_to_anonymous(
    session: SessionManager, provider
) -> None:
    provider.bootstrap_error = ProviderError("service unavailable")
    await session.start()
    assert session.state.status is SessionStatus.anonymous


@pytest.mark.asyncio
async def test_profile_created_lazily_with_lowest_role(session: SessionManager, provider, store):
    provider.current = "NEW"
    await session.start()

    assert session.state.role is Role.intruso
    assert "NEW" in store.profiles


@pytest.mark.asyncio
async def test_refresh_uses_cache_before_store(session: SessionManager, provider, store) -> None:
    provider.current = "U1"
    store.add_profile("U1", Role.membro)
    await session.start()

    await session.refresh_profile()
    await session.refresh_profile()

    assert store.fetch_calls == ["U1"]


@pytest.mark.asyncio
async def test_refresh_after_expiry_hits_store(session: SessionManager, provider, store, clock):
    provider.current = "U1"
    store.add_profile("U1", Role.membro)
    await session.start()

    clock.advance(301)
    await session.refresh_profile()

    assert store.fetch_calls == ["U1", "U1"]


@pytest.mark.asyncio
async def test_signed_out_event_clears_cache(session: SessionManager, provider, store) -> None:
    provider.current = "U1"
    store.add_profile("U1", Role.gerente)
    await session.start()
    session.cache.put("OTHER", store.add_profile("OTHER", Role.membro))

    await provider.emit(AuthEventKind.signed_out, None)

    assert session.state.status is SessionStatus.anonymous
    assert session.state.profile is None
    assert len(session.cache) == 0


@pytest.mark.asyncio
async def test_new_subject_event_switches_session(session: SessionManager, provider, store):
    store.add_profile("U1", Role.membro)
    store.add_profile("U2", Role.gerente)
    await session.start()

    await provider.emit(AuthEventKind.signed_in, "U1")
    assert session.state.subject_id == "U1"

    await provider.emit(AuthEventKind.signed_in, "U2")
    assert session.state.subject_id == "U2"
    assert session.state.role is Role.gerente


@pytest.mark.asyncio
async def test_token_refresh_for_same_subject_is_quiet(session: SessionManager, provider, store):
    provider.current = "U1"
    store.add_profile("U1", Role.membro)
    await session.start()
    seen: list[SessionState] = []
    session.subscribe(seen.append)

    await provider.emit(AuthEventKind.token_refreshed, "U1")

    assert seen == []
    assert store.fetch_calls == ["U1"]


@pytest.mark.asyncio
async def test_user_updated_for_same_subject_refetches_profile(
    session: SessionManager, provider, store
) -> None:
    provider.current = "U1"
    store.add_profile("U1", Role.membro, "Ana")
    await session.start()
    store.add_profile("U1", Role.membro, "Ana Souza")

    await provider.emit(AuthEventKind.user_updated, "U1")

    assert store.fetch_calls == ["U1", "U1"]
    assert session.state.profile.display_name == "Ana Souza"
    assert session.cache.get("U1").display_name == "Ana Souza"


@pytest.mark.asyncio
async def test_lookup_failure_yields_degraded_profile(session: SessionManager, provider, store):
    provider.current = "U1"
    store.add_profile("U1", Role.gerente)
    store.fail_lookups = True

    await session.start()

    profile = session.state.profile
    assert profile is not None
    assert profile.role is Role.intruso
    assert profile.display_name == "unknown"
    # Degraded placeholders are never cached.
    assert session.cache.get("U1") is None


@pytest.mark.asyncio
async def test_stale_lookup_result_is_discarded(session: SessionManager, store) -> None:
    store.add_profile("U1", Role.gerente)
    store.add_profile("U2", Role.membro)
    await session.start()

    gate = store.gate = asyncio.Event()
    slow = asyncio.create_task(session.handle_event(AuthEvent(AuthEventKind.signed_in, "U1")))
    await asyncio.sleep(0)
    assert store.fetch_calls == ["U1"]

    # U2 signs in while the U1 lookup is still in flight.
    store.gate = None
    await session.handle_event(AuthEvent(AuthEventKind.signed_in, "U2"))
    gate.set()
    await slow

    assert session.state.subject_id == "U2"
    assert session.state.role is Role.membro
    assert session.cache.get("U1") is None


@pytest.mark.asyncio
async def test_update_profile_writes_through_and_invalidates(
    session: SessionManager, provider, store
) -> None:
    provider.current = "U1"
    store.add_profile("U1", Role.membro, "Ana")
    await session.start()

    updated = await session.update_profile(ProfileUpdate(display_name="Ana Souza"))

    assert updated.display_name == "Ana Souza"
    assert session.state.profile.display_name == "Ana Souza"
    assert store.profiles["U1"].display_name == "Ana Souza"
    assert session.cache.get("U1") is None


@pytest.mark.asyncio
async def test_update_profile_requires_session(session: SessionManager) -> None:
    await session.start()
    with pytest.raises(Unauthenticated):
        await session.update_profile(ProfileUpdate(display_name="x"))


@pytest.mark.asyncio
async def test_only_managers_change_roles(session: SessionManager, provider, store) -> None:
    provider.current = "U1"
    store.add_profile("U1", Role.membro)
    store.add_profile("U2", Role.intruso)
    await session.start()

    with pytest.raises(Forbidden):
        await session.set_role("U2", Role.membro)

    store.add_profile("U1", Role.gerente)
    session.cache.invalidate("U1")
    await session.refresh_profile()
    session.cache.put("U2", store.profiles["U2"])

    changed = await session.set_role("U2", Role.membro)

    assert changed.role is Role.membro
    assert session.cache.get("U2") is None


@pytest.mark.asyncio
async def test_sign_in_failure_surfaces_provider_message(
    session: SessionManager, provider, notifier
) -> None:
    await session.start()

    ok = await session.sign_in(Credential(email="ana@example.com", password="wrong-password"))

    assert ok is False
    [note] = notifier.drain()
    assert note.level is NotificationLevel.error
    assert note.message == "Invalid login credentials"
    assert session.state.status is SessionStatus.anonymous


@pytest.mark.asyncio
async def test_sign_in_and_sign_out(session: SessionManager, provider, store) -> None:
    provider.accounts["ana@example.com"] = "U1"
    store.add_profile("U1", Role.membro)
    await session.start()

    assert await session.sign_in(Credential(email="ana@example.com", password="secret1"))
    assert session.state.subject_id == "U1"

    assert await session.sign_out()
    assert session.state.status is SessionStatus.anonymous
    assert len(session.cache) == 0


@pytest.mark.asyncio
async def test_reset_password_notifies(session: SessionManager, provider, notifier) -> None:
    assert await session.reset_password("ana@example.com")
    assert provider.reset_requests == ["ana@example.com"]
    assert notifier.drain()[0].level is NotificationLevel.success


@pytest.mark.asyncio
async def test_observer_errors_do_not_block_others(session: SessionManager) -> None:
    seen: list[SessionStatus] = []

    def broken(_: SessionState) -> None:
        raise RuntimeError("boom")

    session.subscribe(broken)
    session.subscribe(lambda s: seen.append(s.status))

    await session.start()

    assert seen[-1] is SessionStatus.anonymous


@pytest.mark.asyncio
async def test_close_unsubscribes_from_provider(session: SessionManager, provider) -> None:
    await session.start()
    assert len(provider.listeners) == 1

    await session.close()

    assert len(provider.listeners) == 0
    assert session.state.status is SessionStatus.uninitialized
