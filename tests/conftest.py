"""
tests.conftest

Shared fixtures: in-memory identity provider and data store fakes, a manual
clock, and a temporary SQLite-backed `SqlDataStore`.
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import AsyncIterator
from datetime import timedelta
from typing import Any

import pytest
import pytest_asyncio

from inventory_access.auth.cache import ProfileCache
from inventory_access.auth.errors import (
    AdoptionConflict,
    LookupFailed,
    ProviderError,
    RecordNotFound,
)
from inventory_access.auth.models import AuthEvent, AuthEventKind, Credential, Profile
from inventory_access.auth.roles import Role
from inventory_access.auth.session import SessionManager
from inventory_access.db.init_db import init_db
from inventory_access.db.models import RecordType
from inventory_access.db.session import create_engine, create_sessionmaker
from inventory_access.db.store import SqlDataStore
from inventory_access.identity_clients.base import AuthListener, ListenerSet, Unsubscribe
from inventory_access.services.notifications import BufferedNotificationSink
from inventory_access.settings import Settings


class ManualClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeIdentityProvider:
    """
    Provider stand-in: accounts map email -> subject id; a password of
    "wrong-password" fails the way the real provider does.
    """

    def __init__(self, *, current: str | None = None) -> None:
        self.current = current
        self.accounts: dict[str, str] = {}
        self.reset_requests: list[str] = []
        self.bootstrap_error: ProviderError | None = None
        self.listeners = ListenerSet()

    async def get_current_session(self) -> str | None:
        if self.bootstrap_error is not None:
            raise self.bootstrap_error
        return self.current

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        return self.listeners.add(listener)

    async def emit(self, kind: AuthEventKind, subject_id: str | None) -> None:
        await self.listeners.emit(AuthEvent(kind=kind, subject_id=subject_id))

    async def sign_in(self, credential: Credential) -> None:
        if credential.password == "wrong-password" or credential.email not in self.accounts:
            raise ProviderError("Invalid login credentials", status_code=400)
        self.current = self.accounts[credential.email]
        await self.emit(AuthEventKind.signed_in, self.current)

    async def sign_up(self, credential: Credential) -> None:
        if credential.email in self.accounts:
            raise ProviderError("User already registered", status_code=422)
        self.accounts[credential.email] = f"user-{len(self.accounts) + 1}"

    async def sign_out(self) -> None:
        self.current = None
        await self.emit(AuthEventKind.signed_out, None)

    async def reset_password(self, identifier: str) -> None:
        self.reset_requests.append(identifier)


class FakeDataStore:
    def __init__(self) -> None:
        self.profiles: dict[str, Profile] = {}
        self.owners: dict[tuple[RecordType, str], str | None] = {}
        self.fetch_calls: list[str] = []
        self.fail_lookups = False
        # When set, fetch_profile waits on it (simulates a slow network call).
        self.gate: asyncio.Event | None = None

    def add_profile(self, subject_id: str, role: Role, name: str | None = None) -> Profile:
        profile = Profile(subject_id=subject_id, display_name=name, role=role)
        self.profiles[subject_id] = profile
        return profile

    async def fetch_profile(self, subject_id: str) -> Profile | None:
        self.fetch_calls.append(subject_id)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_lookups:
            raise LookupFailed("network down")
        return self.profiles.get(subject_id)

    async def create_profile(self, subject_id: str) -> Profile:
        return self.add_profile(subject_id, Role.intruso)

    async def update_profile(self, subject_id: str, changes: dict[str, Any]) -> Profile:
        profile = dataclasses.replace(self.profiles[subject_id], **changes)
        self.profiles[subject_id] = profile
        return profile

    async def conditional_adopt(
        self, record_type: RecordType, record_id: str, subject_id: str
    ) -> None:
        key = (record_type, record_id)
        if key not in self.owners:
            raise RecordNotFound()
        if self.owners[key] is not None:
            raise AdoptionConflict()
        self.owners[key] = subject_id

    async def record_owner(self, record_type: RecordType, record_id: str) -> str | None:
        key = (record_type, record_id)
        if key not in self.owners:
            raise RecordNotFound()
        return self.owners[key]

    async def owner_name(self, subject_id: str) -> str | None:
        profile = self.profiles.get(subject_id)
        return profile.display_name if profile else None


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def store() -> FakeDataStore:
    return FakeDataStore()


@pytest.fixture
def notifier() -> BufferedNotificationSink:
    return BufferedNotificationSink(maxlen=20)


@pytest.fixture
def cache(clock: ManualClock) -> ProfileCache:
    return ProfileCache(default_ttl=timedelta(minutes=5), clock=clock)


@pytest.fixture
def session(
    provider: FakeIdentityProvider,
    store: FakeDataStore,
    cache: ProfileCache,
    notifier: BufferedNotificationSink,
) -> SessionManager:
    return SessionManager(provider=provider, store=store, cache=cache, notifier=notifier)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest_asyncio.fixture
async def sql_store(settings: Settings) -> AsyncIterator[SqlDataStore]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield SqlDataStore(create_sessionmaker(engine))
    finally:
        await engine.dispose()
