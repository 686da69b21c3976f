"""
inventory_access.context

Composition root for one client process.

Responsibilities:
- Build the profile cache, session manager, route table and adoption registry.
- Own shared infrastructure (DB engine, HTTP client to the identity provider).
- Provide an explicit start/close lifecycle instead of ambient global state.
"""

from __future__ import annotations

from datetime import timedelta

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine

from inventory_access.auth.cache import ProfileCache
from inventory_access.auth.guards import RouteTable
from inventory_access.auth.session import SessionManager
from inventory_access.db.init_db import init_db
from inventory_access.db.session import create_engine, create_sessionmaker
from inventory_access.db.store import DataStore, SqlDataStore
from inventory_access.identity_clients.base import IdentityProvider
from inventory_access.identity_clients.http import HttpIdentityProvider
from inventory_access.observability.logging import get_logger
from inventory_access.services.adoption import AdoptionRegistry
from inventory_access.services.notifications import BufferedNotificationSink
from inventory_access.settings import Settings

log = get_logger(__name__)


class AccessContext:
    def __init__(
        self,
        *,
        settings: Settings,
        provider: IdentityProvider,
        store: DataStore,
        notifier: BufferedNotificationSink | None = None,
        engine: AsyncEngine | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.provider = provider
        self.store = store
        self.notifier = notifier or BufferedNotificationSink(
            maxlen=settings.notification_buffer_size
        )
        self.engine = engine
        self._http = http

        self.cache = ProfileCache(
            default_ttl=timedelta(seconds=settings.profile_cache_ttl_seconds)
        )
        self.session = SessionManager(
            provider=provider,
            store=store,
            cache=self.cache,
            notifier=self.notifier,
            profile_ttl=timedelta(seconds=settings.profile_cache_ttl_seconds),
        )
        self.routes = RouteTable.from_settings(settings)
        self.adoption = AdoptionRegistry(store=store, session=self.session, notifier=self.notifier)

    @classmethod
    def from_settings(cls, settings: Settings) -> AccessContext:
        engine = create_engine(settings)
        http = httpx.AsyncClient(
            base_url=settings.identity_base_url,
            timeout=settings.identity_timeout_seconds,
        )
        return cls(
            settings=settings,
            provider=HttpIdentityProvider(settings=settings, http=http),
            store=SqlDataStore(create_sessionmaker(engine)),
            engine=engine,
            http=http,
        )

    async def start(self) -> None:
        log.info("context_starting", env=self.settings.env)
        if self.engine is not None and self.settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod uses Alembic migrations.
            await init_db(self.engine)
        await self.session.start()

    async def close(self) -> None:
        await self.session.close()
        if self._http is not None:
            await self._http.aclose()
        if self.engine is not None:
            await self.engine.dispose()
        log.info("context_closed")


# --- Module Notes -----------------------------------------------------------
# Every consumer receives this object (or one of its members) explicitly; there
# is no module-level session singleton.
