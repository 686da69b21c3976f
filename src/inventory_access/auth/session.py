"""
inventory_access.auth.session

Session manager: current subject, profile resolution and auth operations.

Responsibilities:
- Track the session state machine (uninitialized -> loading -> anonymous | authenticated).
- React to identity-provider events for the lifetime of the process.
- Resolve the subject's profile through the `ProfileCache`, falling back to the store.
- Write profile changes through to the store and invalidate the cache.
- Publish every new `SessionState` to observers (guards, UI).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

from inventory_access.auth.cache import DEFAULT_TTL, ProfileCache
from inventory_access.auth.errors import (
    DataStoreError,
    Forbidden,
    LookupFailed,
    ProviderError,
    Unauthenticated,
)
from inventory_access.auth.models import (
    AuthEvent,
    AuthEventKind,
    Credential,
    Profile,
    ProfileUpdate,
    SessionState,
    SessionStatus,
)
from inventory_access.auth.roles import Role, is_manager
from inventory_access.db.store import DataStore
from inventory_access.identity_clients.base import IdentityProvider, Unsubscribe
from inventory_access.observability.logging import get_logger
from inventory_access.services import notifications
from inventory_access.services.notifications import NotificationSink

log = get_logger(__name__)

SessionObserver = Callable[[SessionState], None]


class SessionManager:
    """
    One instance per client process, owned by `AccessContext`.

    All methods run on the event loop's single thread. A profile lookup that
    completes after the session moved to another subject is discarded.
    """

    def __init__(
        self,
        *,
        provider: IdentityProvider,
        store: DataStore,
        cache: ProfileCache,
        notifier: NotificationSink,
        profile_ttl: timedelta = DEFAULT_TTL,
    ) -> None:
        self._provider = provider
        self._store = store
        self._cache = cache
        self._notifier = notifier
        self._profile_ttl = profile_ttl

        self._state = SessionState(status=SessionStatus.uninitialized)
        self._observers: list[SessionObserver] = []
        self._provider_unsubscribe: Unsubscribe | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def cache(self) -> ProfileCache:
        return self._cache

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    # -- lifecycle ---------------------------------------------------------

    async def start(self) -> None:
        if self._state.status is not SessionStatus.uninitialized:
            return
        self._set_state(SessionState(status=SessionStatus.loading))
        self._provider_unsubscribe = self._provider.subscribe(self.handle_event)

        try:
            subject_id = await self._provider.get_current_session()
        except ProviderError as e:
            log.warning("session_bootstrap_failed", error=e.message)
            subject_id = None

        # A provider event may have settled the session while bootstrap was in flight.
        if self._state.status is not SessionStatus.loading:
            return
        await self._apply_subject(subject_id)
        log.info("session_started", status=self._state.status.value)

    async def close(self) -> None:
        if self._provider_unsubscribe is not None:
            self._provider_unsubscribe()
            self._provider_unsubscribe = None
        self._cache.clear()
        self._set_state(SessionState(status=SessionStatus.uninitialized))

    # -- provider events ---------------------------------------------------

    async def handle_event(self, event: AuthEvent) -> None:
        log.info("auth_state_changed", kind=event.kind.value, subject_id=event.subject_id)

        if event.kind is AuthEventKind.signed_out:
            self._sign_out_locally()
            return
        if event.subject_id is None:
            self._set_state(SessionState(status=SessionStatus.anonymous))
            return
        if (
            self._state.status is not SessionStatus.authenticated
            or event.subject_id != self._state.subject_id
        ):
            await self._apply_subject(event.subject_id)
            return
        if event.kind is AuthEventKind.user_updated:
            self._cache.invalidate(event.subject_id)
            await self.refresh_profile()

    async def _apply_subject(self, subject_id: str | None) -> None:
        if subject_id is None:
            self._set_state(SessionState(status=SessionStatus.anonymous))
            return
        self._set_state(SessionState(status=SessionStatus.authenticated, subject_id=subject_id))
        await self.refresh_profile()

    def _sign_out_locally(self) -> None:
        self._cache.clear()
        self._set_state(SessionState(status=SessionStatus.anonymous))

    # -- profile -----------------------------------------------------------

    async def refresh_profile(self) -> Profile | None:
        """
        Resolve the current subject's profile: cache first, then the store.
        A failed lookup yields the degraded placeholder profile instead of raising.
        """

        subject_id = self._state.subject_id
        if self._state.status is not SessionStatus.authenticated or subject_id is None:
            return None

        cached = self._cache.get(subject_id)
        if cached is not None:
            self._resolve(subject_id, cached)
            return cached

        try:
            profile = await self._store.fetch_profile(subject_id)
            if profile is None:
                profile = await self._store.create_profile(subject_id)
        except (LookupFailed, DataStoreError) as e:
            log.warning("profile_lookup_failed", subject_id=subject_id, error=e.message)
            if self._state.subject_id != subject_id:
                return self._state.profile
            degraded = Profile.degraded(subject_id)
            self._resolve(subject_id, degraded)
            return degraded

        if self._state.subject_id != subject_id:
            log.info(
                "profile_lookup_discarded",
                subject_id=subject_id,
                current_subject_id=self._state.subject_id,
            )
            return self._state.profile

        self._cache.put(subject_id, profile, self._profile_ttl)
        self._resolve(subject_id, profile)
        return profile

    async def update_profile(self, update: ProfileUpdate) -> Profile:
        subject_id = self._require_subject()
        changes = update.as_changes()
        if not changes:
            return self._state.profile or await self._current_profile()

        try:
            stored = await self._store.update_profile(subject_id, changes)
        except DataStoreError as e:
            log.warning("profile_update_failed", subject_id=subject_id, error=e.message)
            raise

        self._cache.invalidate(subject_id)
        if self._state.subject_id != subject_id:
            return stored
        base = self._state.profile or stored
        merged = dataclasses.replace(base, **changes, updated_at=stored.updated_at)
        self._resolve(subject_id, merged)
        log.info("profile_updated", subject_id=subject_id, fields=sorted(changes))
        return merged

    async def set_role(self, subject_id: str, role: Role) -> Profile:
        actor_id = self._require_subject()
        if not is_manager(self._state.role):
            raise Forbidden("Only managers can change roles")

        try:
            stored = await self._store.update_profile(subject_id, {"role": role})
        except DataStoreError as e:
            log.warning("role_change_failed", subject_id=subject_id, error=e.message)
            raise

        self._cache.invalidate(subject_id)
        log.info("role_changed", actor_id=actor_id, subject_id=subject_id, role=role.value)
        if subject_id == self._state.subject_id:
            self._resolve(subject_id, stored)
        return stored

    async def _current_profile(self) -> Profile:
        profile = await self.refresh_profile()
        if profile is None:
            raise Unauthenticated()
        return profile

    def _require_subject(self) -> str:
        if self._state.status is not SessionStatus.authenticated or self._state.subject_id is None:
            raise Unauthenticated()
        return self._state.subject_id

    def _resolve(self, subject_id: str, profile: Profile) -> None:
        self._set_state(
            SessionState(
                status=SessionStatus.authenticated,
                subject_id=subject_id,
                profile=profile,
            )
        )

    # -- provider operations ----------------------------------------------

    async def sign_in(self, credential: Credential) -> bool:
        return await self._call_provider("Sign-in failed", self._provider.sign_in, credential)

    async def sign_up(self, credential: Credential) -> bool:
        ok = await self._call_provider("Sign-up failed", self._provider.sign_up, credential)
        if ok:
            self._notifier.notify(
                notifications.success("Account created", "Check your email to confirm the account.")
            )
        return ok

    async def sign_out(self) -> bool:
        ok = await self._call_provider("Sign-out failed", self._provider.sign_out)
        self._sign_out_locally()
        return ok

    async def reset_password(self, identifier: str) -> bool:
        ok = await self._call_provider(
            "Password reset failed", self._provider.reset_password, identifier
        )
        if ok:
            self._notifier.notify(
                notifications.success("Email sent", "Check your inbox to reset your password.")
            )
        return ok

    async def _call_provider(
        self, title: str, operation: Callable[..., Awaitable[None]], *args: Any
    ) -> bool:
        try:
            await operation(*args)
        except ProviderError as e:
            # Provider text goes to the user unchanged; no automatic retry.
            log.warning("provider_call_failed", operation=title, error=e.message)
            self._notifier.notify(notifications.error(title, e.message))
            return False
        return True

    # -- observers ---------------------------------------------------------

    def _set_state(self, state: SessionState) -> None:
        if state == self._state:
            return
        self._state = state
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception:
                log.exception("session_observer_failed")


# --- Module Notes -----------------------------------------------------------
# Observers see "last write wins" snapshots; an observer that needs history
# must record it itself.
