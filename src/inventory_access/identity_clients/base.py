"""
inventory_access.identity_clients.base

Interface to the external identity provider.

Responsibilities:
- Report the subject of an existing session at startup.
- Deliver session-change events to subscribers.
- Forward sign-in/sign-up/sign-out/reset requests.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

from inventory_access.auth.models import AuthEvent, Credential

AuthListener = Callable[[AuthEvent], Awaitable[None]]
Unsubscribe = Callable[[], None]


class IdentityProvider(Protocol):
    async def get_current_session(self) -> str | None: ...

    def subscribe(self, listener: AuthListener) -> Unsubscribe: ...

    async def sign_in(self, credential: Credential) -> None: ...

    async def sign_up(self, credential: Credential) -> None: ...

    async def sign_out(self) -> None: ...

    async def reset_password(self, identifier: str) -> None: ...


class ListenerSet:
    """
    Subscriber bookkeeping shared by provider implementations.
    """

    def __init__(self) -> None:
        self._listeners: list[AuthListener] = []

    def add(self, listener: AuthListener) -> Unsubscribe:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def emit(self, event: AuthEvent) -> None:
        # Copy: a listener may unsubscribe while handling the event.
        for listener in list(self._listeners):
            await listener(event)

    def __len__(self) -> int:
        return len(self._listeners)


# --- Module Notes -----------------------------------------------------------
# Every method raises `inventory_access.auth.errors.ProviderError` on failure.
