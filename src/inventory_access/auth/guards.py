"""
inventory_access.auth.guards

Navigational admission control.

Responsibilities:
- Decide, from the current `SessionState` and requested location, whether a
  route renders, waits, or redirects (member guard and manager guard).
- Map locations to the guard that protects them (`RouteTable`).

Guards hold no state: every call is a fresh function of its inputs.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass

from inventory_access.auth.models import SessionState, SessionStatus
from inventory_access.auth.roles import Role, is_manager, is_member_or_manager, satisfies
from inventory_access.settings import Settings


class GuardState(enum.StrEnum):
    pending = "pending"
    denied_unauthenticated = "denied_unauthenticated"
    denied_role = "denied_role"
    admitted = "admitted"


@dataclass(frozen=True, slots=True)
class RoutePolicy:
    login_route: str = "/auth/login"
    restricted_route: str = "/intruso"
    landing_route: str = "/dashboard"

    @classmethod
    def from_settings(cls, settings: Settings) -> RoutePolicy:
        return cls(
            login_route=settings.login_route,
            restricted_route=settings.restricted_route,
            landing_route=settings.landing_route,
        )


@dataclass(frozen=True, slots=True)
class GuardDecision:
    state: GuardState
    redirect_to: str | None = None
    # Location to return to after login; only set for unauthenticated redirects.
    return_to: str | None = None

    @property
    def renders(self) -> bool:
        return self.state is GuardState.admitted


_PENDING = GuardDecision(state=GuardState.pending)
_ADMITTED = GuardDecision(state=GuardState.admitted)


def _precheck(session: SessionState, location: str, policy: RoutePolicy) -> GuardDecision | None:
    if session.is_resolving:
        return _PENDING
    if session.status is SessionStatus.anonymous or session.subject_id is None:
        return GuardDecision(
            state=GuardState.denied_unauthenticated,
            redirect_to=policy.login_route,
            return_to=location,
        )
    # Authenticated, but the role is not known yet.
    if session.profile is None:
        return _PENDING
    return None


def _same_route(location: str, route: str) -> bool:
    path = location.split("?", 1)[0]
    return path.rstrip("/") == route.rstrip("/")


def member_guard(
    session: SessionState,
    location: str,
    *,
    policy: RoutePolicy,
    required_role: Role = Role.membro,
) -> GuardDecision:
    early = _precheck(session, location, policy)
    if early is not None:
        return early

    role = session.role
    on_restricted = _same_route(location, policy.restricted_route)

    if not satisfies(role, required_role):
        if not is_member_or_manager(role):
            if on_restricted:
                return _ADMITTED
            return GuardDecision(state=GuardState.denied_role, redirect_to=policy.restricted_route)
        return GuardDecision(state=GuardState.denied_role, redirect_to=policy.landing_route)

    # Authorized users do not linger on the unauthorized-area screen.
    if on_restricted and is_member_or_manager(role):
        return GuardDecision(state=GuardState.denied_role, redirect_to=policy.landing_route)
    return _ADMITTED


def manager_guard(session: SessionState, location: str, *, policy: RoutePolicy) -> GuardDecision:
    early = _precheck(session, location, policy)
    if early is not None:
        return early

    role = session.role
    if is_manager(role):
        return _ADMITTED
    if is_member_or_manager(role):
        return GuardDecision(state=GuardState.denied_role, redirect_to=policy.landing_route)
    return GuardDecision(state=GuardState.denied_role, redirect_to=policy.restricted_route)


def public_route(session: SessionState, location: str, *, policy: RoutePolicy) -> GuardDecision:
    return _ADMITTED


Guard = Callable[..., GuardDecision]


class RouteTable:
    """
    Location -> guard lookup by path prefix. The restricted-area route is
    member-guarded so that authorized users are bounced off it.
    """

    def __init__(
        self,
        *,
        policy: RoutePolicy,
        manager_prefixes: tuple[str, ...] = (),
        public_prefixes: tuple[str, ...] = (),
    ) -> None:
        self.policy = policy
        self._manager_prefixes = manager_prefixes
        self._public_prefixes = public_prefixes

    @classmethod
    def from_settings(cls, settings: Settings) -> RouteTable:
        return cls(
            policy=RoutePolicy.from_settings(settings),
            manager_prefixes=settings.manager_route_prefixes,
            public_prefixes=settings.public_route_prefixes,
        )

    def guard_for(self, location: str) -> Guard:
        path = location.split("?", 1)[0]
        if any(_has_prefix(path, p) for p in self._public_prefixes):
            return public_route
        if any(_has_prefix(path, p) for p in self._manager_prefixes):
            return manager_guard
        return member_guard

    def evaluate(self, session: SessionState, location: str) -> GuardDecision:
        return self.guard_for(location)(session, location, policy=self.policy)


def _has_prefix(path: str, prefix: str) -> bool:
    prefix = prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


# --- Module Notes -----------------------------------------------------------
# The login route is public, so an anonymous user redirected there is never
# redirected again.
