"""
inventory_access.identity_clients.http

HTTP client for a GoTrue-style identity provider.

Responsibilities:
- Exchange credentials for a session (`/token`, `/signup`) and end it (`/logout`).
- Keep the current session in memory only and refresh an expired access token once.
- Translate provider failures into `ProviderError` with the provider's own message.
- Emit session-change events to subscribers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from inventory_access.auth.errors import ProviderError
from inventory_access.auth.jwt import (
    JwtConfig,
    JwtValidationError,
    TokenExpired,
    decode_access_token,
)
from inventory_access.auth.models import AuthEvent, AuthEventKind, Credential
from inventory_access.identity_clients.base import AuthListener, ListenerSet, Unsubscribe
from inventory_access.observability.logging import get_logger
from inventory_access.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _StoredSession:
    access_token: str
    refresh_token: str | None
    subject_id: str


def _extract_message(r: httpx.Response) -> str:
    # GoTrue uses different keys depending on the endpoint and version.
    try:
        body = r.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return r.text or f"Identity provider returned HTTP {r.status_code}"


class HttpIdentityProvider:
    """
    Boundary to the external auth server. `http` must be configured with the
    provider's base URL; the API key header is attached per request.
    """

    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._http = http
        self._api_key = settings.identity_api_key
        self._jwt = JwtConfig.from_settings(settings)
        self._session: _StoredSession | None = None
        self._listeners = ListenerSet()

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        return self._listeners.add(listener)

    async def get_current_session(self) -> str | None:
        if self._session is None:
            return None
        try:
            claims = decode_access_token(cfg=self._jwt, token=self._session.access_token)
        except TokenExpired:
            if self._session.refresh_token is None:
                self._session = None
                return None
            try:
                await self.refresh_session()
            except ProviderError as e:
                log.warning("session_refresh_failed", error=e.message)
                return None
            return self._session.subject_id if self._session is not None else None
        except JwtValidationError as e:
            log.warning("session_token_invalid", error=str(e))
            self._session = None
            return None
        return claims.subject_id

    async def sign_in(self, credential: Credential) -> None:
        body = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": credential.email, "password": credential.password},
        )
        subject_id = self._store_session(body)
        log.info("provider_signed_in", subject_id=subject_id)
        await self._listeners.emit(AuthEvent(kind=AuthEventKind.signed_in, subject_id=subject_id))

    async def sign_up(self, credential: Credential) -> None:
        body = await self._request(
            "POST",
            "/signup",
            json={"email": credential.email, "password": credential.password},
        )
        # Without auto-confirm the provider returns only the user; no session yet.
        if not body.get("access_token"):
            log.info("provider_signup_pending_confirmation")
            return
        subject_id = self._store_session(body)
        await self._listeners.emit(AuthEvent(kind=AuthEventKind.signed_in, subject_id=subject_id))

    async def sign_out(self) -> None:
        session = self._session
        try:
            if session is not None:
                await self._request("POST", "/logout", token=session.access_token)
        finally:
            # The local session ends even when the server call fails.
            self._session = None
            await self._listeners.emit(AuthEvent(kind=AuthEventKind.signed_out, subject_id=None))

    async def reset_password(self, identifier: str) -> None:
        await self._request("POST", "/recover", json={"email": identifier})

    async def refresh_session(self) -> None:
        if self._session is None or self._session.refresh_token is None:
            raise ProviderError("No session to refresh")
        try:
            body = await self._request(
                "POST",
                "/token",
                params={"grant_type": "refresh_token"},
                json={"refresh_token": self._session.refresh_token},
            )
        except ProviderError:
            self._session = None
            await self._listeners.emit(AuthEvent(kind=AuthEventKind.signed_out, subject_id=None))
            raise
        subject_id = self._store_session(body)
        await self._listeners.emit(
            AuthEvent(kind=AuthEventKind.token_refreshed, subject_id=subject_id)
        )

    def _store_session(self, body: dict[str, Any]) -> str:
        access_token = body.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise ProviderError("Identity provider response did not include a session")
        try:
            # Expiry is checked when the session is read, not when it is stored.
            claims = decode_access_token(cfg=self._jwt, token=access_token, verify_exp=False)
        except JwtValidationError as e:
            raise ProviderError(f"Identity provider issued an unusable token: {e}") from e
        self._session = _StoredSession(
            access_token=access_token,
            refresh_token=body.get("refresh_token"),
            subject_id=claims.subject_id,
        )
        return claims.subject_id

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        headers = {"apikey": self._api_key}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"
        try:
            r = await self._http.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            log.warning("provider_unreachable", path=path, error=str(e))
            raise ProviderError("Could not reach the identity provider") from e

        if r.status_code >= 400:
            raise ProviderError(_extract_message(r), status_code=r.status_code)
        if not r.content:
            return {}
        try:
            body = r.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}


# --- Module Notes -----------------------------------------------------------
# Tokens are never persisted; a restarted process starts anonymous.
