"""
tests.test_identity_http

`HttpIdentityProvider` against a stubbed GoTrue-style server (httpx.MockTransport).
"""

from __future__ import annotations

import json
from datetime import timedelta

import httpx
import pytest
import pytest_asyncio

from inventory_access.auth.errors import ProviderError
from inventory_access.auth.jwt import JwtConfig, issue_token
from inventory_access.auth.models import AuthEvent, AuthEventKind, Credential
from inventory_access.identity_clients.http import HttpIdentityProvider
from inventory_access.settings import Settings


class FakeAuthServer:
    def __init__(self, settings: Settings) -> None:
        self.cfg = JwtConfig.from_settings(settings)
        self.calls: list[tuple[str, str]] = []
        self.access_ttl = timedelta(hours=1)
        self.fail_logout = False
        self.fail_refresh = False

    def _session(self, subject: str) -> dict[str, object]:
        return {
            "access_token": issue_token(cfg=self.cfg, subject=subject, ttl=self.access_ttl),
            "refresh_token": f"refresh-{subject}",
            "token_type": "bearer",
            "user": {"id": subject},
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        assert request.headers["apikey"] == "test-key"
        body = json.loads(request.content) if request.content else {}

        if path.endswith("/token"):
            grant = request.url.params["grant_type"]
            if grant == "password":
                if body["password"] != "secret1":
                    return httpx.Response(
                        400,
                        json={
                            "error": "invalid_grant",
                            "error_description": "Invalid login credentials",
                        },
                    )
                return httpx.Response(200, json=self._session("U1"))
            if self.fail_refresh:
                return httpx.Response(400, json={"msg": "Refresh Token Not Found"})
            self.access_ttl = timedelta(hours=1)
            return httpx.Response(200, json=self._session("U1"))
        if path.endswith("/logout"):
            if self.fail_logout:
                return httpx.Response(500, text="upstream exploded")
            return httpx.Response(204)
        if path.endswith("/recover"):
            return httpx.Response(200, json={})
        if path.endswith("/signup"):
            return httpx.Response(200, json={"id": "U9", "email": body["email"]})
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def auth_settings() -> Settings:
    return Settings(env="test", identity_api_key="test-key", jwt_secret="test-secret")


@pytest.fixture
def server(auth_settings: Settings) -> FakeAuthServer:
    return FakeAuthServer(auth_settings)


@pytest.fixture
def events() -> list[AuthEvent]:
    return []


@pytest_asyncio.fixture
async def identity(auth_settings, server, events):
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(server.handler), base_url="http://auth.test/auth/v1"
    )
    provider = HttpIdentityProvider(settings=auth_settings, http=http)

    async def _record(event: AuthEvent) -> None:
        events.append(event)

    provider.subscribe(_record)
    yield provider
    await http.aclose()


@pytest.mark.asyncio
async def test_sign_in_stores_session_and_emits_event(identity, events) -> None:
    assert await identity.get_current_session() is None

    await identity.sign_in(Credential(email="ana@example.com", password="secret1"))

    assert events == [AuthEvent(kind=AuthEventKind.signed_in, subject_id="U1")]
    assert await identity.get_current_session() == "U1"


@pytest.mark.asyncio
async def test_sign_in_error_carries_provider_message(identity, events) -> None:
    with pytest.raises(ProviderError) as exc:
        await identity.sign_in(Credential(email="ana@example.com", password="nope"))

    assert exc.value.message == "Invalid login credentials"
    assert exc.value.status_code == 400
    assert events == []


@pytest.mark.asyncio
async def test_expired_token_is_refreshed_once(identity, server, events) -> None:
    server.access_ttl = timedelta(seconds=-30)
    await identity.sign_in(Credential(email="ana@example.com", password="secret1"))

    assert await identity.get_current_session() == "U1"

    assert events[-1] == AuthEvent(kind=AuthEventKind.token_refreshed, subject_id="U1")
    assert server.calls.count(("POST", "/auth/v1/token")) == 2


@pytest.mark.asyncio
async def test_failed_refresh_ends_session(identity, server, events) -> None:
    server.access_ttl = timedelta(seconds=-30)
    await identity.sign_in(Credential(email="ana@example.com", password="secret1"))
    server.fail_refresh = True

    assert await identity.get_current_session() is None
    assert events[-1].kind is AuthEventKind.signed_out


@pytest.mark.asyncio
async def test_sign_out_ends_local_session_even_on_server_error(identity, server, events):
    await identity.sign_in(Credential(email="ana@example.com", password="secret1"))
    server.fail_logout = True

    with pytest.raises(ProviderError) as exc:
        await identity.sign_out()

    assert exc.value.message == "upstream exploded"
    assert events[-1] == AuthEvent(kind=AuthEventKind.signed_out, subject_id=None)
    assert await identity.get_current_session() is None


@pytest.mark.asyncio
async def test_sign_up_pending_confirmation_does_not_sign_in(identity, events) -> None:
    await identity.sign_up(Credential(email="novo@example.com", password="secret1"))
    assert events == []
    assert await identity.get_current_session() is None


@pytest.mark.asyncio
async def test_reset_password(identity, server) -> None:
    await identity.reset_password("ana@example.com")
    assert ("POST", "/auth/v1/recover") in server.calls
