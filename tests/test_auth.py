"""Tests for sessions, token providers, hosted sign-in and the auth watcher."""

import time
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from jose import jwt

from receipt_tracker.api import ApiError
from receipt_tracker.auth import (
    SIGNED_IN,
    SIGNED_OUT,
    AnonymousTokenProvider,
    AuthSession,
    AuthWatcher,
    HostedUIAuthenticator,
    NotAuthenticated,
    SessionTokenProvider,
    StaticTokenProvider,
)
from receipt_tracker.auth.session import decode_claims
from receipt_tracker.auth.tokens import SESSION_KEY
from receipt_tracker.config import AuthConfig


def make_jwt(claims: dict) -> str:
    return jwt.encode(claims, "test-secret", algorithm="HS256")


@pytest.fixture
def auth_config():
    return AuthConfig(
        client_id="client-1",
        domain="login.example.com",
        redirect_sign_in="http://localhost:5000/auth/callback",
        redirect_sign_out="http://localhost:5000/",
    )


# --- Session ---


def test_session_round_trip():
    session = AuthSession(id_token="t", given_name="Ada")
    assert AuthSession.from_dict(session.to_dict()) == session


def test_session_from_empty():
    assert AuthSession.from_dict(None) is None
    assert AuthSession.from_dict({"access_token": "x"}) is None


def test_session_expired():
    assert not AuthSession(id_token="t").expired
    assert AuthSession(id_token="t", expires_at=time.time() - 1).expired
    assert not AuthSession(id_token="t", expires_at=time.time() + 60).expired


def test_decode_claims():
    assert decode_claims(make_jwt({"given_name": "Ada"})) == {"given_name": "Ada"}
    assert decode_claims("not-a-jwt") == {}
    assert decode_claims("a.b.c") == {}


# --- Token providers ---


@pytest.mark.asyncio
async def test_static_provider():
    assert await StaticTokenProvider("abc").get_id_token() == "abc"
    assert await StaticTokenProvider("").get_id_token() is None


@pytest.mark.asyncio
async def test_anonymous_provider():
    assert await AnonymousTokenProvider().get_id_token() is None
    with pytest.raises(NotAuthenticated):
        await AnonymousTokenProvider().current_session()


@pytest.mark.asyncio
async def test_session_provider_reads_mapping():
    store = {SESSION_KEY: AuthSession(id_token="web-token").to_dict()}
    provider = SessionTokenProvider(lambda: store)
    assert await provider.get_id_token() == "web-token"

    store.clear()
    assert await provider.get_id_token() is None


@pytest.mark.asyncio
async def test_session_provider_rejects_expired():
    expired = AuthSession(id_token="old", expires_at=time.time() - 10)
    provider = SessionTokenProvider(lambda: {SESSION_KEY: expired.to_dict()})
    with pytest.raises(NotAuthenticated):
        await provider.current_session()


# --- Hosted UI ---


def test_authenticator_requires_domain():
    with pytest.raises(ValueError):
        HostedUIAuthenticator(AuthConfig(client_id="c"))


def test_authorize_url(auth_config):
    url = HostedUIAuthenticator(auth_config).authorize_url("state-1")
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    assert parsed.scheme == "https"
    assert parsed.netloc == "login.example.com"
    assert parsed.path == "/oauth2/authorize"
    assert query["response_type"] == ["code"]
    assert query["client_id"] == ["client-1"]
    assert query["redirect_uri"] == ["http://localhost:5000/auth/callback"]
    assert query["scope"] == ["email profile openid aws.cognito.signin.user.admin"]
    assert query["state"] == ["state-1"]
    assert query["identity_provider"] == ["Google"]


def test_logout_url(auth_config):
    url = HostedUIAuthenticator(auth_config).logout_url()
    parsed = urlparse(url)
    assert parsed.path == "/logout"
    assert parse_qs(parsed.query)["logout_uri"] == ["http://localhost:5000/"]


@pytest.mark.asyncio
async def test_exchange_code(auth_config):
    """The code is redeemed at the token endpoint; the name comes from claims."""
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={
            "id_token": make_jwt({"given_name": "Ada"}),
            "access_token": "acc",
            "refresh_token": "ref",
            "expires_in": 3600,
        })

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        auth = HostedUIAuthenticator(auth_config, http_client=client)
        session = await auth.exchange_code("code-1")

    assert captured["url"] == "https://login.example.com/oauth2/token"
    assert captured["form"]["grant_type"] == ["authorization_code"]
    assert captured["form"]["code"] == ["code-1"]
    assert session.given_name == "Ada"
    assert session.refresh_token == "ref"
    assert not session.expired


@pytest.mark.asyncio
async def test_exchange_code_rejected(auth_config):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "invalid_grant"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        auth = HostedUIAuthenticator(auth_config, http_client=client)
        with pytest.raises(RuntimeError, match="400"):
            await auth.exchange_code("bad")


@pytest.mark.asyncio
async def test_refresh_keeps_refresh_token(auth_config):
    def handler(request: httpx.Request) -> httpx.Response:
        assert parse_qs(request.content.decode())["grant_type"] == ["refresh_token"]
        return httpx.Response(200, json={"id_token": make_jwt({}), "expires_in": 60})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        auth = HostedUIAuthenticator(auth_config, http_client=client)
        refreshed = await auth.refresh(AuthSession(id_token="old", refresh_token="ref"))

    assert refreshed.refresh_token == "ref"
    assert refreshed.given_name == "User"


# --- Watcher ---


class FakeProbe:
    def __init__(self, signed_in: bool = False):
        self.signed_in = signed_in
        self.calls = 0

    async def __call__(self) -> AuthSession:
        self.calls += 1
        if not self.signed_in:
            raise NotAuthenticated("no session")
        return AuthSession(id_token="t", given_name="Ada")


@pytest.mark.asyncio
async def test_watcher_unresolved_until_started():
    watcher = AuthWatcher(FakeProbe())
    assert watcher.status is None
    assert await watcher.start() is False
    assert watcher.status is False
    assert watcher.session is None


@pytest.mark.asyncio
async def test_watcher_api_error_means_signed_out():
    async def probe():
        raise ApiError(401)

    watcher = AuthWatcher(probe)
    assert await watcher.start() is False


@pytest.mark.asyncio
async def test_watcher_notifies_on_change():
    probe = FakeProbe()
    watcher = AuthWatcher(probe)
    seen = []
    unsubscribe = watcher.subscribe(seen.append)

    await watcher.start()
    probe.signed_in = True
    await watcher.notify(SIGNED_IN)
    assert watcher.session.given_name == "Ada"

    # Unrelated events do not re-probe
    await watcher.notify("token_refresh")
    assert probe.calls == 2

    unsubscribe()
    probe.signed_in = False
    await watcher.notify(SIGNED_OUT)
    assert seen == [False, True]
    assert watcher.status is False


@pytest.mark.asyncio
async def test_watcher_stop_drops_listeners():
    probe = FakeProbe()
    watcher = AuthWatcher(probe)
    seen = []
    watcher.subscribe(seen.append)
    await watcher.start()
    watcher.stop()
    assert not watcher.running

    probe.signed_in = True
    await watcher.notify(SIGNED_IN)
    assert probe.calls == 1
    assert seen == [False]
