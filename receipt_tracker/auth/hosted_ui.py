"""Hosted sign-in page (OAuth 2.0 authorization code flow)."""

from __future__ import annotations

import logging
import time
from urllib.parse import urlencode

import httpx

from ..config import AuthConfig
from .session import AuthSession, decode_claims

logger = logging.getLogger(__name__)


class HostedUIAuthenticator:
    """Builds redirect URLs for the hosted identity provider and redeems codes.

    Tokens are issued by the provider; this class only forwards the
    authorization code it receives on the callback and keeps what comes back.
    """

    def __init__(
        self,
        config: AuthConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not config.domain or not config.client_id:
            raise ValueError(
                "auth.domain and auth.client_id must be set to use the hosted "
                "sign-in page"
            )
        self._config = config
        self._http = http_client

    @property
    def base_url(self) -> str:
        domain = self._config.domain.rstrip("/")
        if not domain.startswith(("http://", "https://")):
            domain = f"https://{domain}"
        return domain

    def authorize_url(self, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self._config.client_id,
            "redirect_uri": self._config.redirect_sign_in,
            "scope": " ".join(self._config.scopes),
            "state": state,
        }
        if self._config.identity_provider:
            params["identity_provider"] = self._config.identity_provider
        return f"{self.base_url}/oauth2/authorize?{urlencode(params)}"

    def logout_url(self) -> str:
        params = {
            "client_id": self._config.client_id,
            "logout_uri": self._config.redirect_sign_out,
        }
        return f"{self.base_url}/logout?{urlencode(params)}"

    async def exchange_code(self, code: str) -> AuthSession:
        """Redeem an authorization code for a session.

        Raises:
            RuntimeError: If the provider rejects the code.
        """
        data = await self._token_request({
            "grant_type": "authorization_code",
            "client_id": self._config.client_id,
            "code": code,
            "redirect_uri": self._config.redirect_sign_in,
        })
        return self._session_from_tokens(data)

    async def refresh(self, session: AuthSession) -> AuthSession:
        if not session.refresh_token:
            raise RuntimeError("session has no refresh token")
        data = await self._token_request({
            "grant_type": "refresh_token",
            "client_id": self._config.client_id,
            "refresh_token": session.refresh_token,
        })
        # The provider does not send a new refresh token on refresh
        data.setdefault("refresh_token", session.refresh_token)
        return self._session_from_tokens(data)

    async def _token_request(self, form: dict) -> dict:
        url = f"{self.base_url}/oauth2/token"
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        if self._http is not None:
            response = await self._http.post(url, data=form, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.post(url, data=form, headers=headers)

        if response.status_code >= 400:
            logger.warning(
                "Token endpoint returned %d for grant %s",
                response.status_code,
                form.get("grant_type"),
            )
            raise RuntimeError(
                f"sign-in failed (status {response.status_code}): "
                f"{response.text[:200]}"
            )
        return response.json()

    @staticmethod
    def _session_from_tokens(data: dict) -> AuthSession:
        id_token = data.get("id_token", "")
        if not id_token:
            raise RuntimeError("token response did not include an id_token")
        claims = decode_claims(id_token)
        expires_in = float(data.get("expires_in", 0) or 0)
        return AuthSession(
            id_token=id_token,
            access_token=data.get("access_token", ""),
            refresh_token=data.get("refresh_token", ""),
            expires_at=time.time() + expires_in if expires_in else 0.0,
            given_name=claims.get("given_name") or "User",
        )
