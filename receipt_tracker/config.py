"""TOML configuration loader for the receipt tracker."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

DEFAULT_API_BASE_URL = "https://apis.betafactory.info/docs/v1"
DEFAULT_SCOPES = ["email", "profile", "openid", "aws.cognito.signin.user.admin"]


@dataclass
class ApiConfig:
    base_url: str = DEFAULT_API_BASE_URL
    mock: bool = False
    mock_delay: float = 0.5
    timeout: float = 30.0
    id_token: str = ""
    page_size: int = 20


@dataclass
class AuthConfig:
    client_id: str = ""
    domain: str = ""
    redirect_sign_in: str = "http://localhost:5000/auth/callback"
    redirect_sign_out: str = "http://localhost:5000/"
    scopes: list[str] = field(default_factory=lambda: list(DEFAULT_SCOPES))
    identity_provider: str = "Google"

    @property
    def enabled(self) -> bool:
        return bool(self.domain and self.client_id)


@dataclass
class WebConfig:
    host: str = "127.0.0.1"
    port: int = 5000
    secret_key: str = ""


@dataclass
class TrackerConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    web: WebConfig = field(default_factory=WebConfig)


def _env_flag(name: str) -> bool | None:
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(path: str | Path | None = None) -> TrackerConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    Environment variables fill in values the file leaves empty; the mock
    toggle and base URL from the environment apply only when the file does
    not set them.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    api = raw.get("api", {})
    ath = raw.get("auth", {})
    web = raw.get("web", {})

    # Resolve values: config file → environment variable → default
    base_url = api.get("base_url") or os.environ.get(
        "RECEIPTS_API_BASE_URL", DEFAULT_API_BASE_URL
    )
    if "mock" in api:
        mock = bool(api["mock"])
    else:
        mock = bool(_env_flag("RECEIPTS_USE_MOCK"))
    id_token = api.get("id_token", "") or os.environ.get("RECEIPTS_ID_TOKEN", "")
    client_id = ath.get("client_id", "") or os.environ.get(
        "RECEIPTS_AUTH_CLIENT_ID", ""
    )
    secret_key = web.get("secret_key", "") or os.environ.get(
        "RECEIPTS_SECRET_KEY", ""
    )

    page_size = int(api.get("page_size", 20))
    if page_size <= 0:
        raise ValueError(f"api.page_size must be positive, got {page_size}")

    return TrackerConfig(
        api=ApiConfig(
            base_url=base_url.rstrip("/"),
            mock=mock,
            mock_delay=float(api.get("mock_delay", 0.5)),
            timeout=float(api.get("timeout", 30.0)),
            id_token=id_token,
            page_size=page_size,
        ),
        auth=AuthConfig(
            client_id=client_id,
            domain=ath.get("domain", ""),
            redirect_sign_in=ath.get(
                "redirect_sign_in", "http://localhost:5000/auth/callback"
            ),
            redirect_sign_out=ath.get(
                "redirect_sign_out", "http://localhost:5000/"
            ),
            scopes=list(ath.get("scopes", DEFAULT_SCOPES)),
            identity_provider=ath.get("identity_provider", "Google"),
        ),
        web=WebConfig(
            host=web.get("host", "127.0.0.1"),
            port=int(web.get("port", 5000)),
            secret_key=secret_key,
        ),
    )
