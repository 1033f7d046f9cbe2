"""Authenticated session data."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass

from jose import JWTError, jwt


class NotAuthenticated(Exception):
    """No usable session exists. This is an expected state, not a failure."""


@dataclass
class AuthSession:
    """Holds the tokens issued by the hosted identity provider."""

    id_token: str
    access_token: str = ""
    refresh_token: str = ""
    expires_at: float = 0.0
    given_name: str = "User"

    @property
    def expired(self) -> bool:
        return bool(self.expires_at) and time.time() >= self.expires_at

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict | None) -> AuthSession | None:
        if not data or not data.get("id_token"):
            return None
        return cls(
            id_token=data["id_token"],
            access_token=data.get("access_token", ""),
            refresh_token=data.get("refresh_token", ""),
            expires_at=float(data.get("expires_at", 0.0)),
            given_name=data.get("given_name") or "User",
        )


def decode_claims(id_token: str) -> dict:
    """Read the claims of a JWT without verifying it.

    Only used for display fields such as the user's first name; the backend
    verifies the token on every request.
    """
    try:
        return jwt.get_unverified_claims(id_token)
    except JWTError:
        return {}
