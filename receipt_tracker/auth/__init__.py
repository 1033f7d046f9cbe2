"""Sign-in session handling for the hosted identity provider."""

from .hosted_ui import HostedUIAuthenticator
from .session import AuthSession, NotAuthenticated
from .tokens import (
    AnonymousTokenProvider,
    SessionTokenProvider,
    StaticTokenProvider,
    TokenProvider,
)
from .watcher import SIGNED_IN, SIGNED_OUT, AuthWatcher

__all__ = [
    "AuthSession",
    "NotAuthenticated",
    "TokenProvider",
    "AnonymousTokenProvider",
    "StaticTokenProvider",
    "SessionTokenProvider",
    "HostedUIAuthenticator",
    "AuthWatcher",
    "SIGNED_IN",
    "SIGNED_OUT",
]
