"""Sources of the identity token attached to API requests."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping

from .session import AuthSession, NotAuthenticated

logger = logging.getLogger(__name__)

SESSION_KEY = "auth"


class TokenProvider(ABC):
    """Abstract base for anything that can produce the current id token."""

    @abstractmethod
    async def current_session(self) -> AuthSession:
        """Return the current session.

        Raises:
            NotAuthenticated: If no user is signed in.
        """
        ...

    async def get_id_token(self) -> str | None:
        """Return the id token, or None for an anonymous caller."""
        try:
            session = await self.current_session()
        except NotAuthenticated:
            logger.debug("No session; sending request anonymously")
            return None
        return session.id_token or None


class AnonymousTokenProvider(TokenProvider):
    async def current_session(self) -> AuthSession:
        raise NotAuthenticated("anonymous")


class StaticTokenProvider(TokenProvider):
    """Uses a token given up front, e.g. from config or RECEIPTS_ID_TOKEN."""

    def __init__(self, id_token: str = "") -> None:
        self._id_token = id_token

    async def current_session(self) -> AuthSession:
        if not self._id_token:
            raise NotAuthenticated("no id token configured")
        return AuthSession(id_token=self._id_token)


class SessionTokenProvider(TokenProvider):
    """Reads the session stored under ``auth`` in a mapping (a web session).

    The mapping is looked up lazily through ``getter`` so one provider can
    serve a request-scoped session object.
    """

    def __init__(self, getter: Callable[[], Mapping]) -> None:
        self._getter = getter

    async def current_session(self) -> AuthSession:
        session = AuthSession.from_dict(self._getter().get(SESSION_KEY))
        if session is None:
            raise NotAuthenticated("not signed in")
        if session.expired:
            raise NotAuthenticated("session expired")
        return session
