"""Observable authentication state."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..api.errors import ApiError
from .session import AuthSession, NotAuthenticated

logger = logging.getLogger(__name__)

SIGNED_IN = "signed_in"
SIGNED_OUT = "signed_out"

Listener = Callable[[bool], None]


class AuthWatcher:
    """Tracks whether a user is signed in and tells subscribers when it changes.

    ``status`` is None until the first probe resolves. Pages subscribe when
    they mount and call the returned function when they unmount.
    """

    def __init__(self, probe: Callable[[], Awaitable[AuthSession]]) -> None:
        self._probe = probe
        self._listeners: list[Listener] = []
        self._status: bool | None = None
        self._session: AuthSession | None = None
        self._running = False

    @property
    def status(self) -> bool | None:
        return self._status

    @property
    def session(self) -> AuthSession | None:
        return self._session

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> bool:
        """Run the first probe and begin accepting events."""
        self._running = True
        return await self.check()

    def stop(self) -> None:
        self._running = False
        self._listeners.clear()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def notify(self, event: str) -> None:
        """Feed an auth event; sign-in and sign-out trigger a fresh probe."""
        if not self._running:
            return
        if event in (SIGNED_IN, SIGNED_OUT):
            await self.check()

    async def check(self) -> bool:
        try:
            self._session = await self._probe()
            status = True
        except (NotAuthenticated, ApiError):
            # Being signed out is a normal answer
            self._session = None
            status = False

        changed = status != self._status
        self._status = status
        if changed:
            logger.debug("Auth status is now %s", status)
            for listener in list(self._listeners):
                listener(status)
        return status
