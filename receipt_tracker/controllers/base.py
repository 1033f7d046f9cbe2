"""State shared by every page controller."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

import httpx

from ..api import ApiClient, ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

#: Failures a page shows to the user instead of raising.
PAGE_ERRORS = (ApiError, httpx.HTTPError)


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class PageController:
    """Tracks the primary fetch of a page: idle → loading → success | error.

    Failures are stored in ``error`` and never retried; the user retries by
    acting again. Mutation failures go to ``alert`` instead.
    """

    def __init__(self, api: ApiClient) -> None:
        self._api = api
        self.state = LoadState.IDLE
        self.error: str | None = None
        self.alert: str | None = None

    @property
    def loading(self) -> bool:
        return self.state is LoadState.LOADING

    def dismiss_alert(self) -> None:
        self.alert = None

    async def _fetch(self, call: Callable[[], Awaitable[T]]) -> T | None:
        self.state = LoadState.LOADING
        self.error = None
        try:
            result = await call()
        except PAGE_ERRORS as e:
            logger.info("%s fetch failed: %s", type(self).__name__, e)
            self.state = LoadState.ERROR
            self.error = _describe(e)
            return None
        self.state = LoadState.SUCCESS
        return result

    def _fail_local(self, message: str) -> None:
        """Record a validation failure; no request is made."""
        self.state = LoadState.ERROR
        self.error = message


def _describe(e: Exception) -> str:
    if isinstance(e, ApiError):
        return e.message
    return f"Network error: {e}" if str(e) else "Network error"
