"""Transport base class and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .requests import ApiRequest

if TYPE_CHECKING:
    from ..auth.tokens import TokenProvider
    from ..config import TrackerConfig


class Transport(ABC):
    """Abstract base for whatever actually serves an ApiRequest."""

    #: True when responses come from the real backend.
    live: bool = True

    @abstractmethod
    async def send(self, request: ApiRequest) -> Any:
        """Serve one request and return the decoded JSON body.

        Raises:
            ApiError: If the backend answers with a non-2xx status.
        """
        ...

    async def aclose(self) -> None:
        """Release any held connections."""


def create_transport(
    config: TrackerConfig, tokens: TokenProvider | None = None
) -> Transport:
    """Create the transport selected by configuration (live or fixtures)."""
    if config.api.mock:
        from .fixtures import FixtureTransport

        return FixtureTransport(delay=config.api.mock_delay)

    from .http import HttpTransport

    return HttpTransport(
        base_url=config.api.base_url,
        tokens=tokens,
        timeout=config.api.timeout,
    )
