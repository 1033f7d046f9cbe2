"""Receipt tracker front end: API client, page state, web UI and CLI."""

from .api import ApiClient, ApiError, Operation, Transport, create_transport
from .auth import AuthSession, AuthWatcher, HostedUIAuthenticator, TokenProvider
from .config import ApiConfig, AuthConfig, TrackerConfig, WebConfig, load_config
from .controllers import (
    AuthGate,
    PurchasesController,
    StatsController,
    SummaryController,
    UploaderController,
)
from .periods import TimeFilter, build_period, is_valid_period

__all__ = [
    "ApiClient",
    "ApiError",
    "Operation",
    "Transport",
    "create_transport",
    "AuthSession",
    "AuthWatcher",
    "HostedUIAuthenticator",
    "TokenProvider",
    "TrackerConfig",
    "ApiConfig",
    "AuthConfig",
    "WebConfig",
    "load_config",
    "AuthGate",
    "UploaderController",
    "PurchasesController",
    "SummaryController",
    "StatsController",
    "TimeFilter",
    "build_period",
    "is_valid_period",
]
