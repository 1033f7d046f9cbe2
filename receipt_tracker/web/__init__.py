"""Server-rendered web UI.

Requires the ``web`` extra::

    pip install 'receipt-tracker[web]'
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..api import Transport, create_transport
from ..auth import HostedUIAuthenticator, TokenProvider
from ..config import TrackerConfig, load_config
from ..models import amount_class, format_currency

logger = logging.getLogger(__name__)

TransportFactory = Callable[[TrackerConfig, TokenProvider], Transport]

EXTENSION_KEY = "receipt_tracker"


@dataclass
class WebState:
    """Per-app objects the views look up through ``current_app``."""

    config: TrackerConfig
    transport_factory: TransportFactory
    authenticator: HostedUIAuthenticator | None = None


def create_app(
    config: TrackerConfig | None = None,
    transport_factory: TransportFactory | None = None,
):
    """Build the Flask app.

    Args:
        config: Loaded configuration; defaults come from the environment.
        transport_factory: Called once per request with the config and the
            request's token provider. Defaults to ``create_transport``.
    """
    try:
        from flask import Flask
    except ImportError:
        raise ImportError(
            "flask is required for the web UI: pip install 'receipt-tracker[web]'"
        )

    from .views import bp

    config = config or load_config()
    app = Flask(__name__)
    if config.web.secret_key:
        app.secret_key = config.web.secret_key
    else:
        logger.warning("web.secret_key is not set; using an insecure development key")
        app.secret_key = "dev"

    app.extensions[EXTENSION_KEY] = WebState(
        config=config,
        transport_factory=transport_factory or create_transport,
        authenticator=HostedUIAuthenticator(config.auth) if config.auth.enabled else None,
    )
    app.add_template_filter(format_currency, "currency")
    app.add_template_filter(amount_class, "amount_class")
    app.register_blueprint(bp)

    logger.info(
        "Web app ready (%s backend, sign-in %s)",
        "fixture" if config.api.mock else config.api.base_url,
        "enabled" if config.auth.enabled else "disabled",
    )
    return app
