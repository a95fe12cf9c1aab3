"""Main FastAPI application for the you2api gateway."""

import logging
import socket
from typing import Optional

from fastapi import FastAPI

from .api import register_routes
from .config_loader import load_config
from .core import Gateway, GatewaySettings, set_gateway
from .logging import setup_logging

logger = logging.getLogger("you2api")


def load_settings(config_path: Optional[str] = None) -> GatewaySettings:
    """Load the YAML configuration and parse it into immutable settings."""
    return GatewaySettings.from_config(load_config(config_path))


def create_app(settings: Optional[GatewaySettings] = None) -> FastAPI:
    """Build the gateway and the FastAPI application around it.

    Args:
        settings: Pre-built settings. Loaded from the configuration file
            when omitted.

    Returns:
        The configured FastAPI application instance.
    """
    setup_logging()
    if settings is None:
        settings = load_settings()

    gateway = Gateway(settings)
    set_gateway(gateway)
    logger.info(
        f"Gateway initialized with {len(settings.models)} models, upstream {settings.upstream.url}"
    )

    app = FastAPI(title="you2api Gateway")

    @app.on_event("startup")
    async def startup_event():
        """Log where the gateway listens and what it forwards to."""
        logger.info("you2api gateway starting up...")
        logger.info("Configured bind address %s:%s", settings.host, settings.port)
        if settings.host == "0.0.0.0":
            hostname = socket.gethostname()
            logger.info("Reachable on local network at http://%s:%s", hostname, settings.port)
        logger.info(
            "Default models: upstream %s, client %s",
            settings.models.default_upstream,
            settings.models.default_client,
        )
        logger.info("Stream terminal marker enabled: %s", settings.emit_done)
        logger.info("you2api gateway ready to handle requests")

    register_routes(app)
    return app


__all__ = ["create_app", "load_settings"]
