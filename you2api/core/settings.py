"""Immutable gateway settings parsed once from the loaded configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError
from .models import ModelMapping, build_model_mapping

logger = logging.getLogger("you2api")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_UPSTREAM_BASE_URL = "https://you.com"
DEFAULT_UPSTREAM_PATH = "/api/streamingSearch"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MARKET = "zh-HK"


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = config.get(name) or {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{name}' section must be a mapping")
    return value


@dataclass(frozen=True)
class UpstreamSettings:
    """Where and how the upstream search endpoint is called."""

    base_url: str = DEFAULT_UPSTREAM_BASE_URL
    path: str = DEFAULT_UPSTREAM_PATH
    request_timeout: float = DEFAULT_TIMEOUT
    market: str = DEFAULT_MARKET

    @property
    def url(self) -> str:
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        return f"{self.base_url.rstrip('/')}{path}"


@dataclass(frozen=True)
class GatewaySettings:
    """Everything the gateway needs, built at startup and never mutated."""

    models: ModelMapping
    upstream: UpstreamSettings = field(default_factory=UpstreamSettings)
    emit_done: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> "GatewaySettings":
        """Parse the loaded YAML configuration.

        Environment variables ``YOU2API_HOST`` / ``YOU2API_PORT`` take
        priority over the ``server`` section.

        Raises:
            ConfigurationError: On malformed sections or an ambiguous
                model table.
        """
        config = config or {}
        server_cfg = _section(config, "server")
        upstream_cfg = _section(config, "upstream")
        stream_cfg = _section(config, "stream")

        timeout_raw = upstream_cfg.get("request_timeout", DEFAULT_TIMEOUT)
        try:
            timeout = float(timeout_raw)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"upstream.request_timeout must be a number, got {timeout_raw!r}"
            ) from exc
        if timeout <= 0:
            raise ConfigurationError("upstream.request_timeout must be positive")

        upstream = UpstreamSettings(
            base_url=str(upstream_cfg.get("base_url") or DEFAULT_UPSTREAM_BASE_URL),
            path=str(upstream_cfg.get("path") or DEFAULT_UPSTREAM_PATH),
            request_timeout=timeout,
            market=str(upstream_cfg.get("market") or DEFAULT_MARKET),
        )

        host = os.getenv("YOU2API_HOST")
        if host is None:
            host = str(server_cfg.get("host", DEFAULT_HOST))

        port = _resolve_port(os.getenv("YOU2API_PORT"), server_cfg.get("port"))

        return cls(
            models=build_model_mapping(_section(config, "models")),
            upstream=upstream,
            emit_done=_parse_bool(stream_cfg.get("emit_done")),
            host=host,
            port=port,
        )


def _resolve_port(env_value: Optional[str], config_value: Any) -> int:
    for candidate in (env_value, config_value):
        if candidate is None:
            continue
        try:
            return int(candidate)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid port value %r", candidate)
    return DEFAULT_PORT
