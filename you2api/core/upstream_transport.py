"""Per-host HTTPX transports and client construction for upstream calls.

Tests register an ``httpx.MockTransport`` for a fake upstream host so the
gateway talks to it in-process; production uses the default transport.
"""

from __future__ import annotations

import logging
from typing import Optional, Union
from urllib.parse import urlparse

import httpx

logger = logging.getLogger("you2api")

_TRANSPORTS: dict[str, httpx.AsyncBaseTransport] = {}


def _host_key(host: str) -> str:
    return host.strip().lower()


def register_upstream_transport(host: str, transport: httpx.AsyncBaseTransport) -> None:
    """Route requests for ``host`` (a netloc such as ``you.local:8080``) through ``transport``."""
    if not host:
        raise ValueError("host is required")
    key = _host_key(host)
    _TRANSPORTS[key] = transport
    logger.debug("Registered upstream transport for host '%s'", key)


def register_upstream_transport_for_url(url: str, transport: httpx.AsyncBaseTransport) -> None:
    """Register ``transport`` for the netloc of ``url``."""
    register_upstream_transport(urlparse(url).netloc, transport)


def clear_upstream_transports() -> None:
    """Drop every registered transport."""
    _TRANSPORTS.clear()


def get_upstream_transport(url: str) -> Optional[httpx.AsyncBaseTransport]:
    """Return the transport registered for the netloc of ``url``, if any."""
    if not url:
        return None
    host = urlparse(url).netloc
    if not host:
        return None
    return _TRANSPORTS.get(_host_key(host))


def open_upstream_client(
    url: str, timeout: Union[float, httpx.Timeout]
) -> httpx.AsyncClient:
    """Create an ``AsyncClient`` for ``url`` honoring any registered transport.

    The caller owns the client and must close it.
    """
    return httpx.AsyncClient(
        timeout=timeout,
        transport=get_upstream_transport(url),
        follow_redirects=True,
    )
