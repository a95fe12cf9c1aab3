"""Bearer token extraction for the chat endpoint.

The token is not validated here. It is the caller's upstream session
credential and is forwarded verbatim as the session cookie.
"""

from __future__ import annotations

import logging
from typing import Mapping

from ..core.exceptions import AuthorizationError

logger = logging.getLogger("you2api")

BEARER_PREFIX = "Bearer "


def extract_bearer_token(headers: Mapping[str, str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header.

    The scheme match is case-sensitive and requires the single space.

    Raises:
        AuthorizationError: If the header is missing or uses another scheme.
    """
    auth_header = headers.get("authorization") or headers.get("Authorization") or ""
    if not auth_header.startswith(BEARER_PREFIX):
        logger.warning("Request rejected: missing or invalid authorization header")
        raise AuthorizationError()
    return auth_header[len(BEARER_PREFIX):]
