"""Service status answer for every path the gateway does not handle."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from ...usage_metrics import USAGE_COUNTERS

logger = logging.getLogger("you2api")

STATUS_TEXT = "You2Api Service Running..."
STATUS_MESSAGE = "POST /v1/chat/completions with a bearer session token"


async def service_status(request: Request) -> JSONResponse:
    """Report that the gateway is up, with realtime request counters."""
    logger.debug(f"Status request for {request.method} {request.url.path}")
    return JSONResponse(
        {
            "status": STATUS_TEXT,
            "message": STATUS_MESSAGE,
            "usage": USAGE_COUNTERS.snapshot(),
        }
    )
