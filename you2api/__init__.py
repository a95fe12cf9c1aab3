"""you2api - chat completions gateway for the You.com search chat API.

Accepts OpenAI-style chat completion requests, replays the conversation
as a You.com streaming search, and translates the token event stream back
into either one completion or a live chunk stream.

Example:
    >>> from you2api.main import create_app
    >>> import uvicorn
    >>> uvicorn.run(create_app(), host="0.0.0.0", port=8000)
"""

from .core import Gateway, GatewaySettings, ModelMapping
from .logging import logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    "Gateway",
    "GatewaySettings",
    "ModelMapping",
    "logger",
    "setup_logging",
]
