"""Request/response translation engine."""

from .assembler import assemble_completion, build_chunk, build_completion, stream_chunks
from .context import RequestContext
from .exceptions import (
    AuthorizationError,
    ConfigurationError,
    GatewayError,
    InvalidRequestError,
    UpstreamReadError,
    UpstreamTransportError,
)
from .gateway import Gateway
from .history import ProjectedHistory, project_history
from .models import ModelMapping, build_model_mapping
from .registry import get_gateway, set_gateway
from .request import parse_chat_request
from .settings import GatewaySettings, UpstreamSettings
from .sse import Token, TokenEventDecoder, iter_tokens
from .upstream import build_upstream_request

__all__ = [
    "AuthorizationError",
    "ConfigurationError",
    "Gateway",
    "GatewayError",
    "GatewaySettings",
    "InvalidRequestError",
    "ModelMapping",
    "ProjectedHistory",
    "RequestContext",
    "Token",
    "TokenEventDecoder",
    "UpstreamReadError",
    "UpstreamSettings",
    "UpstreamTransportError",
    "assemble_completion",
    "build_chunk",
    "build_completion",
    "build_model_mapping",
    "build_upstream_request",
    "get_gateway",
    "iter_tokens",
    "parse_chat_request",
    "project_history",
    "set_gateway",
    "stream_chunks",
]
