"""Authentication module for the gateway."""

from .bearer import BEARER_PREFIX, extract_bearer_token

__all__ = ["BEARER_PREFIX", "extract_bearer_token"]
