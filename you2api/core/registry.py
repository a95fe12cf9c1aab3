"""Gateway registry for breaking circular imports.

Routes look the gateway up here instead of importing the main module,
which builds it.
"""

from typing import Optional

from .gateway import Gateway

# Set by main.py during initialization, or by a test harness
_gateway: Optional[Gateway] = None


def set_gateway(gateway: Optional[Gateway]) -> None:
    """Set the process-wide gateway instance."""
    global _gateway
    _gateway = gateway


def get_gateway() -> Gateway:
    """Get the process-wide gateway instance."""
    if _gateway is None:
        raise RuntimeError("Gateway not initialized. Did you call set_gateway?")
    return _gateway


def peek_gateway() -> Optional[Gateway]:
    """Return the current gateway without raising when none is set."""
    return _gateway
