"""Testing utilities for in-process gateway simulations."""

from .fake_upstream import (
    FakeLineStream,
    FakeUpstream,
    UpstreamResponse,
    noise_event_lines,
    token_event_lines,
)
from .gateway_harness import GatewayHarness, build_test_config

__all__ = [
    "FakeLineStream",
    "FakeUpstream",
    "GatewayHarness",
    "UpstreamResponse",
    "build_test_config",
    "noise_event_lines",
    "token_event_lines",
]
