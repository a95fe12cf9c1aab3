"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Generator

import pytest

# Make the package importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from you2api.core import GatewaySettings, ModelMapping, RequestContext, project_history
from you2api.core.models import BUILTIN_MODEL_MAP
from you2api.testing import FakeUpstream, GatewayHarness, build_test_config


# =============================================================================
# Global State Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clear_transport_registry() -> Generator[None, None, None]:
    """Clear upstream transports and the gateway registry after each test."""
    from you2api.core.registry import peek_gateway, set_gateway
    from you2api.core.upstream_transport import clear_upstream_transports

    previous = peek_gateway()
    yield
    clear_upstream_transports()
    set_gateway(previous)


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def model_mapping() -> ModelMapping:
    """The built-in model table with default fallbacks."""
    return ModelMapping(forward=BUILTIN_MODEL_MAP)


def make_context(
    messages: list[dict[str, str]] | None = None,
    *,
    model: str = "gpt-4o",
    stream: bool = False,
    token: str = "ds-token",
    now: float = 1_700_000_000,
) -> RequestContext:
    """Build a request context for engine-level tests."""
    messages = messages or [{"role": "user", "content": "Hi"}]
    return RequestContext.build(
        models=ModelMapping(forward=BUILTIN_MODEL_MAP),
        requested_model=model,
        history=project_history(messages),
        session_token=token,
        stream=stream,
        now=now,
    )


@pytest.fixture
def request_context() -> RequestContext:
    return make_context()


# =============================================================================
# Harness Fixtures
# =============================================================================


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def gateway(upstream: FakeUpstream) -> Generator[GatewayHarness, None, None]:
    """Gateway app wired to the fake upstream with default test settings."""
    with GatewayHarness(upstream) as harness:
        yield harness


def build_harness(upstream: FakeUpstream, **config_kwargs: Any) -> GatewayHarness:
    """Build a harness with a customized test config."""
    return GatewayHarness(upstream, build_test_config(**config_kwargs))


def chat_body(
    content: str = "Hi",
    *,
    model: str = "gpt-4o",
    stream: bool = False,
    messages: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a chat completions request body."""
    return {
        "model": model,
        "stream": stream,
        "messages": messages or [{"role": "user", "content": content}],
    }


def default_settings() -> GatewaySettings:
    return GatewaySettings.from_config(build_test_config())
