"""Model name translation between client identifiers and upstream identifiers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger("you2api")

DEFAULT_UPSTREAM_MODEL = "deepseek_v3"
DEFAULT_CLIENT_MODEL = "deepseek-chat"

# Client model id -> upstream model id
BUILTIN_MODEL_MAP: Mapping[str, str] = MappingProxyType({
    "deepseek-reasoner": "deepseek_r1",
    "deepseek-chat": "deepseek_v3",
    "o3-mini-high": "openai_o3_mini_high",
    "o3-mini-medium": "openai_o3_mini_medium",
    "o1": "openai_o1",
    "o1-mini": "openai_o1_mini",
    "o1-preview": "openai_o1_preview",
    "gpt-4o": "gpt_4o",
    "gpt-4o-mini": "gpt_4o_mini",
    "gpt-4-turbo": "gpt_4_turbo",
    "gpt-3.5-turbo": "gpt_3.5",
    "claude-3-opus": "claude_3_opus",
    "claude-3-sonnet": "claude_3_sonnet",
    "claude-3.5-sonnet": "claude_3_5_sonnet",
    "claude-3.5-haiku": "claude_3_5_haiku",
    "gemini-1.5-pro": "gemini_1_5_pro",
    "gemini-1.5-flash": "gemini_1_5_flash",
    "llama-3.2-90b": "llama3_2_90b",
    "llama-3.1-405b": "llama3_1_405b",
    "mistral-large-2": "mistral_large_2",
    "qwen-2.5-72b": "qwen2p5_72b",
    "qwen-2.5-coder-32b": "qwen2p5_coder_32b",
    "command-r-plus": "command_r_plus",
    "claude-3-7-sonnet": "claude_3_7_sonnet",
    "claude-3-7-sonnet-think": "claude_3_7_sonnet_thinking",
})


@dataclass(frozen=True)
class ModelMapping:
    """Immutable, bidirectional model table with explicit fallbacks.

    The reverse table is derived once from the forward table. Two client
    ids pointing at the same upstream id would make the reverse lookup
    ambiguous, so construction rejects such tables instead of letting the
    last entry silently win.

    Attributes:
        forward: Client model id -> upstream model id.
        default_upstream: Returned by ``to_upstream`` for unknown client ids.
        default_client: Returned by ``to_client`` for unknown upstream ids.
    """

    forward: Mapping[str, str]
    default_upstream: str = DEFAULT_UPSTREAM_MODEL
    default_client: str = DEFAULT_CLIENT_MODEL
    reverse: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        forward = dict(self.forward)
        reverse: dict[str, str] = {}
        for client_model, upstream_model in forward.items():
            if not isinstance(client_model, str) or not isinstance(upstream_model, str):
                raise ConfigurationError(
                    f"Model mapping entries must be strings: {client_model!r} -> {upstream_model!r}"
                )
            existing = reverse.get(upstream_model)
            if existing is not None:
                raise ConfigurationError(
                    f"Upstream model '{upstream_model}' is mapped from both "
                    f"'{existing}' and '{client_model}'"
                )
            reverse[upstream_model] = client_model
        object.__setattr__(self, "forward", MappingProxyType(forward))
        object.__setattr__(self, "reverse", MappingProxyType(reverse))

    def to_upstream(self, client_model: str) -> str:
        """Resolve a client model id, falling back to the default upstream model."""
        return self.forward.get(client_model, self.default_upstream)

    def to_client(self, upstream_model: str) -> str:
        """Resolve an upstream model id, falling back to the default client model."""
        return self.reverse.get(upstream_model, self.default_client)

    def resolve_or_default(self, client_model: Optional[str]) -> tuple[str, str]:
        """Return ``(upstream_model, client_model)`` for a requested model.

        Unknown or missing names never fail. They resolve to the default
        upstream model and whichever client id maps back from it.
        """
        upstream_model = self.to_upstream(client_model or "")
        return upstream_model, self.to_client(upstream_model)

    def client_models(self) -> list[str]:
        """List the client-facing model ids, sorted."""
        return sorted(self.forward)

    def __contains__(self, client_model: object) -> bool:
        return client_model in self.forward

    def __len__(self) -> int:
        return len(self.forward)


def build_model_mapping(models_cfg: Optional[Mapping[str, Any]] = None) -> ModelMapping:
    """Build the mapping from the built-in table plus the ``models`` config section.

    Args:
        models_cfg: Optional section with ``mapping`` (extra or overriding
            client -> upstream entries), ``default_upstream`` and
            ``default_client``.

    Raises:
        ConfigurationError: If the section is malformed or the merged table
            maps two client ids to one upstream id.
    """
    models_cfg = models_cfg or {}
    if not isinstance(models_cfg, Mapping):
        raise ConfigurationError("'models' section must be a mapping")

    forward = dict(BUILTIN_MODEL_MAP)
    extra = models_cfg.get("mapping") or {}
    if not isinstance(extra, Mapping):
        raise ConfigurationError("'models.mapping' must be a mapping of client -> upstream ids")
    for client_model, upstream_model in extra.items():
        forward[str(client_model)] = str(upstream_model)

    default_upstream = str(models_cfg.get("default_upstream") or DEFAULT_UPSTREAM_MODEL)
    default_client = str(models_cfg.get("default_client") or DEFAULT_CLIENT_MODEL)

    mapping = ModelMapping(
        forward=forward,
        default_upstream=default_upstream,
        default_client=default_client,
    )
    logger.debug(
        "Model mapping built with %d entries (%d from config)", len(mapping), len(extra)
    )
    return mapping
