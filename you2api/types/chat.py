"""Types for the client dialect and the upstream history record.

Client-facing shapes follow the OpenAI chat completions format. The
upstream only understands paired question/answer records, described by
``HistoryRecord``.
"""

from typing import Literal

from typing_extensions import TypedDict


# =============================================================================
# Client Dialect: Requests
# =============================================================================


Role = Literal["user", "assistant", "system"]
"""Roles the client dialect sends. Other values are accepted and treated as user turns."""


class ChatMessage(TypedDict):
    """A message in a chat conversation (OpenAI format).

    Attributes:
        role: Speaker of the message. Only ``assistant`` changes how the
            message is projected into upstream history.
        content: Plain text of the message. List-of-parts content is
            flattened to text before it reaches the engine.
    """
    role: str
    content: str


class ChatCompletionRequest(TypedDict, total=False):
    """Body of ``POST /v1/chat/completions`` after validation.

    Attributes:
        messages: Ordered, non-empty conversation. The final element is
            the query sent upstream.
        model: Client model id. Unknown or missing ids fall back to the
            default mapping.
        stream: Whether to answer with an event stream.
    """
    messages: list[ChatMessage]
    model: str
    stream: bool


# =============================================================================
# Upstream Dialect
# =============================================================================


class HistoryRecord(TypedDict):
    """One chat turn in the upstream's ``chat`` query parameter.

    Exactly one of ``question`` / ``answer`` carries the message text.
    """
    question: str
    answer: str


# =============================================================================
# Client Dialect: Responses
# =============================================================================


class AssistantMessage(TypedDict):
    """The assistant message of a non-streaming completion."""
    role: Literal["assistant"]
    content: str


class CompletionChoice(TypedDict):
    """A choice in a non-streaming chat completion."""
    message: AssistantMessage
    index: int
    finish_reason: str


class ChatCompletion(TypedDict):
    """Non-streaming chat completion response.

    Attributes:
        id: ``chatcmpl-<unix seconds>``.
        object: Always ``chat.completion``.
        created: Unix timestamp in seconds.
        model: Client model id resolved back from the upstream model.
        choices: Exactly one choice with ``finish_reason`` ``stop``.
    """
    id: str
    object: Literal["chat.completion"]
    created: int
    model: str
    choices: list[CompletionChoice]


class ChunkDelta(TypedDict, total=False):
    """Incremental content of a streaming chunk."""
    content: str


class ChunkChoice(TypedDict):
    """A choice in a streaming chunk. ``finish_reason`` is empty except on a terminal chunk."""
    delta: ChunkDelta
    index: int
    finish_reason: str


class ChatCompletionChunk(TypedDict):
    """One ``data:`` frame of a streaming chat completion."""
    id: str
    object: Literal["chat.completion.chunk"]
    created: int
    model: str
    choices: list[ChunkChoice]


# =============================================================================
# Model Catalog
# =============================================================================


class ModelDetail(TypedDict):
    """A model entry in ``GET /v1/models``."""
    id: str
    object: Literal["model"]
    created: int
    owned_by: str


class ModelList(TypedDict):
    """Response body of ``GET /v1/models``."""
    object: Literal["list"]
    data: list[ModelDetail]


