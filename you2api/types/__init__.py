"""Type definitions for the gateway."""

from .chat import (
    AssistantMessage,
    ChatCompletion,
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatMessage,
    ChunkChoice,
    ChunkDelta,
    CompletionChoice,
    HistoryRecord,
    ModelDetail,
    ModelList,
    Role,
)

__all__ = [
    "AssistantMessage",
    "ChatCompletion",
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatMessage",
    "ChunkChoice",
    "ChunkDelta",
    "CompletionChoice",
    "HistoryRecord",
    "ModelDetail",
    "ModelList",
    "Role",
]
