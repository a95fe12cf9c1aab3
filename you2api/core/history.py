"""Projection of chat messages into the upstream's question/answer history."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..types import HistoryRecord

ASSISTANT_ROLE = "assistant"


@dataclass(frozen=True)
class ProjectedHistory:
    """History records plus the values the upstream query derives from them.

    Attributes:
        records: One record per input message, same order.
        query: Content of the final message, sent as the search query.
        past_chat_length: Number of records before the final one.
    """

    records: tuple[HistoryRecord, ...]
    query: str
    past_chat_length: int

    def to_json(self) -> str:
        """Serialize the records for the upstream ``chat`` parameter."""
        return json.dumps(list(self.records), ensure_ascii=False, separators=(",", ":"))


def project_message(message: Mapping[str, str]) -> HistoryRecord:
    """Project a single message. Any role other than ``assistant`` is a question."""
    content = message.get("content") or ""
    if message.get("role") == ASSISTANT_ROLE:
        return {"question": "", "answer": content}
    return {"question": content, "answer": ""}


def project_history(messages: Sequence[Mapping[str, str]]) -> ProjectedHistory:
    """Project an ordered, non-empty message list into upstream history.

    Raises:
        ValueError: If ``messages`` is empty.
    """
    if not messages:
        raise ValueError("messages must not be empty")
    records = tuple(project_message(message) for message in messages)
    return ProjectedHistory(
        records=records,
        query=messages[-1].get("content") or "",
        past_chat_length=len(records) - 1,
    )
