"""Parsing and validation of client chat completion request bodies."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from ..types import ChatCompletionRequest, ChatMessage
from .exceptions import InvalidRequestError

logger = logging.getLogger("you2api")


def _flatten_content(content: Any, index: int) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for part in content:
            if not isinstance(part, Mapping):
                raise InvalidRequestError(
                    f"messages[{index}].content parts must be objects", code="invalid_content"
                )
            if part.get("type") == "text" and isinstance(part.get("text"), str):
                texts.append(part["text"])
        return "".join(texts)
    raise InvalidRequestError(
        f"messages[{index}].content must be a string or a list of parts", code="invalid_content"
    )


def _parse_message(raw: Any, index: int) -> ChatMessage:
    if not isinstance(raw, Mapping):
        raise InvalidRequestError(f"messages[{index}] must be an object", code="invalid_message")
    role = raw.get("role", "")
    if not isinstance(role, str):
        raise InvalidRequestError(f"messages[{index}].role must be a string", code="invalid_message")
    return {"role": role, "content": _flatten_content(raw.get("content"), index)}


def parse_chat_request(body: bytes) -> ChatCompletionRequest:
    """Decode and validate a chat completions body.

    Missing or non-string ``model`` becomes an empty id, which resolves
    through the default model fallback. Missing ``stream`` means a
    buffered response.

    Raises:
        InvalidRequestError: For undecodable JSON or a body that has no
            usable ``messages`` array.
    """
    try:
        payload = json.loads(body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidRequestError(f"invalid json: {exc}", code="invalid_json") from exc

    if not isinstance(payload, Mapping):
        raise InvalidRequestError("payload must be a JSON object", code="invalid_json_shape")

    raw_messages = payload.get("messages")
    if not isinstance(raw_messages, list) or not raw_messages:
        raise InvalidRequestError("messages must be a non-empty array", code="missing_parameter")

    messages = [_parse_message(raw, index) for index, raw in enumerate(raw_messages)]

    model = payload.get("model")
    if not isinstance(model, str):
        if model is not None:
            logger.warning("Ignoring non-string model value %r", model)
        model = ""

    stream = payload.get("stream")
    if stream is None:
        stream = False
    if not isinstance(stream, bool):
        raise InvalidRequestError("stream must be a boolean", code="invalid_parameter")

    return {"messages": messages, "model": model, "stream": stream}
