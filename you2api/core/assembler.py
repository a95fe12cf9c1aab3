"""Assembly of decoded tokens into client-dialect responses."""

from __future__ import annotations

import json
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional

from ..types import ChatCompletion, ChatCompletionChunk
from .context import RequestContext
from .exceptions import UpstreamReadError
from .sse import Token

logger = logging.getLogger("you2api")

FINISH_STOP = "stop"
DONE_FRAME = b"data: [DONE]\n\n"

DisconnectChecker = Callable[[], Awaitable[bool]]


def build_completion(ctx: RequestContext, content: str) -> ChatCompletion:
    """Build the single non-streaming response payload."""
    return {
        "id": ctx.completion_id,
        "object": "chat.completion",
        "created": ctx.created,
        "model": ctx.client_model,
        "choices": [
            {
                "message": {"role": "assistant", "content": content},
                "index": 0,
                "finish_reason": FINISH_STOP,
            }
        ],
    }


def build_chunk(ctx: RequestContext, content: str, finish_reason: str = "") -> ChatCompletionChunk:
    """Build one streaming chunk payload."""
    delta = {"content": content} if content or not finish_reason else {}
    return {
        "id": ctx.completion_id,
        "object": "chat.completion.chunk",
        "created": ctx.created,
        "model": ctx.client_model,
        "choices": [
            {
                "delta": delta,
                "index": 0,
                "finish_reason": finish_reason,
            }
        ],
    }


def encode_sse_frame(payload: ChatCompletionChunk) -> bytes:
    """Encode a chunk as a ``data: <json>`` event-stream frame."""
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n".encode("utf-8")


async def assemble_completion(ctx: RequestContext, tokens: AsyncIterator[Token]) -> ChatCompletion:
    """Concatenate every token in arrival order into one completion.

    Raises:
        UpstreamReadError: If the upstream stream fails while being read.
            Partial text is discarded.
    """
    parts: list[str] = []
    async for token in tokens:
        parts.append(token.text)
    logger.debug("Assembled %d tokens for %s", len(parts), ctx.completion_id)
    return build_completion(ctx, "".join(parts))


async def stream_chunks(
    ctx: RequestContext,
    tokens: AsyncIterator[Token],
    *,
    disconnect_checker: Optional[DisconnectChecker] = None,
    emit_done: bool = False,
    on_close: Optional[Callable[[], Awaitable[None]]] = None,
) -> AsyncIterator[bytes]:
    """Yield one event-stream frame per token, in arrival order.

    The client connection is checked before every frame; once it is gone
    the loop stops so the upstream body is not drained for nobody. A read
    failure after frames were sent cannot be reported in-band, so it is
    logged and the stream just ends. ``on_close`` always runs last.

    With ``emit_done`` a terminal chunk (``finish_reason`` ``stop``) and a
    ``[DONE]`` frame follow a clean upstream end. Otherwise the stream ends
    when the upstream closes, with no terminal marker.
    """
    sent = 0
    clean_end = False
    try:
        async for token in tokens:
            if disconnect_checker is not None and await disconnect_checker():
                logger.info(
                    "Client disconnected from %s after %d chunks; stopping upstream read",
                    ctx.completion_id,
                    sent,
                )
                break
            yield encode_sse_frame(build_chunk(ctx, token.text))
            sent += 1
        else:
            clean_end = True
    except UpstreamReadError as exc:
        logger.error(
            "Upstream stream for %s failed after %d chunks: %s", ctx.completion_id, sent, exc
        )
    finally:
        logger.debug("Stream %s finished, %d chunks sent", ctx.completion_id, sent)
        if on_close is not None:
            await on_close()

    if clean_end and emit_done:
        yield encode_sse_frame(build_chunk(ctx, "", FINISH_STOP))
        yield DONE_FRAME
