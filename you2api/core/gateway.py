"""Gateway orchestrating one chat request against the upstream search API."""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Optional

import httpx
from fastapi.responses import StreamingResponse

from ..types import ChatCompletion, ChatCompletionRequest
from .assembler import DisconnectChecker, assemble_completion, stream_chunks
from .context import RequestContext
from .exceptions import UpstreamTransportError
from .history import project_history
from .models import ModelMapping
from .settings import GatewaySettings
from .sse import iter_tokens
from .upstream import build_upstream_request, format_httpx_error
from .upstream_transport import open_upstream_client

logger = logging.getLogger("you2api")

STREAM_HEADERS: Mapping[str, str] = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


class Gateway:
    """Translates chat requests into upstream searches and back.

    One instance is built at startup from ``GatewaySettings`` and shared
    by all requests. It holds no per-request state; everything a request
    needs travels in its ``RequestContext``.
    """

    def __init__(self, settings: GatewaySettings) -> None:
        self.settings = settings

    @property
    def models(self) -> ModelMapping:
        return self.settings.models

    def build_context(self, chat_request: ChatCompletionRequest, session_token: str) -> RequestContext:
        """Project history and resolve models for a validated request."""
        history = project_history(chat_request["messages"])
        ctx = RequestContext.build(
            models=self.models,
            requested_model=chat_request.get("model"),
            history=history,
            session_token=session_token,
            stream=bool(chat_request.get("stream")),
        )
        logger.info(
            "Translating request %s: model %r -> upstream %r (reported as %r), "
            "past turns=%d, stream=%s",
            ctx.completion_id,
            ctx.requested_model,
            ctx.upstream_model,
            ctx.client_model,
            history.past_chat_length,
            ctx.stream,
        )
        return ctx

    async def complete(self, ctx: RequestContext) -> ChatCompletion:
        """Run the buffered path and return the full completion payload.

        The whole exchange, including reading the body, is bounded by the
        configured request timeout.

        Raises:
            UpstreamTransportError: Connection failure or timeout.
            UpstreamReadError: The upstream body failed part way.
        """
        timeout = self.settings.upstream.request_timeout
        try:
            return await asyncio.wait_for(self._collect(ctx), timeout=timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Upstream request %s timed out after %ss", ctx.completion_id, timeout)
            raise UpstreamTransportError(
                f"TimeoutError; upstream did not answer within {timeout}s; "
                f"url={self.settings.upstream.url}"
            ) from exc

    async def _collect(self, ctx: RequestContext) -> ChatCompletion:
        upstream = self.settings.upstream
        request = build_upstream_request(ctx, upstream)
        async with open_upstream_client(upstream.url, upstream.request_timeout) as client:
            response = await self._send(client, request)
            try:
                return await assemble_completion(ctx, iter_tokens(response.aiter_lines()))
            finally:
                await response.aclose()

    async def open_stream(
        self,
        ctx: RequestContext,
        disconnect_checker: Optional[DisconnectChecker] = None,
    ) -> StreamingResponse:
        """Start the upstream call and return a response that relays it chunk by chunk.

        Connection failures are raised before any byte goes to the client.
        There is no read timeout; the stream lives as long as the upstream
        or the client keeps it open.

        Raises:
            UpstreamTransportError: The upstream could not be reached.
        """
        upstream = self.settings.upstream
        request = build_upstream_request(ctx, upstream)
        timeout = upstream.request_timeout
        client = open_upstream_client(
            upstream.url,
            httpx.Timeout(connect=timeout, read=None, write=timeout, pool=timeout),
        )
        try:
            response = await self._send(client, request)
        except BaseException:
            await client.aclose()
            raise

        closed = False

        async def close_upstream() -> None:
            nonlocal closed
            if closed:
                return
            closed = True
            logger.debug("Closing upstream stream for %s", ctx.completion_id)
            await response.aclose()
            await client.aclose()

        frames = stream_chunks(
            ctx,
            iter_tokens(response.aiter_lines()),
            disconnect_checker=disconnect_checker,
            emit_done=self.settings.emit_done,
            on_close=close_upstream,
        )
        return StreamingResponse(
            frames,
            status_code=200,
            headers=dict(STREAM_HEADERS),
            media_type="text/event-stream",
        )

    async def _send(self, client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
        logger.debug("Sending upstream request to %s", self.settings.upstream.url)
        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as exc:
            message = format_httpx_error(
                exc, self.settings.upstream.url, self.settings.upstream.request_timeout
            )
            logger.error("Upstream request failed: %s", message)
            raise UpstreamTransportError(message) from exc
        if response.status_code >= 400:
            # The upstream reports some failures in-band, so the body is still scanned
            logger.warning(
                "Upstream returned status %s; scanning body for tokens anyway",
                response.status_code,
            )
        else:
            logger.debug("Upstream responded with status %s", response.status_code)
        return response
