"""OpenAI-compatible chat completions endpoint."""

import json
import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse, StreamingResponse
from starlette.background import BackgroundTask, BackgroundTasks
from starlette.requests import ClientDisconnect

from ...auth import extract_bearer_token
from ...core import (
    AuthorizationError,
    InvalidRequestError,
    UpstreamReadError,
    UpstreamTransportError,
    get_gateway,
    parse_chat_request,
)
from ...usage_metrics import USAGE_COUNTERS
from ..cors import CHAT_CORS_HEADERS, preflight_response

logger = logging.getLogger("you2api")

CHAT_COMPLETION_PATHS = (
    "/v1/chat/completions",
    "/none/v1/chat/completions",
    "/such/chat/completions",
)


def _attach_finish_task(response: Response, finish: Callable[[], None]) -> None:
    existing = getattr(response, "background", None)
    if existing is None:
        response.background = BackgroundTask(finish)
        return

    tasks = BackgroundTasks()
    if isinstance(existing, BackgroundTasks):
        for task in existing.tasks:
            tasks.add_task(task.func, *task.args, **task.kwargs)
    else:
        tasks.add_task(existing.func, *existing.args, **existing.kwargs)
    tasks.add_task(finish)
    response.background = tasks


def _plain_error(message: str, status_code: int) -> Response:
    return PlainTextResponse(message, status_code=status_code)


async def chat_completions(request: Request) -> Response:
    """Chat completions endpoint - OpenAI compatible.

    POST /v1/chat/completions (and aliases)

    Rejects requests without a bearer token before anything else happens,
    then translates the body into one upstream search call and answers
    either with a single completion or with an event stream.
    """
    if request.method == "OPTIONS":
        return preflight_response(CHAT_CORS_HEADERS)

    logger.info(f"Handling {request.method} request to {request.url.path}")
    tracker = USAGE_COUNTERS.start_request()

    try:
        session_token = extract_bearer_token(request.headers)
    except AuthorizationError as exc:
        tracker.finish(failed=True)
        return _plain_error(exc.message, 401)

    try:
        body = await request.body()
    except ClientDisconnect:
        logger.info("Client disconnected while sending the request body")
        tracker.finish(failed=True)
        raise

    try:
        chat_request = parse_chat_request(body)
    except InvalidRequestError as exc:
        logger.error(f"Invalid request body: {exc.message}")
        tracker.finish(failed=True)
        return _plain_error("Invalid request body", 400)

    gateway = get_gateway()
    ctx = gateway.build_context(chat_request, session_token)

    if ctx.stream:
        try:
            response: StreamingResponse = await gateway.open_stream(
                ctx, disconnect_checker=request.is_disconnected
            )
        except UpstreamTransportError as exc:
            tracker.finish(failed=True)
            return _plain_error(exc.message, 500)
        response.headers.update(CHAT_CORS_HEADERS)
        _attach_finish_task(response, tracker.finish)
        return response

    try:
        completion = await gateway.complete(ctx)
    except UpstreamTransportError as exc:
        tracker.finish(failed=True)
        return _plain_error(exc.message, 500)
    except UpstreamReadError:
        tracker.finish(failed=True)
        return _plain_error("Error reading response", 500)

    try:
        content = json.dumps(completion, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        logger.error(f"Failed to encode completion {ctx.completion_id}: {exc}")
        tracker.finish(failed=True)
        return _plain_error("Error encoding response", 500)

    answer = completion["choices"][0]["message"]["content"]
    logger.info(f"Request {ctx.completion_id} completed, {len(answer)} characters")
    tracker.finish()
    return Response(
        content=content,
        status_code=200,
        headers=dict(CHAT_CORS_HEADERS),
        media_type="application/json",
    )
