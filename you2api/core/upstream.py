"""Construction of the outbound upstream search request."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from ..logging import mask_secret
from .context import RequestContext
from .settings import DEFAULT_TIMEOUT, UpstreamSettings

logger = logging.getLogger("you2api")

# Client-hint bundle the upstream expects from a desktop browser session
UPSTREAM_HEADERS: Mapping[str, str] = {
    "sec-ch-ua-platform": "Windows",
    "Cache-Control": "no-cache",
    "sec-ch-ua": '"Not(A:Brand";v="99", "Microsoft Edge";v="133", "Chromium";v="133"',
    "sec-ch-ua-bitness": "64",
    "sec-ch-ua-model": "",
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-arch": "x86",
    "sec-ch-ua-full-version": "133.0.3065.39",
    "Accept": "text/event-stream",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36 Edg/133.0.0.0"
    ),
    "sec-ch-ua-platform-version": "19.0.0",
    "Sec-Fetch-Site": "same-origin",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Dest": "empty",
    "Host": "you.com",
}

SESSION_COOKIE_NAME = "DS"

# Companion cookies marking the session as signed in with personalization on
SESSION_COMPANION_COOKIES: Mapping[str, str] = {
    "guest_has_seen_legal_disclaimer": "true",
    "youchat_personalization": "true",
    "you_subscription": "youpro_standard_year",
    "youpro_subscription": "true",
    "ai_model": "deepseek_r1",
    "youchat_smart_learn": "true",
}

SENSITIVE_HEADERS = {"cookie", "authorization"}


def build_cookie_header(session_token: str) -> str:
    """Build the ``Cookie`` header value for a session token."""
    cookies = dict(SESSION_COMPANION_COOKIES)
    cookies[SESSION_COOKIE_NAME] = session_token
    return ";".join(f"{name}={value}" for name, value in cookies.items())


def build_query_params(ctx: RequestContext, market: str) -> list[tuple[str, str]]:
    """Build the ordered query parameters for the upstream search call."""
    history = ctx.history
    return [
        ("q", history.query),
        ("page", "1"),
        ("count", "10"),
        ("safeSearch", "Moderate"),
        ("mkt", market),
        ("enable_worklow_generation_ux", "true"),
        ("domain", "youchat"),
        ("use_personalization_extraction", "true"),
        ("pastChatLength", str(history.past_chat_length)),
        ("selectedChatMode", "custom"),
        ("selectedAiModel", ctx.upstream_model),
        ("enable_agent_clarification_questions", "true"),
        ("use_nested_youchat_updates", "true"),
        ("chat", history.to_json()),
    ]


def build_upstream_headers(session_token: str) -> dict[str, str]:
    """Return the static header bundle plus the session cookie."""
    headers = dict(UPSTREAM_HEADERS)
    headers["Cookie"] = build_cookie_header(session_token)
    return headers


def build_upstream_request(ctx: RequestContext, settings: UpstreamSettings) -> httpx.Request:
    """Assemble the outbound GET request for one chat request.

    Construction never fails; network problems only surface when the
    request is sent.
    """
    request = httpx.Request(
        "GET",
        settings.url,
        params=build_query_params(ctx, settings.market),
        headers=build_upstream_headers(ctx.session_token),
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Built upstream request %s with headers %s",
            settings.url,
            safe_headers_for_log(request.headers),
        )
    return request


def safe_headers_for_log(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy headers with cookie and authorization values masked."""
    safe: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            safe[key] = mask_secret(value)
        else:
            safe[key] = value
    return safe


def format_httpx_error(exc: Any, url: Optional[str] = None, timeout: Optional[float] = None) -> str:
    """Produce a detailed, user-facing description of an httpx error."""
    parts = [exc.__class__.__name__]
    message = str(exc).strip()
    if message:
        parts.append(message)

    request = None
    try:
        request = getattr(exc, "request", None)
    except RuntimeError:
        # httpx raises when the error was created without a request
        request = None
    if request is not None:
        parts.append(f"request={request.method} {_strip_query(str(request.url))}")
    elif url:
        parts.append(f"url={url}")

    if isinstance(exc, httpx.TimeoutException):
        parts.append(f"timeout={timeout or DEFAULT_TIMEOUT}s")

    return "; ".join(parts)


def _strip_query(url: str) -> str:
    # The query carries the whole conversation; keep it out of error text
    return url.split("?", 1)[0]
