"""Decoding of the upstream's line-oriented event stream into answer tokens.

The upstream sends many event kinds, each as an ``event:`` line followed
by a ``data:`` line. Only ``youChatToken`` events carry answer text::

    event: youChatToken
    data: {"youChatToken": "Hel"}

``TokenEventDecoder`` pairs the two lines with an explicit two-state
machine. ``iter_tokens`` drives it over an async line source and yields
tokens lazily.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Iterable, Iterator, Optional

import httpx

from .exceptions import UpstreamReadError

logger = logging.getLogger("you2api")

TOKEN_EVENT_MARKER = "event: youChatToken"
DATA_PREFIX = "data: "
TOKEN_FIELD = "youChatToken"


@dataclass(frozen=True)
class Token:
    """One incremental fragment of answer text."""

    text: str


class DecoderState(enum.Enum):
    SCANNING_FOR_EVENT = "scanning_for_event"
    EXPECTING_DATA = "expecting_data"


def parse_token_data(line: str) -> Optional[Token]:
    """Parse a data line into a token, or ``None`` if it is unusable."""
    if not line.startswith(DATA_PREFIX):
        return None
    try:
        payload = json.loads(line[len(DATA_PREFIX):])
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    text = payload.get(TOKEN_FIELD)
    if not isinstance(text, str):
        return None
    return Token(text)


class TokenEventDecoder:
    """Two-state machine pairing token-event lines with their data lines.

    In ``SCANNING_FOR_EVENT`` every line is ignored until one starts with
    the token-event marker. The machine then moves to ``EXPECTING_DATA``
    and consumes exactly the next line as that event's data, whatever it
    contains, before returning to ``SCANNING_FOR_EVENT``. Unparseable
    data lines are dropped and counted. A stream that ends while a data
    line is still expected simply finishes with what was emitted.
    """

    def __init__(self) -> None:
        self.state = DecoderState.SCANNING_FOR_EVENT
        self.tokens_emitted = 0
        self.dropped_events = 0

    def feed_line(self, line: str) -> Optional[Token]:
        """Advance the machine by one line and return a token if one completed."""
        if self.state is DecoderState.SCANNING_FOR_EVENT:
            if line.startswith(TOKEN_EVENT_MARKER):
                self.state = DecoderState.EXPECTING_DATA
            return None

        self.state = DecoderState.SCANNING_FOR_EVENT
        token = parse_token_data(line)
        if token is None:
            self.dropped_events += 1
            logger.debug("Dropped malformed token event data: %.200r", line)
            return None
        self.tokens_emitted += 1
        return token

    def finish(self) -> bool:
        """Mark end of input. Returns ``True`` if the stream ended mid-pair."""
        truncated = self.state is DecoderState.EXPECTING_DATA
        if truncated:
            logger.debug("Upstream stream ended after a token event marker without data")
        self.state = DecoderState.SCANNING_FOR_EVENT
        return truncated

    def decode(self, lines: Iterable[str]) -> Iterator[Token]:
        """Decode a complete, already-buffered sequence of lines."""
        for line in lines:
            token = self.feed_line(line)
            if token is not None:
                yield token
        self.finish()


async def iter_tokens(
    lines: AsyncIterator[str], decoder: Optional[TokenEventDecoder] = None
) -> AsyncIterator[Token]:
    """Lazily yield tokens from an async line source.

    Ends when the source is exhausted. Transport failures while reading
    are raised as ``UpstreamReadError`` after the tokens decoded so far
    have been yielded.
    """
    decoder = decoder or TokenEventDecoder()
    try:
        async for line in lines:
            token = decoder.feed_line(line)
            if token is not None:
                yield token
    except (httpx.HTTPError, httpx.StreamError) as exc:
        logger.error("Error reading upstream stream: %s (type: %s)", exc, exc.__class__.__name__)
        raise UpstreamReadError(f"Error reading response: {exc}") from exc
    decoder.finish()
    if decoder.dropped_events:
        logger.debug(
            "Upstream stream finished: %d tokens, %d malformed events dropped",
            decoder.tokens_emitted,
            decoder.dropped_events,
        )
