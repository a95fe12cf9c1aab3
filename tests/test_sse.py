"""Tests for decoding the upstream token event stream."""

from __future__ import annotations

import httpx
import pytest

from you2api.core import Token, TokenEventDecoder, UpstreamReadError, iter_tokens
from you2api.core.sse import DecoderState, parse_token_data
from you2api.testing import noise_event_lines, token_event_lines


async def _lines(items, error: Exception | None = None):
    for item in items:
        yield item
    if error is not None:
        raise error


async def _collect(lines, decoder=None) -> list[str]:
    return [token.text async for token in iter_tokens(lines, decoder)]


class TestParseTokenData:
    def test_valid_data_line(self):
        assert parse_token_data('data: {"youChatToken": "Hel"}') == Token("Hel")

    @pytest.mark.parametrize(
        "line",
        [
            "",
            '{"youChatToken": "x"}',
            "data: not json",
            "data: []",
            'data: {"other": "x"}',
            'data: {"youChatToken": 5}',
        ],
    )
    def test_unusable_lines(self, line):
        assert parse_token_data(line) is None


class TestDecoderStates:
    def test_marker_moves_to_expecting_data(self):
        decoder = TokenEventDecoder()
        assert decoder.feed_line("event: youChatToken") is None
        assert decoder.state is DecoderState.EXPECTING_DATA
        assert decoder.feed_line('data: {"youChatToken": "a"}') == Token("a")
        assert decoder.state is DecoderState.SCANNING_FOR_EVENT

    def test_other_lines_ignored_while_scanning(self):
        decoder = TokenEventDecoder()
        for line in noise_event_lines() + ['data: {"youChatToken": "stray"}']:
            assert decoder.feed_line(line) is None
        assert decoder.state is DecoderState.SCANNING_FOR_EVENT
        assert decoder.tokens_emitted == 0

    def test_line_after_marker_is_consumed_even_if_not_data(self):
        lines = [
            "event: youChatToken",
            "event: youChatToken",
            'data: {"youChatToken": "lost"}',
        ]
        assert list(TokenEventDecoder().decode(lines)) == []

    def test_malformed_data_is_dropped_and_counted(self):
        decoder = TokenEventDecoder()
        lines = (
            ["event: youChatToken", "data: {broken"]
            + token_event_lines("ok")
        )
        assert [token.text for token in decoder.decode(lines)] == ["ok"]
        assert decoder.dropped_events == 1
        assert decoder.tokens_emitted == 1

    def test_truncated_stream_reports_and_resets(self):
        decoder = TokenEventDecoder()
        decoder.feed_line("event: youChatToken")
        assert decoder.finish() is True
        assert decoder.state is DecoderState.SCANNING_FOR_EVENT
        assert decoder.finish() is False


class TestIterTokens:
    @pytest.mark.asyncio
    async def test_tokens_in_order_with_noise(self):
        lines = noise_event_lines() + token_event_lines("Hel") + noise_event_lines() + token_event_lines("lo!")
        assert await _collect(_lines(lines)) == ["Hel", "lo!"]

    @pytest.mark.asyncio
    async def test_empty_and_unicode_tokens_preserved(self):
        lines = token_event_lines("") + token_event_lines("你好")
        assert await _collect(_lines(lines)) == ["", "你好"]

    @pytest.mark.asyncio
    async def test_truncated_stream_keeps_earlier_tokens(self):
        lines = token_event_lines("partial") + ["event: youChatToken"]
        assert await _collect(_lines(lines)) == ["partial"]

    @pytest.mark.asyncio
    async def test_empty_stream(self):
        assert await _collect(_lines([])) == []

    @pytest.mark.asyncio
    async def test_read_error_after_tokens(self):
        received: list[str] = []
        lines = _lines(token_event_lines("a"), error=httpx.ReadError("reset"))
        with pytest.raises(UpstreamReadError) as exc_info:
            async for token in iter_tokens(lines):
                received.append(token.text)
        assert received == ["a"]
        assert "Error reading response" in str(exc_info.value)
        assert "reset" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_uses_supplied_decoder(self):
        decoder = TokenEventDecoder()
        lines = token_event_lines("x") + ["event: youChatToken", "garbage"]
        assert await _collect(_lines(lines), decoder) == ["x"]
        assert decoder.dropped_events == 1
