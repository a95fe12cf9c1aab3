"""Tests for bearer token extraction and request context building."""

import pytest

from conftest import make_context
from you2api.auth import extract_bearer_token
from you2api.core import AuthorizationError


class TestBearerToken:
    def test_returns_token_verbatim(self):
        assert extract_bearer_token({"authorization": "Bearer abc.def=="}) == "abc.def=="

    def test_accepts_capitalized_header_name(self):
        assert extract_bearer_token({"Authorization": "Bearer tok"}) == "tok"

    def test_empty_token_after_prefix_is_passed_through(self):
        assert extract_bearer_token({"authorization": "Bearer "}) == ""

    @pytest.mark.parametrize("value", [None, "", "Bearer", "bearer tok", "Basic dXNlcjpwYXNz", "Token tok"])
    def test_rejects_missing_or_other_scheme(self, value):
        headers = {} if value is None else {"authorization": value}
        with pytest.raises(AuthorizationError) as exc_info:
            extract_bearer_token(headers)
        assert exc_info.value.message == "Missing or invalid authorization header"


class TestRequestContext:
    def test_id_and_created_come_from_one_clock_reading(self):
        ctx = make_context(now=1_712_345_678.9)
        assert ctx.created == 1_712_345_678
        assert ctx.completion_id == "chatcmpl-1712345678"

    def test_models_resolved_once(self):
        ctx = make_context(model="gpt-4o")
        assert (ctx.requested_model, ctx.upstream_model, ctx.client_model) == (
            "gpt-4o",
            "gpt_4o",
            "gpt-4o",
        )

    def test_context_is_immutable(self):
        ctx = make_context()
        with pytest.raises(AttributeError):
            ctx.client_model = "other"
