"""Tests for the models listing, preflight and status routes."""

import pytest

from conftest import build_harness
from you2api.api.routes.status import STATUS_TEXT
from you2api.testing import FakeUpstream


class TestModelsList:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/v1/models", "/api/v1/models"])
    async def test_lists_client_models(self, gateway, path):
        async with gateway.make_async_client(token=None) as client:
            response = await client.get(path)

        assert response.status_code == 200
        assert response.headers["access-control-allow-methods"] == "GET, OPTIONS"
        payload = response.json()
        assert payload["object"] == "list"
        ids = [entry["id"] for entry in payload["data"]]
        assert ids == sorted(ids)
        assert "gpt-4o" in ids
        assert len(ids) == len(gateway.settings.models)
        for entry in payload["data"]:
            assert entry["object"] == "model"
            assert entry["owned_by"] == "organization-owner"

    @pytest.mark.asyncio
    async def test_configured_models_are_listed(self):
        with build_harness(FakeUpstream(), mapping={"house-model": "house_upstream"}) as harness:
            async with harness.make_async_client() as client:
                response = await client.get("/v1/models")
        assert "house-model" in [entry["id"] for entry in response.json()["data"]]


class TestPreflight:
    @pytest.mark.asyncio
    async def test_chat_preflight_needs_no_token(self, gateway, upstream):
        async with gateway.make_async_client(token=None) as client:
            response = await client.options("/v1/chat/completions")

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
        assert upstream.received == []

    @pytest.mark.asyncio
    async def test_models_preflight(self, gateway):
        async with gateway.make_async_client() as client:
            response = await client.options("/v1/models")
        assert response.status_code == 200
        assert response.headers["access-control-allow-methods"] == "GET, OPTIONS"


class TestStatus:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/", "/health", "/some/other/path"])
    async def test_unknown_paths_report_status(self, gateway, path):
        async with gateway.make_async_client(token=None) as client:
            response = await client.get(path)

        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == STATUS_TEXT
        assert set(payload["usage"]) >= {"received", "served", "failed", "ongoing"}

    @pytest.mark.asyncio
    async def test_usage_counts_requests(self, gateway, upstream):
        upstream.enqueue_tokens(["ok"])
        async with gateway.make_async_client() as client:
            before = (await client.get("/")).json()["usage"]
            await client.post(
                "/v1/chat/completions", json={"messages": [{"role": "user", "content": "Hi"}]}
            )
            await client.post("/v1/chat/completions", content=b"nope")
            after = (await client.get("/")).json()["usage"]

        assert after["received"] - before["received"] == 2
        assert after["served"] - before["served"] == 1
        assert after["failed"] - before["failed"] == 1
