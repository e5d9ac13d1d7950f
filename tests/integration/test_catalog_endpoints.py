"""End-to-end tests for the catalog endpoints.

The full application runs (lifespan, SQLite cache file, real services);
only the upstream providers are faked.
"""

import time
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from aipulse.core.exceptions import PLATFORM_MESSAGE
from aipulse.services.cache import CacheStore

pytestmark = pytest.mark.integration

GITHUB_HOST = "api.github.com"
PRODUCTHUNT_HOST = "api.producthunt.com"


def _backdated_store(app: FastAPI, seconds: float) -> CacheStore:
    """A store on the app's database whose writes look ``seconds`` old."""
    return CacheStore(app.state.database, clock=lambda: time.time() - seconds)


# =============================================================================
# GitHub Catalog
# =============================================================================


class TestGithubTools:
    @pytest.mark.asyncio
    async def test_miss_fetches_and_caches(
        self, async_client: AsyncClient, app: FastAPI, upstream
    ) -> None:
        response = await async_client.get("/api/github-tools?page=1")

        assert response.status_code == 200
        assert response.headers["X-Data-Source"] == "fresh"
        body = response.json()
        assert [tool["id"] for tool in body] == [101, 102]
        assert body[0]["stars"] == 5400

        entry = await app.state.cache_store.get("github_tools_page_1")
        assert entry is not None
        assert entry.payload == body

    @pytest.mark.asyncio
    async def test_second_request_served_from_cache(
        self, async_client: AsyncClient, upstream
    ) -> None:
        first = await async_client.get("/api/github-tools")
        second = await async_client.get("/api/github-tools?page=1")

        assert second.headers["X-Data-Source"] == "cache"
        assert second.json() == first.json()
        assert len(upstream.calls(GITHUB_HOST)) == 1

    @pytest.mark.asyncio
    async def test_upstream_500_serves_fallback(
        self, async_client: AsyncClient, app: FastAPI, upstream
    ) -> None:
        upstream.github = lambda request: httpx.Response(500, json={"message": "Server Error"})

        response = await async_client.get("/api/github-tools?page=1")

        assert response.status_code == 200
        assert response.headers["X-Data-Source"] == "fallback"
        assert [tool["name"] for tool in response.json()] == ["AutoGPT", "LangChain"]
        assert await app.state.cache_store.get("github_tools_page_1") is None

    @pytest.mark.asyncio
    async def test_stale_entry_served_then_refreshed(
        self, async_client: AsyncClient, app: FastAPI, upstream
    ) -> None:
        stale_payload = [{"id": 1, "name": "old-tool"}]
        await _backdated_store(app, 31 * 60).set("github_tools_page_1", stale_payload)

        response = await async_client.get("/api/github-tools?page=1")

        assert response.status_code == 200
        assert response.headers["X-Data-Source"] == "stale"
        assert response.json() == stale_payload

        await app.state.catalog_service.refresher.drain()

        entry = await app.state.cache_store.get("github_tools_page_1")
        assert entry is not None
        assert [tool["id"] for tool in entry.payload] == [101, 102]

        refreshed = await async_client.get("/api/github-tools?page=1")
        assert refreshed.headers["X-Data-Source"] == "cache"
        assert [tool["id"] for tool in refreshed.json()] == [101, 102]

    @pytest.mark.asyncio
    async def test_stale_entry_kept_when_refresh_fails(
        self, async_client: AsyncClient, app: FastAPI, upstream
    ) -> None:
        stale_payload = [{"id": 1, "name": "old-tool"}]
        await _backdated_store(app, 31 * 60).set("github_tools_page_3", stale_payload)
        upstream.github = lambda request: httpx.Response(503)

        response = await async_client.get("/api/github-tools?page=3")
        await app.state.catalog_service.refresher.drain()

        assert response.json() == stale_payload
        entry = await app.state.cache_store.get("github_tools_page_3")
        assert entry is not None
        assert entry.payload == stale_payload

    @pytest.mark.asyncio
    async def test_store_failure_returns_platform_message(
        self, async_client: AsyncClient, app: FastAPI
    ) -> None:
        app.state.catalog_service.store.get = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("database is locked"))
        )

        response = await async_client.get("/api/github-tools")

        assert response.status_code == 500
        assert response.json()["error"] == PLATFORM_MESSAGE
        assert "request_id" in response.json()


# =============================================================================
# Product Hunt Catalog
# =============================================================================


class TestProductTools:
    @pytest.mark.asyncio
    async def test_first_page(self, async_client: AsyncClient, upstream) -> None:
        response = await async_client.get("/api/tools")

        assert response.status_code == 200
        assert response.headers["X-Data-Source"] == "fresh"
        body = response.json()
        assert body["pageInfo"] == {"hasNextPage": True, "endCursor": "MjA="}
        assert body["tools"][0]["name"] == "Notably"
        assert len(upstream.calls(PRODUCTHUNT_HOST)) == 1

    @pytest.mark.asyncio
    async def test_next_page_uses_cursor_key(
        self, async_client: AsyncClient, app: FastAPI
    ) -> None:
        await async_client.get("/api/tools?after=MjA=")

        assert await app.state.cache_store.keys("product_hunt_tools_") == [
            "product_hunt_tools_MjA="
        ]

    @pytest.mark.asyncio
    async def test_schema_failure_serves_fallback(
        self,
        async_client: AsyncClient,
        upstream,
        producthunt_body: dict[str, Any],
    ) -> None:
        del producthunt_body["data"]["posts"]["pageInfo"]
        upstream.producthunt = lambda request: httpx.Response(200, json=producthunt_body)

        response = await async_client.get("/api/tools")

        assert response.status_code == 200
        assert response.headers["X-Data-Source"] == "fallback"
        body = response.json()
        assert [tool["name"] for tool in body["tools"]] == ["Perplexity AI", "Jasper"]
        assert body["pageInfo"] == {"hasNextPage": False, "endCursor": None}

    @pytest.mark.asyncio
    async def test_stale_page_served_then_refreshed(
        self, async_client: AsyncClient, app: FastAPI
    ) -> None:
        stale = {"tools": [], "pageInfo": {"hasNextPage": False, "endCursor": None}}
        await _backdated_store(app, 16 * 60).set("product_hunt_tools_initial", stale)

        response = await async_client.get("/api/tools?after=initial")
        await app.state.catalog_service.refresher.drain()

        assert response.headers["X-Data-Source"] == "stale"
        assert response.json() == stale
        entry = await app.state.cache_store.get("product_hunt_tools_initial")
        assert entry is not None
        assert entry.payload["tools"][0]["id"] == "452781"
