"""Tests for GithubService.

Outbound requests go to the fake upstream from conftest; the cache is a
real CacheStore over a temporary SQLite file.
"""

from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
from pydantic import SecretStr

from aipulse.config import Settings
from aipulse.services.cache import CacheStore
from aipulse.services.github import GithubService


@pytest.fixture
def github_service(
    store: CacheStore, test_settings: Settings, http_client: httpx.AsyncClient
) -> GithubService:
    """Create GithubService with the fake upstream client."""
    return GithubService(store, test_settings, client=http_client)


# =============================================================================
# Request Tests
# =============================================================================


class TestRequest:
    """Tests for the outbound search request."""

    @pytest.mark.asyncio
    async def test_search_parameters(self, github_service: GithubService, upstream) -> None:
        await github_service.fetch_and_cache(3)

        request = upstream.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/search/repositories"
        assert request.url.params["q"] == "ai tools"
        assert request.url.params["sort"] == "stars"
        assert request.url.params["order"] == "desc"
        assert request.url.params["per_page"] == "20"
        assert request.url.params["page"] == "3"

    @pytest.mark.asyncio
    async def test_headers_without_token(self, github_service: GithubService, upstream) -> None:
        await github_service.fetch_and_cache(1)

        headers = upstream.requests[0].headers
        assert headers["Accept"] == "application/vnd.github.v3+json"
        assert headers["User-Agent"] == "AI-Pulse-App"
        assert "Authorization" not in headers

    @pytest.mark.asyncio
    async def test_token_header(
        self,
        store: CacheStore,
        test_settings: Settings,
        http_client: httpx.AsyncClient,
        upstream,
    ) -> None:
        settings = test_settings.model_copy(update={"github_token": SecretStr("ghp_test")})
        service = GithubService(store, settings, client=http_client)

        await service.fetch_and_cache(1)

        assert upstream.requests[0].headers["Authorization"] == "token ghp_test"


# =============================================================================
# Fetch And Cache Tests
# =============================================================================


class TestFetchAndCache:
    """Tests for fetch_and_cache."""

    @pytest.mark.asyncio
    async def test_success_maps_and_caches(
        self, github_service: GithubService, store: CacheStore
    ) -> None:
        payload = await github_service.fetch_and_cache(1)

        assert payload is not None
        assert payload[0] == {
            "id": 101,
            "name": "awesome-llm-agents",
            "description": "A curated list of LLM agent frameworks",
            "stars": 5400,
            "url": "https://github.com/octo/awesome-llm-agents",
            "owner": {
                "login": "octo",
                "avatar_url": "https://avatars.githubusercontent.com/u/101?v=4",
            },
            "language": None,
        }
        assert payload[1]["description"] is None

        entry = await store.get("github_tools_page_1")
        assert entry is not None
        assert entry.payload == payload

    @pytest.mark.asyncio
    async def test_upstream_error_returns_none(
        self, github_service: GithubService, store: CacheStore, upstream
    ) -> None:
        upstream.github = lambda request: httpx.Response(500, json={"message": "boom"})

        assert await github_service.fetch_and_cache(1) is None
        assert await store.get("github_tools_page_1") is None

    @pytest.mark.asyncio
    async def test_rate_limited_returns_none(
        self, github_service: GithubService, upstream
    ) -> None:
        upstream.github = lambda request: httpx.Response(
            403, json={"message": "API rate limit exceeded"}
        )

        assert await github_service.fetch_and_cache(2) is None

    @pytest.mark.asyncio
    async def test_network_error_returns_none(
        self, github_service: GithubService, upstream
    ) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        upstream.github = refuse

        assert await github_service.fetch_and_cache(1) is None

    @pytest.mark.asyncio
    async def test_invalid_shape_returns_none(
        self,
        github_service: GithubService,
        store: CacheStore,
        upstream,
        github_search_body: dict[str, Any],
    ) -> None:
        del github_search_body["items"][0]["owner"]
        upstream.github = lambda request: httpx.Response(200, json=github_search_body)

        assert await github_service.fetch_and_cache(1) is None
        assert await store.get("github_tools_page_1") is None

    @pytest.mark.asyncio
    async def test_non_json_body_returns_none(
        self, github_service: GithubService, upstream
    ) -> None:
        upstream.github = lambda request: httpx.Response(200, text="<html>oops</html>")

        assert await github_service.fetch_and_cache(1) is None

    @pytest.mark.asyncio
    async def test_cache_write_failure_returns_none(
        self, github_service: GithubService, store: CacheStore
    ) -> None:
        store.set = AsyncMock(side_effect=RuntimeError("disk full"))  # type: ignore[method-assign]

        assert await github_service.fetch_and_cache(1) is None

    @pytest.mark.asyncio
    async def test_empty_page(self, github_service: GithubService, upstream) -> None:
        upstream.github = lambda request: httpx.Response(200, json={"items": []})

        assert await github_service.fetch_and_cache(40) == []


# =============================================================================
# Client Lifecycle Tests
# =============================================================================


class TestClientLifecycle:
    """Tests for HTTP client ownership."""

    @pytest.mark.asyncio
    async def test_close_keeps_shared_client(
        self, github_service: GithubService, http_client: httpx.AsyncClient
    ) -> None:
        await github_service.close()

        assert not http_client.is_closed

    @pytest.mark.asyncio
    async def test_close_owned_client(self, store: CacheStore, test_settings: Settings) -> None:
        service = GithubService(store, test_settings)
        client = await service._get_client()

        await service.close()

        assert client.is_closed
