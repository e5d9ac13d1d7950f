"""Pytest configuration and fixtures for AI Pulse tests.

This module provides reusable fixtures for:
- Settings overrides (SQLite cache file under tmp_path)
- A fake upstream for GitHub and Product Hunt (httpx.MockTransport)
- Async test client with the application lifespan running
- Cache database and store with a controllable clock
- Sample upstream payloads
"""

import copy
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from aipulse.config import Settings
from aipulse.core.database import Database
from aipulse.main import create_app
from aipulse.services.cache import CacheStore

GITHUB_HOST = "api.github.com"
PRODUCTHUNT_HOST = "api.producthunt.com"

# =============================================================================
# Sample Upstream Payloads
# =============================================================================

GITHUB_SEARCH_BODY: dict[str, Any] = {
    "total_count": 2,
    "incomplete_results": False,
    "items": [
        {
            "id": 101,
            "name": "awesome-llm-agents",
            "full_name": "octo/awesome-llm-agents",
            "description": "A curated list of LLM agent frameworks",
            "stargazers_count": 5400,
            "html_url": "https://github.com/octo/awesome-llm-agents",
            "owner": {
                "login": "octo",
                "avatar_url": "https://avatars.githubusercontent.com/u/101?v=4",
            },
            "language": None,
        },
        {
            "id": 102,
            "name": "vision-kit",
            "full_name": "pixel/vision-kit",
            "description": None,
            "stargazers_count": 1200,
            "html_url": "https://github.com/pixel/vision-kit",
            "owner": {
                "login": "pixel",
                "avatar_url": "https://avatars.githubusercontent.com/u/102?v=4",
            },
            "language": "Python",
        },
    ],
}

PRODUCTHUNT_POST: dict[str, Any] = {
    "id": "452781",
    "name": "Notably",
    "tagline": "AI meeting notes that write themselves",
    "description": "Notably records, transcribes and summarises your meetings.",
    "url": "https://www.producthunt.com/posts/notably",
    "votesCount": 321,
    "thumbnail": {"url": "https://ph-files.imgix.net/notably.png"},
    "website": "https://notably.example.com",
    "createdAt": "2024-05-01T07:01:00Z",
    "topics": {"edges": [{"node": {"name": "Productivity"}}, {"node": {"name": "AI"}}]},
}

PRODUCTHUNT_BODY: dict[str, Any] = {
    "data": {
        "posts": {
            "pageInfo": {"hasNextPage": True, "endCursor": "MjA="},
            "edges": [{"node": PRODUCTHUNT_POST}],
        }
    }
}


@pytest.fixture
def github_search_body() -> dict[str, Any]:
    """Return a GitHub repository search response (mutable copy)."""
    return copy.deepcopy(GITHUB_SEARCH_BODY)


@pytest.fixture
def producthunt_body() -> dict[str, Any]:
    """Return a Product Hunt posts response (mutable copy)."""
    return copy.deepcopy(PRODUCTHUNT_BODY)


# =============================================================================
# Fake Upstream
# =============================================================================

Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Answers outbound catalog requests and records them.

    Swap ``github`` / ``producthunt`` for another handler to change what the
    provider returns.
    """

    def __init__(self) -> None:
        self.github: Handler = lambda request: httpx.Response(200, json=GITHUB_SEARCH_BODY)
        self.producthunt: Handler = lambda request: httpx.Response(200, json=PRODUCTHUNT_BODY)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == GITHUB_HOST:
            return self.github(request)
        if request.url.host == PRODUCTHUNT_HOST:
            return self.producthunt(request)
        return httpx.Response(404, json={"message": "Not Found"})

    def calls(self, host: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.host == host]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def upstream() -> FakeUpstream:
    """Create a fake upstream serving the sample payloads."""
    return FakeUpstream()


@pytest.fixture
async def http_client(upstream: FakeUpstream) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an outbound HTTP client wired to the fake upstream."""
    async with httpx.AsyncClient(transport=upstream.transport) as client:
        yield client


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Create test-specific settings.

    Every test gets its own cache database file and tool storage directory.
    """
    return Settings(
        app_env="development",  # type: ignore[arg-type]
        debug=False,
        log_level="DEBUG",  # type: ignore[arg-type]
        log_format="console",  # type: ignore[arg-type]
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}",
        github_token=None,
        producthunt_developer_token="ph-test-token",  # type: ignore[arg-type]
        gemini_api_key="gemini-test-key",  # type: ignore[arg-type]
        tool_storage_dir=str(tmp_path / "tools"),
    )


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(test_settings: Settings, upstream: FakeUpstream) -> FastAPI:
    """Create a test FastAPI application talking to the fake upstream."""
    return create_app(settings=test_settings, http_transport=upstream.transport)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing.

    The application lifespan is entered first so the database and services
    exist on ``app.state``.

    Usage:
        async def test_endpoint(async_client: AsyncClient):
            response = await async_client.get("/health/live")
            assert response.status_code == 200
    """
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            yield client


# =============================================================================
# Cache Fixtures
# =============================================================================


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """Create the cache database in a temporary SQLite file."""
    db = Database(test_settings.database_url)
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def store(database: Database, clock: FakeClock) -> CacheStore:
    """Create a CacheStore driven by the fake clock."""
    return CacheStore(database, clock=clock)
