"""GitHub repository catalog fetcher.

Searches GitHub for AI tool repositories ranked by stars, validates the
response, maps each repository to a ``GithubTool`` and writes the page to
the cache.

See: https://docs.github.com/en/rest/search/search#search-repositories
"""

from typing import Any

import httpx

from aipulse.config import Settings, get_settings
from aipulse.core.exceptions import SchemaValidationError, UpstreamError
from aipulse.core.logging import get_logger
from aipulse.schemas.github import GithubRepo, parse_github_response
from aipulse.schemas.tools import GithubTool, Owner
from aipulse.services.cache import CacheStore, github_cache_key

logger = get_logger(__name__)


class GithubService:
    """Async client for the GitHub search API.

    Usage:
        ```python
        service = GithubService(cache_store, settings, client=http_client)
        tools = await service.fetch_and_cache(page=1)  # None on failure
        ```
    """

    PROVIDER = "github"

    def __init__(
        self,
        store: CacheStore,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Cache the fetched pages are written to
            settings: Application settings (cached settings if None)
            client: Shared HTTP client; one is created lazily if None
        """
        self.store = store
        self._settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None

    @property
    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self._settings.user_agent,
        }
        token = self._settings.github_token
        if token is not None and token.get_secret_value():
            headers["Authorization"] = f"token {token.get_secret_value()}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._settings.http_timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch_and_cache(self, page: int) -> list[dict[str, Any]] | None:
        """Fetch one search page, cache it and return it.

        Never raises: network, status, validation and cache-write failures
        are logged and reported as ``None``.

        Args:
            page: 1-based search results page

        Returns:
            JSON-ready list of GithubTool dicts, or None on failure
        """
        try:
            tools = await self._fetch_page(page)
            payload = [tool.to_payload() for tool in tools]
            await self.store.set(github_cache_key(page), payload)
        except Exception as e:
            logger.error(
                "github_fetch_failed",
                page=page,
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

        logger.info("github_page_cached", page=page, count=len(payload))
        return payload

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    async def _fetch_page(self, page: int) -> list[GithubTool]:
        client = await self._get_client()
        params: dict[str, Any] = {
            "q": self._settings.github_search_query,
            "sort": "stars",
            "order": "desc",
            "per_page": self._settings.github_page_size,
            "page": page,
        }

        try:
            response = await client.get(
                f"{self._settings.github_api_url.rstrip('/')}/search/repositories",
                params=params,
                headers=self._headers,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamError(
                self.PROVIDER, f"GitHub API failed with status {status}", status=status
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(self.PROVIDER, f"Request failed: {e}") from e

        try:
            raw = response.json()
        except ValueError as e:
            raise SchemaValidationError(self.PROVIDER, "response body is not JSON") from e

        result = parse_github_response(raw)
        if not result.ok or result.value is None:
            raise SchemaValidationError(self.PROVIDER, result.error)

        return [self._to_tool(repo) for repo in result.value.items]

    @staticmethod
    def _to_tool(repo: GithubRepo) -> GithubTool:
        return GithubTool(
            id=repo.id,
            name=repo.name,
            description=repo.description,
            stars=repo.stargazers_count,
            url=repo.html_url,
            owner=Owner(login=repo.owner.login, avatar_url=repo.owner.avatar_url),
            language=repo.language,
        )
