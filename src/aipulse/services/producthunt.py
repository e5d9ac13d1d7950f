"""Product Hunt catalog fetcher.

Queries the Product Hunt GraphQL API for posts in the AI topic, validates
the response, maps each post to a ``Tool`` and writes the page (tools plus
cursor state) to the cache.

Live fetches need a developer token. Without one the fetcher does not call
out at all and always reports failure, so the catalog serves whatever is
cached or the fallback list.

See: https://api.producthunt.com/v2/docs
"""

from typing import Any

import httpx

from aipulse.config import Settings, get_settings
from aipulse.core.exceptions import SchemaValidationError, UpstreamError
from aipulse.core.logging import get_logger
from aipulse.schemas.producthunt import ProductHuntPost, parse_producthunt_response
from aipulse.schemas.tools import (
    PageInfo,
    Thumbnail,
    Tool,
    TopicEdge,
    TopicNode,
    Topics,
    ToolsPage,
)
from aipulse.services.cache import CacheStore, producthunt_cache_key

logger = get_logger(__name__)

# Cursor token meaning "first page"; sent upstream as a null cursor.
INITIAL_CURSOR = "initial"

POSTS_QUERY = """
query($topic: String, $after: String, $first: Int) {
  posts(topic: $topic, first: $first, after: $after) {
    pageInfo {
      hasNextPage
      endCursor
    }
    edges {
      node {
        id
        name
        tagline
        description
        url
        votesCount
        thumbnail {
          url
        }
        website
        createdAt
        topics {
          edges {
            node {
              name
            }
          }
        }
      }
    }
  }
}
"""


class ProductHuntService:
    """Async client for the Product Hunt GraphQL API.

    Usage:
        ```python
        service = ProductHuntService(cache_store, settings, client=http_client)
        page = await service.fetch_and_cache("initial")  # None on failure
        ```
    """

    PROVIDER = "producthunt"

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
    def token(self) -> str | None:
        """Developer token, or None when not configured."""
        token = self._settings.producthunt_developer_token
        if token is None or not token.get_secret_value():
            return None
        return token.get_secret_value()

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

    async def fetch_and_cache(self, after: str) -> dict[str, Any] | None:
        """Fetch one page of posts, cache it and return it.

        Never raises: a missing token, network, status, validation and
        cache-write failures are logged and reported as ``None``.

        Args:
            after: Cursor from a previous page's ``endCursor``, or "initial"

        Returns:
            JSON-ready ``{"tools": [...], "pageInfo": {...}}``, or None
        """
        token = self.token
        if token is None:
            logger.warning("producthunt_token_missing", after=after)
            return None

        try:
            page = await self._fetch_page(after, token)
            payload = page.to_payload()
            await self.store.set(producthunt_cache_key(after), payload)
        except Exception as e:
            logger.error(
                "producthunt_fetch_failed",
                after=after,
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

        logger.info("producthunt_page_cached", after=after, count=len(page.tools))
        return payload

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    async def _fetch_page(self, after: str, token: str) -> ToolsPage:
        client = await self._get_client()
        body = {
            "query": POSTS_QUERY,
            "variables": {
                "topic": self._settings.producthunt_topic,
                "first": self._settings.producthunt_page_size,
                "after": None if after == INITIAL_CURSOR else after,
            },
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
            "User-Agent": self._settings.user_agent,
        }

        try:
            response = await client.post(
                self._settings.producthunt_api_url, json=body, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise UpstreamError(
                self.PROVIDER,
                f"Product Hunt API failed with status {status}",
                status=status,
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(self.PROVIDER, f"Request failed: {e}") from e

        try:
            raw = response.json()
        except ValueError as e:
            raise SchemaValidationError(self.PROVIDER, "response body is not JSON") from e

        result = parse_producthunt_response(raw)
        if not result.ok or result.value is None:
            raise SchemaValidationError(self.PROVIDER, result.error)

        posts = result.value.data.posts
        return ToolsPage(
            tools=[self._to_tool(edge.node) for edge in posts.edges],
            page_info=PageInfo(
                has_next_page=posts.page_info.has_next_page,
                end_cursor=posts.page_info.end_cursor,
            ),
        )

    @staticmethod
    def _to_tool(post: ProductHuntPost) -> Tool:
        return Tool(
            id=post.id,
            name=post.name,
            tagline=post.tagline,
            description=post.description,
            url=post.url,
            website=post.website,
            votes_count=post.votes_count,
            created_at=post.created_at,
            thumbnail=Thumbnail(url=post.thumbnail.url),
            topics=Topics(
                edges=[
                    TopicEdge(node=TopicNode(name=edge.node.name))
                    for edge in post.topics.edges
                ]
            ),
        )
