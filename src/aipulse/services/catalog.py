"""CatalogService - cache-aside reads for the two tool catalogs.

For one ``(catalog, page/cursor)`` key:

- fresh hit (age <= TTL): serve the cached payload
- stale hit (age > TTL): serve the cached payload now, refetch in the
  background
- miss: fetch inline; serve the result, or the fixed fallback list if the
  fetch fails

Fetch failures never escape (fetchers return ``None``). Anything else, for
instance the cache database failing, propagates to the endpoint.
"""

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from aipulse.config import Settings, get_settings
from aipulse.core.logging import get_logger
from aipulse.services.cache import CacheStore, github_cache_key, producthunt_cache_key
from aipulse.services.fallback import github_fallback, producthunt_fallback
from aipulse.services.github import GithubService
from aipulse.services.producthunt import ProductHuntService
from aipulse.services.refresh import BackgroundRefresher

logger = get_logger(__name__)


class DataSource(str, Enum):
    """Where a catalog response came from (sent as ``X-Data-Source``)."""

    CACHE = "cache"
    STALE = "stale"
    FRESH = "fresh"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class CatalogResult:
    payload: Any
    source: DataSource


class CatalogService:
    """Cache-aside reader for the GitHub and Product Hunt catalogs.

    Usage:
        ```python
        result = await catalog.github_tools(page=2)
        return JSONResponse(result.payload, headers={"X-Data-Source": result.source})
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        github: GithubService,
        producthunt: ProductHuntService,
        refresher: BackgroundRefresher,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.github = github
        self.producthunt = producthunt
        self.refresher = refresher
        self._settings = settings or get_settings()
        self.clock = clock

    async def github_tools(self, page: int) -> CatalogResult:
        """Serve one GitHub page (30 minute TTL by default)."""
        return await self._read_through(
            catalog="github",
            key=github_cache_key(page),
            ttl=self._settings.github_cache_ttl,
            fetch=lambda: self.github.fetch_and_cache(page),
            fallback=github_fallback,
        )

    async def product_tools(self, after: str) -> CatalogResult:
        """Serve one Product Hunt page (15 minute TTL by default)."""
        return await self._read_through(
            catalog="producthunt",
            key=producthunt_cache_key(after),
            ttl=self._settings.producthunt_cache_ttl,
            fetch=lambda: self.producthunt.fetch_and_cache(after),
            fallback=producthunt_fallback,
        )

    async def _read_through(
        self,
        *,
        catalog: str,
        key: str,
        ttl: float,
        fetch: Callable[[], Awaitable[Any | None]],
        fallback: Callable[[], Any],
    ) -> CatalogResult:
        entry = await self.store.get(key)

        if entry is not None:
            age = entry.age(self.clock())
            if age <= ttl:
                logger.debug("catalog_cache_hit", catalog=catalog, cache_key=key)
                return CatalogResult(entry.payload, DataSource.CACHE)

            logger.info(
                "catalog_cache_stale",
                catalog=catalog,
                cache_key=key,
                age_seconds=round(age, 1),
            )
            self.refresher.schedule(key, fetch)
            return CatalogResult(entry.payload, DataSource.STALE)

        logger.debug("catalog_cache_miss", catalog=catalog, cache_key=key)
        fresh = await fetch()
        if fresh is not None:
            return CatalogResult(fresh, DataSource.FRESH)

        logger.warning("catalog_serving_fallback", catalog=catalog, cache_key=key)
        return CatalogResult(fallback(), DataSource.FALLBACK)
