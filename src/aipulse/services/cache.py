"""CacheStore - persistent key/value store for catalog payloads.

A thin layer over the ``api_cache`` table:

- ``get`` returns the payload and the time it was written
- ``set`` upserts in a single statement and stamps the current time
- ``delete`` / ``clear`` remove rows and are idempotent

The store has no notion of freshness. Each catalog decides what "stale"
means by comparing ``CacheEntry.age`` with its own TTL
(see ``aipulse.services.catalog``).

Cache Key Types:
    - github_tools_page_{page} - GitHub repository search page
    - product_hunt_tools_{cursor} - Product Hunt posts page ("initial" first)
"""

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from aipulse.core.database import Database
from aipulse.core.logging import get_logger
from aipulse.models import ApiCache

logger = get_logger(__name__)

Clock = Callable[[], float]

GITHUB_KEY_PREFIX = "github_tools_page_"
PRODUCTHUNT_KEY_PREFIX = "product_hunt_tools_"


def github_cache_key(page: int) -> str:
    """Cache key for one GitHub search page (e.g., "github_tools_page_1")."""
    return f"{GITHUB_KEY_PREFIX}{page}"


def producthunt_cache_key(after: str) -> str:
    """Cache key for one Product Hunt page (e.g., "product_hunt_tools_initial")."""
    return f"{PRODUCTHUNT_KEY_PREFIX}{after}"


@dataclass(frozen=True)
class CacheEntry:
    """A decoded cache row."""

    key: str
    payload: Any
    written_at: float

    def age(self, now: float) -> float:
        """Seconds elapsed since the entry was written."""
        return now - self.written_at


class CacheStore:
    """Key/value cache over the ``api_cache`` table.

    Usage:
        ```python
        store = CacheStore(database)
        await store.set("github_tools_page_1", tools)
        entry = await store.get("github_tools_page_1")
        ```
    """

    def __init__(self, database: Database, clock: Clock = time.time) -> None:
        """Initialize the store.

        Args:
            database: Open database holding the ``api_cache`` table
            clock: Source of the current epoch time (injectable for tests)
        """
        self.database = database
        self.clock = clock

    async def get(self, key: str) -> CacheEntry | None:
        """Fetch the entry for ``key``.

        A row whose payload cannot be decoded is logged and reported as a
        miss. Database errors propagate.
        """
        async with self.database.session() as session:
            row = await session.get(ApiCache, key)
            if row is None:
                return None
            raw, written_at = row.data, row.written_at

        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.error("cache_entry_corrupt", cache_key=key, error=str(e))
            return None

        return CacheEntry(key=key, payload=payload, written_at=written_at)

    async def set(self, key: str, payload: Any) -> CacheEntry:
        """Upsert ``payload`` under ``key``, replacing any previous entry.

        Args:
            key: Cache key
            payload: JSON-serializable value

        Returns:
            The entry as written
        """
        data = json.dumps(payload)
        written_at = self.clock()

        insert = pg_insert if self.database.dialect == "postgresql" else sqlite_insert
        stmt = insert(ApiCache).values(key=key, data=data, written_at=written_at)
        stmt = stmt.on_conflict_do_update(
            index_elements=[ApiCache.key],
            set_={"data": stmt.excluded.data, "written_at": stmt.excluded.written_at},
        )

        async with self.database.session() as session:
            await session.execute(stmt)
            await session.commit()

        logger.debug("cache_set", cache_key=key, written_at=written_at)
        return CacheEntry(key=key, payload=payload, written_at=written_at)

    async def delete(self, key: str) -> None:
        """Remove ``key``; no error if it is absent."""
        async with self.database.session() as session:
            await session.execute(delete(ApiCache).where(ApiCache.key == key))
            await session.commit()
        logger.debug("cache_deleted", cache_key=key)

    async def clear(self) -> None:
        """Remove every entry."""
        async with self.database.session() as session:
            await session.execute(delete(ApiCache))
            await session.commit()
        logger.info("cache_cleared")

    async def keys(self, prefix: str = "") -> list[str]:
        """List stored keys starting with ``prefix``, sorted."""
        stmt = select(ApiCache.key).order_by(ApiCache.key)
        if prefix:
            stmt = stmt.where(ApiCache.key.startswith(prefix, autoescape=True))
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())
