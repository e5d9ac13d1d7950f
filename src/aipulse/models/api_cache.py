"""ApiCache model - persistent key/value cache for catalog responses.

One row per cache key. ``data`` holds the JSON-encoded payload as text so
that a corrupt row can be detected (and skipped) when it is decoded, and
``written_at`` is the epoch time of the last successful write. The
CacheStore manages this table directly (no repository needed).
"""

from __future__ import annotations

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from aipulse.models.base import Base


class ApiCache(Base):
    """Cached upstream payload for one ``(catalog, page/cursor)`` key.

    Attributes:
        key: Cache key (e.g., "github_tools_page_1")
        data: JSON-encoded payload
        written_at: Epoch seconds of the last write
    """

    __tablename__ = "api_cache"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    data: Mapped[str] = mapped_column(Text, nullable=False)
    written_at: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<ApiCache(key='{self.key}', written_at={self.written_at})>"
