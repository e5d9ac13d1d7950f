"""Services package for AI Pulse.

This module exports service classes for business logic.
"""

from aipulse.services.cache import (
    CacheEntry,
    CacheStore,
    github_cache_key,
    producthunt_cache_key,
)
from aipulse.services.catalog import CatalogResult, CatalogService, DataSource
from aipulse.services.descriptions import DescriptionService
from aipulse.services.github import GithubService
from aipulse.services.producthunt import INITIAL_CURSOR, ProductHuntService
from aipulse.services.refresh import BackgroundRefresher

__all__ = [
    # Cache
    "CacheEntry",
    "CacheStore",
    "github_cache_key",
    "producthunt_cache_key",
    # Catalogs
    "CatalogResult",
    "CatalogService",
    "DataSource",
    "GithubService",
    "INITIAL_CURSOR",
    "ProductHuntService",
    "BackgroundRefresher",
    # Generative text
    "DescriptionService",
]
