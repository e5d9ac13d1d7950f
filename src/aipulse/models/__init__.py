"""Models package for AI Pulse.

This module exports the Base class and all model classes.
"""

from aipulse.models.api_cache import ApiCache
from aipulse.models.base import Base

__all__ = [
    "Base",
    "ApiCache",
]
