"""FastAPI dependency injection.

Long-lived objects (database, cache store, services) are built once in the
application lifespan and kept on ``app.state``. The functions here hand
them to route handlers through ``Depends()`` and are the seams tests
override with ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request

from aipulse.config import Settings
from aipulse.core.database import Database
from aipulse.services.catalog import CatalogService
from aipulse.services.descriptions import DescriptionService


def _state_attr(request: Request, name: str) -> object:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} not initialized. Is the application lifespan running?")
    return value


# ========================================
# Settings Dependencies
# ========================================
def get_settings_from_request(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return request.app.state.settings


# ========================================
# Storage Dependencies
# ========================================
def get_database(request: Request) -> Database:
    """Get the open cache database."""
    return _state_attr(request, "database")  # type: ignore[return-value]


# ========================================
# Service Dependencies
# ========================================
def get_catalog_service(request: Request) -> CatalogService:
    """Get the cache-aside catalog reader."""
    return _state_attr(request, "catalog_service")  # type: ignore[return-value]


def get_description_service(request: Request) -> DescriptionService:
    """Get the description cleaning service."""
    return _state_attr(request, "description_service")  # type: ignore[return-value]


SettingsDep = Annotated[Settings, Depends(get_settings_from_request)]
DatabaseDep = Annotated[Database, Depends(get_database)]
CatalogDep = Annotated[CatalogService, Depends(get_catalog_service)]
DescriptionDep = Annotated[DescriptionService, Depends(get_description_service)]
