"""API main router.

Aggregates the API routers into a single router mounted at ``/api``.
"""

from fastapi import APIRouter

from aipulse.api.catalog import router as catalog_router
from aipulse.api.descriptions import router as descriptions_router

router = APIRouter()

router.include_router(catalog_router, tags=["Catalog"])
router.include_router(descriptions_router, tags=["Descriptions"])
