"""Catalog endpoints.

``GET /api/github-tools`` and ``GET /api/tools`` serve cache-aside reads of
the two upstream catalogs. Upstream trouble is absorbed by the catalog
service (stale data, then fallback data); only unexpected errors reach the
client, as a 500 with a fixed message.
"""

import re
from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from aipulse.core.exceptions import CatalogUnavailableError
from aipulse.dependencies import CatalogDep
from aipulse.schemas.common import ErrorResponse
from aipulse.schemas.tools import GithubTool, ToolsPage
from aipulse.services.catalog import CatalogResult
from aipulse.services.producthunt import INITIAL_CURSOR


router = APIRouter()

DATA_SOURCE_HEADER = "X-Data-Source"

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_page(raw: str | None) -> int:
    """Parse a ``page`` query value leniently.

    The leading integer is used (``"3abc"`` -> 3); absent, unparseable and
    non-positive values mean page 1.
    """
    if not raw:
        return 1
    match = _LEADING_INT.match(raw)
    if match is None:
        return 1
    page = int(match.group(1))
    return page if page >= 1 else 1


def _respond(result: CatalogResult) -> JSONResponse:
    return JSONResponse(
        content=result.payload,
        headers={DATA_SOURCE_HEADER: result.source.value},
    )


@router.get(
    "/github-tools",
    status_code=status.HTTP_200_OK,
    summary="List GitHub AI tools",
    description="One page of AI tool repositories ranked by stars.",
    responses={
        200: {"model": list[GithubTool], "description": "Tools (live, cached or fallback)"},
        500: {"model": ErrorResponse, "description": "Catalog temporarily unavailable"},
    },
)
async def list_github_tools(
    catalog: CatalogDep,
    page: Annotated[str | None, Query(description="Page number (1-based)")] = None,
) -> JSONResponse:
    page_number = parse_page(page)

    try:
        result = await catalog.github_tools(page_number)
    except Exception as e:
        raise CatalogUnavailableError(details={"catalog": "github", "page": page_number}) from e

    return _respond(result)


@router.get(
    "/tools",
    status_code=status.HTTP_200_OK,
    summary="List Product Hunt AI tools",
    description="One page of AI products; pass the previous page's endCursor as `after`.",
    responses={
        200: {"model": ToolsPage, "description": "Tools (live, cached or fallback)"},
        500: {"model": ErrorResponse, "description": "Catalog temporarily unavailable"},
    },
)
async def list_product_tools(
    catalog: CatalogDep,
    after: Annotated[
        str | None, Query(description='Cursor, or "initial" for the first page')
    ] = None,
) -> JSONResponse:
    cursor = after or INITIAL_CURSOR

    try:
        result = await catalog.product_tools(cursor)
    except Exception as e:
        raise CatalogUnavailableError(details={"catalog": "producthunt", "after": cursor}) from e

    return _respond(result)
