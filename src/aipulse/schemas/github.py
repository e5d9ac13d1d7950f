"""GitHub search API response schema.

Validates the subset of ``GET /search/repositories`` that AI Pulse uses.
Scalars are strict: a numeric string where a number is expected is a
shape mismatch, not something to coerce.

See: https://docs.github.com/en/rest/search/search#search-repositories
"""

from typing import Any

from pydantic import BaseModel, StrictInt, StrictStr

from aipulse.schemas.common import ParseResult, UrlStr, parse_model


class GithubOwner(BaseModel):
    login: StrictStr
    avatar_url: UrlStr


class GithubRepo(BaseModel):
    """One repository from the ``items`` array."""

    id: StrictInt
    name: StrictStr
    description: StrictStr | None
    stargazers_count: StrictInt
    html_url: UrlStr
    owner: GithubOwner
    language: StrictStr | None


class GithubSearchResponse(BaseModel):
    items: list[GithubRepo]


def parse_github_response(raw: Any) -> ParseResult[GithubSearchResponse]:
    """Validate a decoded GitHub search response.

    Returns:
        ParseResult holding the response, or the validation error text
    """
    return parse_model(GithubSearchResponse, raw)
