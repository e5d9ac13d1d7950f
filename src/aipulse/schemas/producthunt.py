"""Product Hunt GraphQL response schema.

Mirrors the ``posts`` query issued by ``ProductHuntService``. Every field
the query selects is required; a post missing any of them fails the whole
page.
"""

from typing import Any

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr

from aipulse.schemas.common import ParseResult, UrlStr, parse_model


class ProductHuntThumbnail(BaseModel):
    url: UrlStr


class ProductHuntTopicNode(BaseModel):
    name: StrictStr


class ProductHuntTopicEdge(BaseModel):
    node: ProductHuntTopicNode


class ProductHuntTopics(BaseModel):
    edges: list[ProductHuntTopicEdge]


class ProductHuntPost(BaseModel):
    id: StrictStr
    name: StrictStr
    tagline: StrictStr
    description: StrictStr
    url: UrlStr
    votes_count: StrictInt = Field(alias="votesCount")
    thumbnail: ProductHuntThumbnail
    website: UrlStr
    created_at: StrictStr = Field(alias="createdAt")
    topics: ProductHuntTopics


class ProductHuntPostEdge(BaseModel):
    node: ProductHuntPost


class ProductHuntPageInfo(BaseModel):
    has_next_page: StrictBool = Field(alias="hasNextPage")
    end_cursor: StrictStr | None = Field(alias="endCursor")


class ProductHuntPosts(BaseModel):
    page_info: ProductHuntPageInfo = Field(alias="pageInfo")
    edges: list[ProductHuntPostEdge]


class ProductHuntData(BaseModel):
    posts: ProductHuntPosts


class ProductHuntResponse(BaseModel):
    data: ProductHuntData


def parse_producthunt_response(raw: Any) -> ParseResult[ProductHuntResponse]:
    """Validate a decoded Product Hunt GraphQL response.

    Returns:
        ParseResult holding the response, or the validation error text
    """
    return parse_model(ProductHuntResponse, raw)
