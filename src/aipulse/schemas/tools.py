"""Tool schemas - the internal shapes served to the SPA.

These are what the cache stores and what the catalog endpoints return.
Field names on the wire follow the upstream camelCase names
(``votesCount``, ``pageInfo``...) so that a payload read back from the cache
and a freshly fetched one are byte-for-byte the same shape.
"""

from typing import Any

from pydantic import Field

from aipulse.schemas.common import BaseSchema

# =============================================================================
# Product Hunt Tool
# =============================================================================


class Thumbnail(BaseSchema):
    url: str


class TopicNode(BaseSchema):
    name: str


class TopicEdge(BaseSchema):
    node: TopicNode


class Topics(BaseSchema):
    edges: list[TopicEdge] = Field(default_factory=list)


class Tool(BaseSchema):
    """A product-catalog item: snapshot of one Product Hunt post."""

    id: str
    name: str
    tagline: str
    description: str
    url: str
    website: str
    votes_count: int = Field(alias="votesCount")
    created_at: str = Field(alias="createdAt")
    thumbnail: Thumbnail
    topics: Topics

    @property
    def topic_names(self) -> list[str]:
        """Topic tags as plain strings."""
        return [edge.node.name for edge in self.topics.edges]


class PageInfo(BaseSchema):
    """Cursor pagination state for the product catalog."""

    has_next_page: bool = Field(alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")


class ToolsPage(BaseSchema):
    """Body of ``GET /api/tools``."""

    tools: list[Tool]
    page_info: PageInfo = Field(alias="pageInfo")

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with wire (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# GitHub Tool
# =============================================================================


class Owner(BaseSchema):
    login: str
    avatar_url: str


class GithubTool(BaseSchema):
    """A repository-catalog item: snapshot of one GitHub repository."""

    id: int
    name: str
    description: str | None = None
    stars: int
    url: str
    owner: Owner
    language: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict."""
        return self.model_dump(mode="json", by_alias=True)
