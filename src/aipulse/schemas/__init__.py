"""Pydantic schemas for AI Pulse: upstream payloads, tools and API bodies.

The upstream response models stay in ``schemas.github`` and
``schemas.producthunt``; this module exports what clients and routes use.
"""

from aipulse.schemas.common import BaseSchema, ErrorResponse, ParseResult, parse_model
from aipulse.schemas.descriptions import CleanDescriptionRequest, CleanDescriptionResponse
from aipulse.schemas.tools import GithubTool, Owner, PageInfo, Tool, ToolsPage
from aipulse.schemas.users import User

__all__ = [
    # Common
    "BaseSchema",
    "ErrorResponse",
    "ParseResult",
    "parse_model",
    # Tools
    "GithubTool",
    "Owner",
    "PageInfo",
    "Tool",
    "ToolsPage",
    # Users
    "User",
    # Descriptions
    "CleanDescriptionRequest",
    "CleanDescriptionResponse",
]
