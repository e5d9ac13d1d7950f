"""Helpers shared by the API, the admin CLI and client code."""

from aipulse.utils.filters import (
    ALL_CATEGORY,
    CATEGORIES,
    category_keywords,
    filter_github_tools,
    sort_by_stars,
    sort_by_votes,
)
from aipulse.utils.format import format_tool_name
from aipulse.utils.saved import is_tool_saved, toggle_saved_tool
from aipulse.utils.storage import (
    FileToolStorage,
    ToolStorage,
    load_tools_from_storage,
    merge_tools,
    save_tools_to_storage,
)

__all__ = [
    # Presentation
    "ALL_CATEGORY",
    "CATEGORIES",
    "category_keywords",
    "filter_github_tools",
    "format_tool_name",
    "sort_by_stars",
    "sort_by_votes",
    # Saved tools
    "is_tool_saved",
    "toggle_saved_tool",
    # Persistence
    "FileToolStorage",
    "ToolStorage",
    "load_tools_from_storage",
    "merge_tools",
    "save_tools_to_storage",
]
