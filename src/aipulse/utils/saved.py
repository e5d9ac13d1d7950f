"""A user's saved tools, identified by tool id."""

from typing import Any


def is_tool_saved(saved: list[dict[str, Any]], tool: dict[str, Any]) -> bool:
    return any(item.get("id") == tool.get("id") for item in saved)


def toggle_saved_tool(saved: list[dict[str, Any]], tool: dict[str, Any]) -> list[dict[str, Any]]:
    """Return a new list with ``tool`` removed if saved, appended otherwise."""
    if is_tool_saved(saved, tool):
        return [item for item in saved if item.get("id") != tool.get("id")]
    return [*saved, tool]
