"""Search, category filtering and ranking of catalog payloads.

All helpers work on JSON-ready tool dicts as served by the catalog
endpoints and stored by :mod:`aipulse.utils.storage`.
"""

from typing import Any

ALL_CATEGORY = "All"

# (name, icon) pairs in display order
CATEGORIES: list[tuple[str, str]] = [
    (ALL_CATEGORY, "LayoutGrid"),
    ("Writing", "PenTool"),
    ("Coding", "Code"),
    ("Design", "Palette"),
    ("Marketing", "Megaphone"),
    ("Productivity", "Zap"),
    ("Automation", "Cpu"),
    ("Agents", "Bot"),
    ("Data", "BarChart"),
]

_AGENT_KEYWORDS = ["agent", "bot", "llm", "chat", "assistant", "autonomous"]
_DATA_KEYWORDS = ["data", "analytics", "visualization", "chart", "graph", "database", "sql"]

CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "coding": ["code", "dev", "framework", "lib", "lang", "api", "sdk", "cli"],
    "writing": ["text", "content", "editor", "write", "blog", "copy"],
    "design": ["ui", "image", "video", "art", "design", "graphic", "svg", "css"],
    "marketing": ["marketing", "seo", "social", "analytics", "growth", "email"],
    "productivity": ["productivity", "task", "manage", "note", "calendar", "time"],
    "automation": ["workflow", "agent", "bot", "automation", "script", "cron"],
    "agents": _AGENT_KEYWORDS,
    "ai agents": _AGENT_KEYWORDS,
    "data": _DATA_KEYWORDS,
    "data & analytics": _DATA_KEYWORDS,
}


def category_keywords(category: str) -> list[str]:
    """Keywords for a category; unknown categories match their own name."""
    lowered = category.lower()
    return CATEGORY_KEYWORDS.get(lowered, [lowered])


def _searchable_text(tool: dict[str, Any]) -> tuple[str, str, str]:
    return (
        (tool.get("name") or "").lower(),
        (tool.get("description") or "").lower(),
        (tool.get("language") or "").lower(),
    )


def filter_github_tools(
    tools: list[dict[str, Any]],
    query: str = "",
    category: str = ALL_CATEGORY,
) -> list[dict[str, Any]]:
    """Filter GitHub tools by free-text query and category.

    The query is a case-insensitive substring match against name,
    description or language. A category other than ``All`` additionally
    requires one of its keywords somewhere in the same text.
    """
    needle = query.lower()
    keywords = None if category == ALL_CATEGORY else category_keywords(category)

    matched = []
    for tool in tools:
        name, description, language = _searchable_text(tool)
        if needle and not (needle in name or needle in description or needle in language):
            continue
        if keywords is not None:
            text = f"{name} {description} {language}"
            if not any(keyword in text for keyword in keywords):
                continue
        matched.append(tool)
    return matched


def sort_by_stars(tools: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(tools, key=lambda tool: tool.get("stars") or 0, reverse=True)


def sort_by_votes(tools: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(tools, key=lambda tool: tool.get("votesCount") or 0, reverse=True)
