"""Fixed fallback catalogs.

Served only when a page is neither cached nor fetchable, so the SPA never
renders an empty grid because an upstream is down or a token is missing.
"""

import copy
from datetime import UTC, datetime
from typing import Any

MOCK_GITHUB_TOOLS: list[dict[str, Any]] = [
    {
        "id": 1,
        "name": "AutoGPT",
        "description": "An experimental open-source attempt to make GPT-4 fully autonomous.",
        "stars": 162000,
        "url": "https://github.com/Significant-Gravitas/Auto-GPT",
        "owner": {
            "login": "Significant-Gravitas",
            "avatar_url": "https://avatars.githubusercontent.com/u/130987975?v=4",
        },
        "language": "Python",
    },
    {
        "id": 2,
        "name": "LangChain",
        "description": "Building applications with LLMs through composability.",
        "stars": 85000,
        "url": "https://github.com/langchain-ai/langchain",
        "owner": {
            "login": "langchain-ai",
            "avatar_url": "https://avatars.githubusercontent.com/u/126733545?v=4",
        },
        "language": "Python",
    },
]

_MOCK_PRODUCT_TOOLS: list[dict[str, Any]] = [
    {
        "id": "mock-1",
        "name": "Perplexity AI",
        "tagline": "AI-powered search engine.",
        "description": (
            "Perplexity AI is an AI-powered search engine and chatbot that uses "
            "large language models to provide accurate and informative answers "
            "to user queries."
        ),
        "url": "https://www.perplexity.ai",
        "website": "https://www.perplexity.ai",
        "votesCount": 4500,
        "thumbnail": {"url": "https://picsum.photos/seed/perplexity/200/200"},
        "topics": {"edges": [{"node": {"name": "Search"}}, {"node": {"name": "AI"}}]},
    },
    {
        "id": "mock-2",
        "name": "Jasper",
        "tagline": "AI content platform for enterprise teams.",
        "description": (
            "Jasper is the AI content platform that helps enterprise teams "
            "create high-quality content faster."
        ),
        "url": "https://www.jasper.ai",
        "website": "https://www.jasper.ai",
        "votesCount": 3800,
        "thumbnail": {"url": "https://picsum.photos/seed/jasper/200/200"},
        "topics": {
            "edges": [{"node": {"name": "Marketing"}}, {"node": {"name": "Writing"}}]
        },
    },
]


def github_fallback() -> list[dict[str, Any]]:
    """Fallback body for ``GET /api/github-tools``."""
    return copy.deepcopy(MOCK_GITHUB_TOOLS)


def producthunt_fallback() -> dict[str, Any]:
    """Fallback body for ``GET /api/tools``; ``createdAt`` is the time of the call."""
    created_at = datetime.now(UTC).isoformat().replace("+00:00", "Z")
    return {
        "tools": [
            {**copy.deepcopy(tool), "createdAt": created_at} for tool in _MOCK_PRODUCT_TOOLS
        ],
        "pageInfo": {"hasNextPage": False, "endCursor": None},
    }
