"""AI Pulse cache CLI - inspect and maintain the catalog cache.

Usage:
    aipulse-cache keys --prefix github_tools_page_
    aipulse-cache show github_tools_page_1
    aipulse-cache delete product_hunt_tools_initial
    aipulse-cache clear
    aipulse-cache export github --dir ./data/tools
    aipulse-cache search --query agent --category Coding
"""

import argparse
import asyncio
import json
import sys

from aipulse.config import Settings, get_settings
from aipulse.core.database import Database
from aipulse.core.logging import configure_logging
from aipulse.services.cache import GITHUB_KEY_PREFIX, PRODUCTHUNT_KEY_PREFIX, CacheStore
from aipulse.utils.filters import (
    ALL_CATEGORY,
    CATEGORIES,
    filter_github_tools,
    sort_by_stars,
    sort_by_votes,
)
from aipulse.utils.format import format_tool_name
from aipulse.utils.storage import (
    FileToolStorage,
    load_tools_from_storage,
    merge_tools,
    save_tools_to_storage,
)

CATALOG_PREFIXES = {
    "github": GITHUB_KEY_PREFIX,
    "producthunt": PRODUCTHUNT_KEY_PREFIX,
}


def _page_tools(catalog: str, payload: object) -> list[dict]:
    """Tool list held by one cached page."""
    if catalog == "github":
        return payload if isinstance(payload, list) else []
    if isinstance(payload, dict):
        return payload.get("tools") or []
    return []


async def _cached_tools(store: CacheStore, catalog: str) -> list[dict]:
    """Merge every cached page of ``catalog`` into one list."""
    merged: list[dict] = []
    for key in await store.keys(CATALOG_PREFIXES[catalog]):
        entry = await store.get(key)
        if entry is not None:
            merged = merge_tools(merged, _page_tools(catalog, entry.payload))
    return merged


async def show_command(store: CacheStore, args: argparse.Namespace) -> int:
    entry = await store.get(args.key)
    if entry is None:
        print(f"No cache entry for {args.key}")
        return 1
    print(json.dumps({"key": entry.key, "written_at": entry.written_at, "payload": entry.payload}, indent=2))
    return 0


async def delete_command(store: CacheStore, args: argparse.Namespace) -> int:
    await store.delete(args.key)
    print(f"Deleted {args.key}")
    return 0


async def clear_command(store: CacheStore, args: argparse.Namespace) -> int:
    await store.clear()
    print("Cache cleared")
    return 0


async def keys_command(store: CacheStore, args: argparse.Namespace) -> int:
    keys = await store.keys(args.prefix)
    for key in keys:
        print(key)
    if not keys:
        print("No cache entries found.")
    return 0


async def export_command(
    store: CacheStore, args: argparse.Namespace, settings: Settings
) -> int:
    """Merge all cached pages of a catalog into its tool storage list."""
    storage = FileToolStorage(args.dir or settings.tool_storage_dir)

    fresh = await _cached_tools(store, args.catalog)
    merged = merge_tools(load_tools_from_storage(storage, args.catalog), fresh)
    merged = sort_by_stars(merged) if args.catalog == "github" else sort_by_votes(merged)
    save_tools_to_storage(storage, args.catalog, merged, settings.tool_storage_max_items)

    print(f"Exported {len(fresh)} cached {args.catalog} tools ({len(merged)} stored) to {storage.directory}")
    return 0


async def search_command(store: CacheStore, args: argparse.Namespace) -> int:
    tools = sort_by_stars(await _cached_tools(store, "github"))
    matches = filter_github_tools(tools, args.query, args.category)

    if not matches:
        print("No matching tools in the cache.")
        return 0

    for tool in matches:
        language = tool.get("language") or "-"
        print(f"{format_tool_name(tool['name'])} ({tool.get('stars', 0)} stars, {language})")
        print(f"   {tool.get('url', '')}")
    return 0


async def run(args: argparse.Namespace, settings: Settings) -> int:
    database = Database.from_settings(settings)
    try:
        await database.create_tables()
        store = CacheStore(database)

        if args.command == "show":
            return await show_command(store, args)
        if args.command == "delete":
            return await delete_command(store, args)
        if args.command == "clear":
            return await clear_command(store, args)
        if args.command == "keys":
            return await keys_command(store, args)
        if args.command == "export":
            return await export_command(store, args, settings)
        if args.command == "search":
            return await search_command(store, args)
        raise ValueError(f"Unknown command: {args.command}")
    finally:
        await database.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aipulse-cache",
        description="AI Pulse cache CLI - inspect and maintain cached catalog pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s keys --prefix github_tools_page_      # List cached GitHub pages
  %(prog)s show product_hunt_tools_initial       # Show one cached page
  %(prog)s export github                         # Merge cached pages into tool storage
  %(prog)s search --query agent                  # Search cached GitHub tools
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    show_parser = subparsers.add_parser("show", help="Show one cache entry")
    show_parser.add_argument("key", help="Cache key")

    delete_parser = subparsers.add_parser("delete", help="Delete one cache entry")
    delete_parser.add_argument("key", help="Cache key")

    subparsers.add_parser("clear", help="Delete every cache entry")

    keys_parser = subparsers.add_parser("keys", help="List cache keys")
    keys_parser.add_argument("--prefix", default="", help="Only keys starting with this prefix")

    export_parser = subparsers.add_parser("export", help="Merge cached pages into tool storage")
    export_parser.add_argument("catalog", choices=sorted(CATALOG_PREFIXES), help="Catalog to export")
    export_parser.add_argument("--dir", help="Tool storage directory (default: TOOL_STORAGE_DIR)")

    search_parser = subparsers.add_parser("search", help="Search cached GitHub tools")
    search_parser.add_argument("--query", default="", help="Text to match in name, description or language")
    search_parser.add_argument(
        "--category",
        default=ALL_CATEGORY,
        choices=[name for name, _ in CATEGORIES],
        help="Category filter (default: All)",
    )

    return parser


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    settings = settings or get_settings()
    configure_logging(settings)
    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
