"""Persistent tool lists.

Catalog pages are accumulated into one list per catalog so a client can
show everything it has seen so far before the next fetch completes.
Lists are merged by tool identity, capped in size and stored as a JSON
string under ``aipulse_tools_<key>`` in a string key-value store.
"""

import json
from pathlib import Path
from typing import Any, Protocol

from aipulse.core.exceptions import StorageError
from aipulse.core.logging import get_logger

logger = get_logger(__name__)

STORAGE_KEY_PREFIX = "aipulse_tools_"
DEFAULT_MAX_ITEMS = 5000

Tool = dict[str, Any]


class ToolStorage(Protocol):
    """String key-value store, shaped like a browser's ``localStorage``."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class FileToolStorage:
    """ToolStorage keeping one file per key in a directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}", details={"key": key}) from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write {path}", details={"key": key}) from e

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def _identity(tool: Tool) -> Any:
    return tool.get("id") or tool.get("name")


def merge_tools(old_tools: list[Tool], new_tools: list[Tool]) -> list[Tool]:
    """Merge two tool lists, the newer entry winning on identity clashes.

    Identity is the tool's ``id`` when truthy, otherwise its ``name``.
    Order follows first appearance; a replaced tool keeps its old slot.
    """
    merged: dict[Any, Tool] = {}
    for tool in old_tools:
        merged[_identity(tool)] = tool
    for tool in new_tools:
        merged[_identity(tool)] = tool
    return list(merged.values())


def save_tools_to_storage(
    storage: ToolStorage,
    key: str,
    tools: list[Tool],
    max_items: int = DEFAULT_MAX_ITEMS,
) -> None:
    """Store the last ``max_items`` tools under ``aipulse_tools_<key>``.

    Failures are logged and swallowed; persistence is best effort.
    """
    to_save = tools[-max_items:] if max_items > 0 else []
    try:
        storage.set_item(f"{STORAGE_KEY_PREFIX}{key}", json.dumps(to_save))
    except (StorageError, OSError, TypeError, ValueError) as e:
        logger.error("tool_storage_save_failed", key=key, count=len(to_save), error=str(e))


def load_tools_from_storage(storage: ToolStorage, key: str) -> list[Tool]:
    """Load the tool list for ``key``; ``[]`` when absent or unreadable."""
    try:
        raw = storage.get_item(f"{STORAGE_KEY_PREFIX}{key}")
        if not raw:
            return []
        tools = json.loads(raw)
    except (StorageError, OSError, ValueError) as e:
        logger.error("tool_storage_load_failed", key=key, error=str(e))
        return []

    if not isinstance(tools, list):
        logger.error("tool_storage_load_failed", key=key, error="stored value is not a list")
        return []
    return tools
