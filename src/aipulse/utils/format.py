"""Display formatting for tool names."""

import re

_NOISE_PREFIX = re.compile(r"^(awesome-|ai-|open-|the-)", re.IGNORECASE)
_SEPARATORS = re.compile(r"[-_]")


def format_tool_name(name: str) -> str:
    """Turn a repository slug into a display name.

    Leading ``awesome-``, ``ai-``, ``open-`` and ``the-`` prefixes are
    stripped (repeatedly, so ``awesome-ai-tool`` becomes ``Tool``). Dashes
    and underscores become spaces. Words of up to two letters are
    upper-cased and the rest are capitalised.

    Examples:
        >>> format_tool_name("awesome-ai-tool")
        'Tool'
        >>> format_tool_name("js-lib")
        'JS Lib'
    """
    if not name:
        return ""

    stripped = name
    while True:
        shorter = _NOISE_PREFIX.sub("", stripped, count=1)
        if shorter == stripped:
            break
        stripped = shorter

    words = _SEPARATORS.sub(" ", stripped).split()
    return " ".join(
        word.upper() if len(word) <= 2 else word[0].upper() + word[1:].lower()
        for word in words
    )
