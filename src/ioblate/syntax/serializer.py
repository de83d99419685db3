"""Deterministic text rendering of literal values.

The output is the same text ``JSON.stringify(value, null, 2)`` produces,
so rewritten literals stay valid JavaScript and diff cleanly.

Python 3.13+.
"""

import json
import re
from typing import Any

from ioblate.constants import INDENT_WIDTH

__all__ = ["reflow", "render", "serialize"]

_LINE_BREAK = re.compile(r"(\r?\n)")


def serialize(data: Any, indent: int = INDENT_WIDTH) -> str:
    """Render data as pretty-printed JSON.

    Mapping keys keep insertion order and non-ASCII characters are written
    as-is rather than as \\u escapes.

    Example:
        >>> print(serialize({"Hi": {"de": "Hallo"}}))
        {
          "Hi": {
            "de": "Hallo"
          }
        }
    """
    return json.dumps(data, indent=indent, ensure_ascii=False)


def reflow(text: str, prefix: str) -> str:
    """Insert prefix after every line break of text.

    The first line is left alone: it continues the line the original
    literal started on.

    Example:
        >>> reflow("{\\n  a\\n}", "    ")
        '{\\n      a\\n    }'
    """
    if not prefix:
        return text
    return _LINE_BREAK.sub(lambda m: m.group(1) + prefix, text)


def render(data: Any, prefix: str = "", indent: int = INDENT_WIDTH) -> str:
    """serialize() followed by reflow()."""
    return reflow(serialize(data, indent), prefix)
