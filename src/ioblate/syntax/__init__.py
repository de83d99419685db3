"""Source text handling: locating, evaluating and rewriting literals.

Python 3.13+.
"""

from .cursor import Cursor, LineOffsetCache, ParseResult
from .locator import locate, parse_program
from .markup import extract_scripts, locate_in_document
from .nodes import LiteralMatch, Replacement, ScriptBlock, Span
from .parser import LiteralParser, evaluate, evaluate_literal
from .serializer import reflow, render, serialize
from .splice import splice

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Nodes
    "LiteralMatch",
    "Replacement",
    "ScriptBlock",
    "Span",
    # Cursor
    "Cursor",
    "LineOffsetCache",
    "ParseResult",
    # Locating
    "extract_scripts",
    "locate",
    "locate_in_document",
    "parse_program",
    # Evaluation
    "LiteralParser",
    "evaluate",
    "evaluate_literal",
    # Rewriting
    "reflow",
    "render",
    "serialize",
    "splice",
]
