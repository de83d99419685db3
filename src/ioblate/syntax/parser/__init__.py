"""Static literal evaluator.

Turns the source text of a JavaScript object literal into Python data
without executing any JavaScript.

Python 3.13+.
"""

from .core import LiteralParser, evaluate, evaluate_literal
from .primitives import ParseErrorContext, clear_parse_error, get_last_parse_error

__all__ = [
    "LiteralParser",
    "ParseErrorContext",
    "clear_parse_error",
    "evaluate",
    "evaluate_literal",
    "get_last_parse_error",
]
