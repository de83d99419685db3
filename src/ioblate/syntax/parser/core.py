"""Static evaluator for JavaScript object literals.

Recursive-descent parser over the subset of JavaScript expressions that
denote plain data: object and array literals, strings, numbers, booleans
and null. Anything that would need a JavaScript runtime (identifiers,
calls, templates, spread, computed keys) is rejected with a diagnostic
instead of being executed.

Python 3.13+.
"""

import logging
from typing import Any

from ioblate.constants import MAX_DEPTH
from ioblate.core.depth_guard import DepthGuard
from ioblate.diagnostics import ErrorTemplate, EvaluationError
from ioblate.syntax.cursor import Cursor, ParseResult
from ioblate.syntax.nodes import Span
from ioblate.syntax.position import source_span

from .primitives import (
    _set_parse_error,
    clear_parse_error,
    get_last_parse_error,
    is_identifier_start,
    parse_identifier_name,
    parse_number,
    parse_string_literal,
    skip_trivia,
)

__all__ = ["LiteralParser", "evaluate", "evaluate_literal"]

logger = logging.getLogger(__name__)

_KEYWORD_VALUES: dict[str, bool | None] = {
    "true": True,
    "false": False,
    "null": None,
}


def _number_key(value: int | float) -> str:
    """Property name of a numeric key, as JavaScript stringifies it."""
    return str(value)


class LiteralParser:
    """Parser for static object literals.

    Each public call starts with a fresh DepthGuard, so one parser instance
    can evaluate many literals.

    Example:
        >>> LiteralParser().parse("{greeting: {en: 'Hi', 'de': 'Hallo'}}")
        {'greeting': {'en': 'Hi', 'de': 'Hallo'}}
    """

    __slots__ = ("_max_depth",)

    def __init__(self, max_depth: int = MAX_DEPTH) -> None:
        self._max_depth = max_depth

    @property
    def max_depth(self) -> int:
        """Maximum nesting of objects and arrays."""
        return self._max_depth

    def parse(self, text: str, *, source: str | None = None, base: int = 0) -> Any:
        """Evaluate text as a complete literal expression.

        Args:
            text: Literal expression
            source: Enclosing text used for diagnostic positions (default: text)
            base: Offset of text within source

        Raises:
            EvaluationError: If text is not a static literal
            DepthLimitExceededError: If nesting exceeds max_depth
        """
        source = text if source is None else source
        guard = DepthGuard(max_depth=self._max_depth)
        cursor = skip_trivia(Cursor(text, 0))
        result = self._parse_value(cursor, guard)

        if result is not None:
            end = skip_trivia(result.cursor)
            if end.is_eof:
                return result.value
            _set_parse_error("Unexpected trailing content", end.pos)

        error = get_last_parse_error()
        message = error.message if error is not None else "Invalid literal"
        position = base + (error.position if error is not None else 0)
        span = source_span(source, min(position, len(source)))
        if error is not None and error.unsupported:
            raise EvaluationError(ErrorTemplate.literal_unsupported(message, span))
        raise EvaluationError(ErrorTemplate.literal_invalid(message, span))

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def _parse_value(  # noqa: PLR0911
        self, cursor: Cursor, guard: DepthGuard
    ) -> ParseResult[Any] | None:
        """Parse any value. Cursor must already be past leading trivia.

        Note: PLR0911 (too many returns) is acceptable for dispatch methods.
        """
        clear_parse_error()

        if cursor.is_eof:
            _set_parse_error("Unexpected end of expression", cursor.pos, ("value",))
            return None

        ch = cursor.current

        if ch == "{":
            return self._parse_object(cursor, guard)
        if ch == "[":
            return self._parse_array(cursor, guard)
        if ch in ('"', "'"):
            return parse_string_literal(cursor)
        if ch in "+-":
            return self._parse_signed_number(cursor)
        if ch == "(":
            return self._parse_parenthesized(cursor, guard)
        if ch == "`":
            _set_parse_error("template literal", cursor.pos, unsupported=True)
            return None
        if ch.isdigit() or ch == ".":
            return parse_number(cursor)
        if is_identifier_start(ch):
            ident = parse_identifier_name(cursor)
            if ident is None:
                return None
            if ident.value in _KEYWORD_VALUES:
                return ParseResult(_KEYWORD_VALUES[ident.value], ident.cursor)
            _set_parse_error(f"identifier '{ident.value}'", cursor.pos, unsupported=True)
            return None

        _set_parse_error(f"Unexpected character {ch!r}", cursor.pos, ("value",))
        return None

    def _parse_signed_number(self, cursor: Cursor) -> ParseResult[int | float] | None:
        """Parse unary +/- applied to a numeric literal."""
        negative = False
        while not cursor.is_eof and cursor.current in "+-":
            if cursor.startswith("++") or cursor.startswith("--"):
                _set_parse_error("update operator", cursor.pos, unsupported=True)
                return None
            negative ^= cursor.current == "-"
            cursor = skip_trivia(cursor.advance())

        operand = parse_number(cursor)
        if operand is None:
            if not cursor.is_eof and cursor.current not in "0123456789.":
                _set_parse_error(
                    "unary operator on non-numeric value", cursor.pos, unsupported=True
                )
            return None
        value = -operand.value if negative else operand.value
        return ParseResult(value, operand.cursor)

    def _parse_parenthesized(
        self, cursor: Cursor, guard: DepthGuard
    ) -> ParseResult[Any] | None:
        """Parse ( value )."""
        with guard:
            inner = self._parse_value(skip_trivia(cursor.advance()), guard)
        if inner is None:
            return None
        cursor = skip_trivia(inner.cursor)
        if cursor.is_eof or cursor.current != ")":
            _set_parse_error("Expected ')'", cursor.pos, (")",))
            return None
        return ParseResult(inner.value, cursor.advance())

    def _parse_property_name(self, cursor: Cursor) -> ParseResult[str] | None:
        """Parse an object key: identifier name, string or number."""
        ch = cursor.current
        if ch in ('"', "'"):
            return parse_string_literal(cursor)
        if cursor.startswith("..."):
            _set_parse_error("spread element", cursor.pos, unsupported=True)
            return None
        if ch.isdigit() or ch == ".":
            number = parse_number(cursor)
            if number is None:
                return None
            return ParseResult(_number_key(number.value), number.cursor)
        if ch == "[":
            _set_parse_error("computed property name", cursor.pos, unsupported=True)
            return None
        if is_identifier_start(ch):
            return parse_identifier_name(cursor)

        _set_parse_error(f"Unexpected character {ch!r}", cursor.pos, ("property name",))
        return None

    def _parse_object(
        self, cursor: Cursor, guard: DepthGuard
    ) -> ParseResult[dict[str, Any]] | None:
        """Parse { key: value, ... } with optional trailing comma."""
        with guard:
            result: dict[str, Any] = {}
            cursor = skip_trivia(cursor.advance())

            while True:
                if cursor.is_eof:
                    _set_parse_error("Unterminated object literal", cursor.pos, ("}",))
                    return None
                if cursor.current == "}":
                    return ParseResult(result, cursor.advance())

                key_start = cursor.pos
                key = self._parse_property_name(cursor)
                if key is None:
                    return None
                cursor = skip_trivia(key.cursor)

                if cursor.is_eof or cursor.current != ":":
                    if not cursor.is_eof and cursor.current in ",}":
                        _set_parse_error(
                            f"shorthand property '{key.value}'", key_start, unsupported=True
                        )
                    elif not cursor.is_eof and cursor.current == "(":
                        _set_parse_error(f"method '{key.value}'", key_start, unsupported=True)
                    else:
                        _set_parse_error("Expected ':'", cursor.pos, (":",))
                    return None

                value = self._parse_value(skip_trivia(cursor.advance()), guard)
                if value is None:
                    return None
                # Later duplicates win, first occurrence keeps its position
                result[key.value] = value.value
                cursor = skip_trivia(value.cursor)

                if not cursor.is_eof and cursor.current == ",":
                    cursor = skip_trivia(cursor.advance())
                elif cursor.is_eof or cursor.current != "}":
                    _set_parse_error("Expected ',' or '}'", cursor.pos, (",", "}"))
                    return None

    def _parse_array(
        self, cursor: Cursor, guard: DepthGuard
    ) -> ParseResult[list[Any]] | None:
        """Parse [ value, ... ]. Holes evaluate to None."""
        with guard:
            items: list[Any] = []
            cursor = skip_trivia(cursor.advance())

            while True:
                if cursor.is_eof:
                    _set_parse_error("Unterminated array literal", cursor.pos, ("]",))
                    return None
                if cursor.current == "]":
                    return ParseResult(items, cursor.advance())
                if cursor.current == ",":
                    items.append(None)
                    cursor = skip_trivia(cursor.advance())
                    continue
                if cursor.startswith("..."):
                    _set_parse_error("spread element", cursor.pos, unsupported=True)
                    return None

                value = self._parse_value(cursor, guard)
                if value is None:
                    return None
                items.append(value.value)
                cursor = skip_trivia(value.cursor)

                if not cursor.is_eof and cursor.current == ",":
                    cursor = skip_trivia(cursor.advance())
                elif cursor.is_eof or cursor.current != "]":
                    _set_parse_error("Expected ',' or ']'", cursor.pos, (",", "]"))
                    return None


def evaluate(source_text: str, value_span: Span, *, max_depth: int = MAX_DEPTH) -> Any:
    """Evaluate the literal at value_span of source_text.

    Diagnostic positions are reported relative to source_text, so they
    point at the right line of the file the literal came from.

    Raises:
        EvaluationError: If the expression is not a static literal
        DepthLimitExceededError: If nesting exceeds max_depth
    """
    text = value_span.slice(source_text)
    logger.debug("Evaluating literal at [%d, %d)", value_span.start, value_span.end)
    return LiteralParser(max_depth).parse(text, source=source_text, base=value_span.start)


def evaluate_literal(text: str, *, max_depth: int = MAX_DEPTH) -> Any:
    """Evaluate a standalone literal expression.

    Example:
        >>> evaluate_literal("[1, 'two', {three: null}]")
        [1, 'two', {'three': None}]
    """
    return LiteralParser(max_depth).parse(text)
