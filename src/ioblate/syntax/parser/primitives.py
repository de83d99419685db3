"""Primitive parsing utilities for the literal evaluator.

This module provides low-level parsers for trivia (whitespace and
comments), identifier names, numbers and string literals as they appear in
JavaScript object literals.

Error Context:
    Functions store error context on failure via _set_parse_error().
    Retrieve with get_last_parse_error() for detailed diagnostics.
"""

import math
from dataclasses import dataclass
from threading import local as thread_local

from ioblate.syntax.cursor import Cursor, ParseResult

# \xHH = 2 hex digits
_HEX_ESCAPE_LEN: int = 2

# \uXXXX = 4 hex digits (BMP)
_UNICODE_ESCAPE_LEN: int = 4

# Maximum valid Unicode code point per Unicode Standard.
_MAX_UNICODE_CODE_POINT: int = 0x10FFFF

# UTF-16 surrogate halves. A \uD8xx\uDCxx pair encodes one astral character.
_HIGH_SURROGATE_START: int = 0xD800
_HIGH_SURROGATE_END: int = 0xDBFF
_LOW_SURROGATE_START: int = 0xDC00
_LOW_SURROGATE_END: int = 0xDFFF

_HEX_DIGITS: str = "0123456789abcdefABCDEF"
_OCTAL_DIGITS: str = "01234567"
_BINARY_DIGITS: str = "01"

# ASCII digits only; str.isdigit() accepts Unicode digits like ² that int() rejects.
_ASCII_DIGITS: str = "0123456789"

# ECMAScript LineTerminator code points.
_LINE_TERMINATORS: str = "\n\r\u2028\u2029"

# Single-character escapes with a fixed meaning.
_SIMPLE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}

# Numbers at or above 2**53 lose integer precision in JavaScript.
_MAX_SAFE_INTEGER: int = 2**53

# Thread-local storage for parse error context
_error_thread_local = thread_local()


@dataclass(frozen=True, slots=True)
class ParseErrorContext:
    """Context information for parse failures.

    Attributes:
        message: Human-readable error description
        position: Character position in the evaluated text
        expected: What the parser expected to find (optional)
        unsupported: True when the text is valid JavaScript that needs
            runtime evaluation, False when it is malformed
    """

    message: str
    position: int
    expected: tuple[str, ...] = ()
    unsupported: bool = False


def _set_parse_error(
    message: str,
    position: int,
    expected: tuple[str, ...] = (),
    *,
    unsupported: bool = False,
) -> None:
    """Store parse error context for later retrieval."""
    _error_thread_local.last_error = ParseErrorContext(
        message=message, position=position, expected=expected, unsupported=unsupported
    )


def get_last_parse_error() -> ParseErrorContext | None:
    """Get the last parse error context (if any)."""
    return getattr(_error_thread_local, "last_error", None)


def clear_parse_error() -> None:
    """Clear the last parse error context."""
    _error_thread_local.last_error = None


def is_identifier_start(ch: str) -> bool:
    """Check whether ch may start an identifier name."""
    return ch.isalpha() or ch in ("$", "_")


def is_identifier_part(ch: str) -> bool:
    """Check whether ch may continue an identifier name."""
    return ch.isalnum() or ch in ("$", "_", "\u200c", "\u200d")


def skip_trivia(cursor: Cursor) -> Cursor:
    """Skip whitespace, line terminators and comments.

    Handles ``//`` line comments and ``/* */`` block comments. An unterminated
    block comment consumes the rest of the input; the caller then reports
    the unexpected end.
    """
    while not cursor.is_eof:
        ch = cursor.current
        if ch.isspace() or ch == "\ufeff":
            cursor = cursor.advance()
        elif cursor.startswith("//"):
            cursor = cursor.advance(2)
            while not cursor.is_eof and cursor.current not in _LINE_TERMINATORS:
                cursor = cursor.advance()
        elif cursor.startswith("/*"):
            end = cursor.source.find("*/", cursor.pos + 2)
            cursor = Cursor(cursor.source, len(cursor.source) if end < 0 else end + 2)
        else:
            break
    return cursor


def parse_identifier_name(cursor: Cursor) -> ParseResult[str] | None:
    """Parse identifier name: [$_letter][$_letter digit]*

    Reserved words are accepted; they are valid property names.

    Examples:
        systemDictionary -> "systemDictionary"
        $value -> "$value"
    """
    clear_parse_error()

    if cursor.is_eof or not is_identifier_start(cursor.current):
        _set_parse_error("Expected identifier", cursor.pos, ("a-z", "A-Z", "$", "_"))
        return None

    start_pos = cursor.pos
    cursor = cursor.advance()
    while not cursor.is_eof and is_identifier_part(cursor.current):
        cursor = cursor.advance()

    return ParseResult(Cursor(cursor.source, start_pos).slice_to(cursor.pos), cursor)


def _is_digit(ch: str | None) -> bool:
    return ch is not None and ch in _ASCII_DIGITS


def _scan_digits(cursor: Cursor, digits: str) -> Cursor:
    while not cursor.is_eof and cursor.current in digits:
        cursor = cursor.advance()
    return cursor


def _normalize_number(value: float) -> int | float:
    """Collapse integral floats to int, mirroring JavaScript's single number type."""
    if value.is_integer() and abs(value) < _MAX_SAFE_INTEGER:
        return int(value)
    return value


def parse_number(cursor: Cursor) -> ParseResult[int | float] | None:  # noqa: PLR0911
    """Parse an unsigned numeric literal.

    Supported forms:
        42, 3.14, .5, 1e3, 2.5E-4   decimal
        0x1F, 0o17, 0b101           hex, octal, binary

    Signs are handled by the value parser as unary operators.

    Returns:
        ParseResult with int (integral values) or float, or None on failure
    """
    clear_parse_error()
    start_pos = cursor.pos

    if cursor.is_eof or not (
        cursor.current in _ASCII_DIGITS
        or (cursor.current == "." and _is_digit(cursor.peek(1)))
    ):
        _set_parse_error("Expected number", cursor.pos, ("0-9",))
        return None

    prefix = cursor.slice_ahead(2).lower()
    radix_digits = {"0x": (_HEX_DIGITS, 16), "0o": (_OCTAL_DIGITS, 8), "0b": (_BINARY_DIGITS, 2)}
    if prefix in radix_digits:
        digits, base = radix_digits[prefix]
        body_start = cursor.advance(2)
        end = _scan_digits(body_start, digits)
        if end.pos == body_start.pos:
            _set_parse_error(f"Expected digits after '{prefix}'", end.pos, (digits,))
            return None
        cursor = end
        value: int | float = int(body_start.slice_to(end.pos), base)
    else:
        if cursor.current == "0" and _is_digit(cursor.peek(1)):
            _set_parse_error(
                "Legacy octal literals are not supported", cursor.pos, unsupported=True
            )
            return None

        cursor = _scan_digits(cursor, _ASCII_DIGITS)
        if not cursor.is_eof and cursor.current == ".":
            cursor = _scan_digits(cursor.advance(), _ASCII_DIGITS)

        if not cursor.is_eof and cursor.current in ("e", "E"):
            exponent = cursor.advance()
            if not exponent.is_eof and exponent.current in ("+", "-"):
                exponent = exponent.advance()
            if exponent.is_eof or exponent.current not in _ASCII_DIGITS:
                _set_parse_error("Expected digit in exponent", exponent.pos, ("0-9",))
                return None
            cursor = _scan_digits(exponent, _ASCII_DIGITS)

        number = float(Cursor(cursor.source, start_pos).slice_to(cursor.pos))
        if math.isinf(number):
            _set_parse_error("Numeric literal out of range", start_pos, unsupported=True)
            return None
        value = _normalize_number(number)

    # "3in" is not a number followed by an identifier; JavaScript rejects it too
    if not cursor.is_eof and is_identifier_part(cursor.current):
        _set_parse_error("Identifier directly after number", cursor.pos)
        return None

    return ParseResult(value, cursor)


def _read_hex(cursor: Cursor, length: int) -> tuple[int, Cursor] | None:
    hex_digits = cursor.slice_ahead(length)
    if len(hex_digits) < length or not all(c in _HEX_DIGITS for c in hex_digits):
        _set_parse_error(
            f"Invalid escape (expected {length} hex digits)",
            cursor.pos,
            ("0-9", "a-f", "A-F"),
        )
        return None
    return (int(hex_digits, 16), cursor.advance(length))


def _parse_unicode_escape(cursor: Cursor) -> tuple[int, Cursor] | None:
    """Parse the part of a \\u escape after the 'u'."""
    if not cursor.is_eof and cursor.current == "{":
        end = cursor.source.find("}", cursor.pos + 1)
        hex_digits = cursor.source[cursor.pos + 1 : end] if end > 0 else ""
        if not hex_digits or not all(c in _HEX_DIGITS for c in hex_digits):
            _set_parse_error("Invalid code point escape", cursor.pos, ("0-9", "a-f", "A-F"))
            return None
        code_point = int(hex_digits, 16)
        if code_point > _MAX_UNICODE_CODE_POINT:
            _set_parse_error(
                f"Invalid Unicode code point: U+{hex_digits} (max U+10FFFF)", cursor.pos
            )
            return None
        return (code_point, Cursor(cursor.source, end + 1))
    return _read_hex(cursor, _UNICODE_ESCAPE_LEN)


def parse_escape_sequence(cursor: Cursor) -> tuple[str, Cursor] | None:  # noqa: PLR0911
    """Parse escape sequence after backslash in a string literal.

    Supported escape sequences:
        \\n \\t \\r \\b \\f \\v   control characters
        \\0                       NUL (not followed by a digit)
        \\xHH                     Latin-1 character
        \\uXXXX, \\u{X...}         Unicode character; surrogate pairs are joined
        \\<line terminator>       line continuation (produces nothing)
        \\<other>                 the character itself (\\', \\", \\\\, \\/ ...)

    Note: PLR0911 (too many returns) is acceptable for parser grammar methods.

    Args:
        cursor: Position AFTER the backslash

    Returns:
        (text, new_cursor) on success, None on invalid escape
    """
    if cursor.is_eof:
        _set_parse_error("Unexpected EOF in escape sequence", cursor.pos)
        return None

    escape_ch = cursor.current

    if escape_ch in _SIMPLE_ESCAPES:
        return (_SIMPLE_ESCAPES[escape_ch], cursor.advance())

    if escape_ch in _LINE_TERMINATORS:
        cursor = cursor.advance()
        if escape_ch == "\r" and not cursor.is_eof and cursor.current == "\n":
            cursor = cursor.advance()
        return ("", cursor)

    if escape_ch in _ASCII_DIGITS:
        if escape_ch == "0" and not _is_digit(cursor.peek(1)):
            return ("\0", cursor.advance())
        _set_parse_error(
            "Octal escape sequences are not supported", cursor.pos, unsupported=True
        )
        return None

    if escape_ch == "x":
        result = _read_hex(cursor.advance(), _HEX_ESCAPE_LEN)
        if result is None:
            return None
        code_point, cursor = result
        return (chr(code_point), cursor)

    if escape_ch == "u":
        result = _parse_unicode_escape(cursor.advance())
        if result is None:
            return None
        code_point, cursor = result
        if _HIGH_SURROGATE_START <= code_point <= _HIGH_SURROGATE_END and cursor.startswith("\\u"):
            low = _parse_unicode_escape(cursor.advance(2))
            if low is not None and _LOW_SURROGATE_START <= low[0] <= _LOW_SURROGATE_END:
                combined = (
                    0x10000
                    + ((code_point - _HIGH_SURROGATE_START) << 10)
                    + (low[0] - _LOW_SURROGATE_START)
                )
                return (chr(combined), low[1])
            clear_parse_error()
        if _HIGH_SURROGATE_START <= code_point <= _LOW_SURROGATE_END:
            _set_parse_error(
                f"Unpaired surrogate code point: U+{code_point:04X}", cursor.pos
            )
            return None
        return (chr(code_point), cursor)

    return (escape_ch, cursor.advance())


def parse_string_literal(cursor: Cursor) -> ParseResult[str] | None:
    """Parse string literal delimited by single or double quotes.

    Examples:
        "hello" -> "hello"
        'it\\'s' -> "it's"
        "Gr\\u00fc\\u00dfe" -> "Grüße"

    Returns:
        ParseResult with the unescaped value, or None if invalid
    """
    clear_parse_error()

    if cursor.is_eof or cursor.current not in ('"', "'"):
        _set_parse_error("Expected opening quote", cursor.pos, ('"', "'"))
        return None

    quote = cursor.current
    cursor = cursor.advance()
    parts: list[str] = []

    while not cursor.is_eof:
        ch = cursor.current

        if ch == quote:
            return ParseResult("".join(parts), cursor.advance())

        if ch == "\\":
            escape_result = parse_escape_sequence(cursor.advance())
            if escape_result is None:
                return None
            escaped, cursor = escape_result
            parts.append(escaped)
        elif ch in "\n\r":
            break
        else:
            parts.append(ch)
            cursor = cursor.advance()

    _set_parse_error("Unterminated string literal", cursor.pos, (quote,))
    return None
