"""Immutable cursor infrastructure for type-safe parsing.

Implements the immutable cursor pattern used by the literal evaluator.
Python 3.13+.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns NEW cursor (prevents infinite loops)

Line Ending Support:
    LineOffsetCache uses \\n as the line delimiter. CRLF files work
    correctly because the \\n is still present.
"""

from bisect import bisect_right
from dataclasses import dataclass

__all__ = ["Cursor", "LineOffsetCache", "ParseResult"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("{a: 1}", 0)
        >>> cursor.current
        '{'
        >>> cursor.advance().current
        'a'
        >>> cursor.current  # Original unchanged (immutability)
        '{'
        >>> Cursor("{}", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Get current character.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            msg = f"Unexpected EOF at position {self.pos}"
            raise EOFError(msg)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Peek at character with offset without advancing.

        Returns:
            Character at position + offset, or None if beyond EOF
        """
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count positions (clamped to EOF)."""
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_to(self, end_pos: int) -> str:
        """Extract source slice from current position to end_pos (exclusive)."""
        return self.source[self.pos : end_pos]

    def slice_ahead(self, n: int) -> str:
        """Get next n characters without advancing cursor.

        May return fewer characters if near EOF.
        """
        return self.source[self.pos : self.pos + n]

    def startswith(self, text: str) -> bool:
        """Check whether the source continues with text at the current position."""
        return self.source.startswith(text, self.pos)


class LineOffsetCache:
    """Cached line offset computation for efficient position lookups.

    Precomputes line start offsets in a single pass, then provides
    O(log n) lookups. Used when reporting several matches in the same file.

    Example:
        >>> cache = LineOffsetCache("abc\\ndef\\nghi")
        >>> cache.get_line_col(0)
        (1, 1)
        >>> cache.get_line_col(4)  # 'd' in "def"
        (2, 1)
        >>> cache.get_offset(3, 2)  # 'h' in "ghi"
        9
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        offsets = [0]
        for i, char in enumerate(source):
            if char == "\n":
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get (line, column) for position, both 1-indexed."""
        pos = max(0, min(pos, self._source_len))
        index = bisect_right(self._offsets, pos) - 1
        return (index + 1, pos - self._offsets[index] + 1)

    def get_offset(self, line: int, column: int) -> int:
        """Get absolute offset for a 1-indexed line and 0-indexed column.

        The column convention matches ``html.parser``'s ``getpos()``,
        which is where line/column pairs needing conversion come from.

        Raises:
            ValueError: If line is outside the source
        """
        if line < 1 or line > len(self._offsets):
            msg = f"Line {line} out of range (source has {len(self._offsets)} lines)"
            raise ValueError(msg)
        return min(self._offsets[line - 1] + column, self._source_len)


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parser result containing parsed value and new cursor position.

    Every parser has signature:
        def parse_foo(cursor: Cursor, ...) -> ParseResult[Foo] | None

    Example:
        >>> cursor = Cursor("true", 0)
        >>> result = ParseResult(True, cursor.advance(4))
        >>> result.value
        True
        >>> result.cursor.is_eof
        True
    """

    value: T
    cursor: Cursor
