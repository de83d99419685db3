"""Value types shared by the locator, extractor and splice engine.

Python 3.13+.
"""

from dataclasses import dataclass
from typing import Any

from .position import line_indentation

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    "Span",
    "LiteralMatch",
    "ScriptBlock",
    "Replacement",
]


@dataclass(frozen=True, slots=True)
class Span:
    """Character offset range in source text.

    Attributes:
        start: Starting offset (inclusive)
        end: Ending offset (exclusive)

    Example:
        Source: "a = {x: 1};"
        Statement span: Span(start=0, end=11)
        Value span: Span(start=4, end=10)
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate span invariants."""
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)

    def shift(self, offset: int) -> "Span":
        """Return the same span moved by offset characters."""
        return Span(start=self.start + offset, end=self.end + offset)

    def overlaps(self, other: "Span") -> bool:
        """Check whether two spans share at least one character."""
        return self.start < other.end and other.start < self.end

    def slice(self, source: str) -> str:
        """Return the text covered by this span."""
        return source[self.start : self.end]


@dataclass(frozen=True, slots=True)
class LiteralMatch:
    """One located dictionary literal.

    Attributes:
        match_span: Whole matched statement or declarator
        value_span: Right-hand side / initializer expression
    """

    match_span: Span
    value_span: Span

    def shifted(self, offset: int) -> "LiteralMatch":
        """Translate both spans by offset (script text -> document offsets)."""
        return LiteralMatch(
            match_span=self.match_span.shift(offset),
            value_span=self.value_span.shift(offset),
        )

    def indentation(self, source: str) -> str:
        """Whitespace that precedes the matched statement on its line."""
        return line_indentation(source, self.match_span.start)


@dataclass(frozen=True, slots=True)
class ScriptBlock:
    """Text of one inline script element.

    Attributes:
        text: Literal content of the script's text node
        offset: Offset of the first character of text within the document
    """

    text: str
    offset: int


@dataclass(frozen=True, slots=True)
class Replacement:
    """Pending rewrite of one literal.

    Attributes:
        span: Range of the original value expression
        data: New value; serialized at splice time
        indent: Prefix inserted after every line break of the serialized text
    """

    span: Span
    data: Any
    indent: str = ""
