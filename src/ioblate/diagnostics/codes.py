"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Command line errors
        2000-2999: File system errors (read, write, missing targets)
        3000-3999: Syntax errors (JavaScript, markup, dataset JSON)
        4000-4999: Literal evaluation errors
        5000-5999: Splice errors
        6000-6999: Dataset warnings
    """

    # Command line errors (1000-1999)
    COMMAND_MISSING = 1001
    COMMAND_UNKNOWN = 1002

    # File system errors (2000-2999)
    FILE_READ_FAILED = 2001
    FILE_DECODE_FAILED = 2002
    FILE_WRITE_FAILED = 2003
    TARGET_FILE_MISSING = 2004
    UNSUPPORTED_FILE_TYPE = 2005

    # Syntax errors (3000-3999)
    SCRIPT_PARSE_FAILED = 3001
    MARKUP_PARSE_FAILED = 3002
    DATASET_PARSE_FAILED = 3003
    SOURCE_TOO_LARGE = 3004

    # Literal evaluation errors (4000-4999)
    LITERAL_INVALID = 4001
    LITERAL_UNSUPPORTED = 4002
    LITERAL_DEPTH_EXCEEDED = 4003

    # Splice errors (5000-5999)
    SPLICE_OVERLAP = 5001
    SPLICE_OUT_OF_RANGE = 5002

    # Dataset warnings (6000-6999)
    LOCALE_INVALID = 6001
    ENTRY_NOT_MAPPING = 6002
    DATASET_NOT_MAPPING = 6003


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source code location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes. For multi-byte UTF-8 characters, character offset differs
        from byte offset.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, line is
                less than 1, or column is less than 1.
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Carries enough context to tell a
    translator which file and which position made a run skip something.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None for errors without a position)
        hint: Suggestion for fixing the error
        file_path: File the diagnostic refers to (None if not file-related)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    file_path: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[LITERAL_UNSUPPORTED]: Unsupported value in literal: identifier 'foo'
              --> admin/words.js:3:12
              = help: Only plain object, array, string, number, boolean and null values ...

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
