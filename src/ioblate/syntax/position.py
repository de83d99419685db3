"""Position utilities for source text.

Helpers for converting character offsets to line/column positions for
log output and diagnostics.
"""

from ioblate.diagnostics import SourceSpan


def line_offset(source: str, pos: int) -> int:
    """Get 0-based line number from character offset.

    Example:
        >>> source = "line1\\nline2\\nline3"
        >>> line_offset(source, 0)
        0
        >>> line_offset(source, 6)
        1
    """
    if pos < 0:
        msg = f"Position must be >= 0, got {pos}"
        raise ValueError(msg)
    pos = min(pos, len(source))
    return source.count("\n", 0, pos)


def column_offset(source: str, pos: int) -> int:
    """Get 0-based column number from character offset.

    Example:
        >>> source = "hello\\nworld"
        >>> column_offset(source, 2)
        2
        >>> column_offset(source, 6)
        0
    """
    if pos < 0:
        msg = f"Position must be >= 0, got {pos}"
        raise ValueError(msg)
    pos = min(pos, len(source))
    line_start = source.rfind("\n", 0, pos)
    if line_start == -1:
        return pos
    return pos - line_start - 1


def source_span(source: str, start: int, end: int | None = None) -> SourceSpan:
    """Build a diagnostic SourceSpan for [start, end) in source.

    Line and column are 1-based, like text editors.
    """
    end = start if end is None else end
    return SourceSpan(
        start=start,
        end=end,
        line=line_offset(source, start) + 1,
        column=column_offset(source, start) + 1,
    )


def line_indentation(source: str, pos: int) -> str:
    """Return the run of spaces and tabs that starts the line containing pos.

    Example:
        >>> line_indentation("{\\n    var a = 1;", 10)
        '    '
        >>> line_indentation("a = 1", 0)
        ''
    """
    line_start = source.rfind("\n", 0, pos) + 1
    end = line_start
    while end < pos and source[end] in " \t":
        end += 1
    return source[line_start:end]
