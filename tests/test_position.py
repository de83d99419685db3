"""Tests for syntax.position helpers."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ioblate.syntax.position import (
    column_offset,
    line_indentation,
    line_offset,
    source_span,
)


class TestLineColumn:
    """Offset to line/column conversion."""

    @pytest.mark.parametrize(
        ("pos", "line", "column"),
        [(0, 0, 0), (4, 0, 4), (6, 1, 0), (8, 1, 2), (12, 2, 0)],
    )
    def test_offsets(self, pos: int, line: int, column: int) -> None:
        """Zero-based line and column."""
        source = "line1\nline2\nline3"

        assert line_offset(source, pos) == line
        assert column_offset(source, pos) == column

    def test_crlf_counts_one_line(self) -> None:
        """\\r\\n is a single line break."""
        assert line_offset("a\r\nb", 3) == 1
        assert column_offset("a\r\nb", 3) == 0

    def test_clamped_to_length(self) -> None:
        """Positions past the end clamp to the end."""
        assert line_offset("a\nb", 99) == 1

    def test_negative_rejected(self) -> None:
        """Negative positions are an error."""
        with pytest.raises(ValueError, match="Position must be >= 0"):
            line_offset("abc", -1)
        with pytest.raises(ValueError, match="Position must be >= 0"):
            column_offset("abc", -1)

    def test_source_span_is_one_based(self) -> None:
        """Diagnostic spans use editor conventions."""
        span = source_span("ab\ncd", 4)

        assert (span.start, span.end, span.line, span.column) == (4, 4, 2, 2)

    @given(st.text(alphabet="ab\n ", max_size=50), st.data())
    def test_line_and_column_locate_pos(self, source: str, data: st.DataObject) -> None:
        """Line and column reconstruct the offset."""
        pos = data.draw(st.integers(min_value=0, max_value=len(source)))
        lines = source.split("\n")

        line = line_offset(source, pos)
        column = column_offset(source, pos)

        assert sum(len(x) + 1 for x in lines[:line]) + column == pos


class TestLineIndentation:
    """line_indentation()."""

    @pytest.mark.parametrize(
        ("source", "pos", "expected"),
        [
            ("a = 1", 0, ""),
            ("{\n    var a = 1;", 10, "    "),
            ("{\n\t\tx", 4, "\t\t"),
            ("{\n  foo  bar", 9, "  "),
            ("  ", 1, " "),
        ],
    )
    def test_indentation(self, source: str, pos: int, expected: str) -> None:
        """Only the leading run of spaces and tabs, up to pos."""
        assert line_indentation(source, pos) == expected
