"""Tests for core/depth_guard.py.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ioblate.constants import MAX_DEPTH
from ioblate.core.depth_guard import DepthGuard, DepthLimitExceededError, depth_clamp
from ioblate.diagnostics import DiagnosticCode, EvaluationError

# ============================================================================
# Construction
# ============================================================================


class TestDepthGuardConstruction:
    """DepthGuard defaults and clamping."""

    def test_default_construction(self) -> None:
        """DepthGuard uses MAX_DEPTH by default."""
        guard = DepthGuard()

        assert guard.max_depth == MAX_DEPTH
        assert guard.current_depth == 0

    def test_post_init_clamps_max_depth(self) -> None:
        """Requests beyond the recursion budget are clamped."""
        guard = DepthGuard(max_depth=sys.getrecursionlimit() * 10)

        assert guard.max_depth == (sys.getrecursionlimit() - 50) // 3


# ============================================================================
# Context Manager
# ============================================================================


class TestDepthGuardContextManager:
    """Entering and leaving guarded sections."""

    def test_depth_tracks_nesting(self) -> None:
        """Depth goes up on enter and down on exit."""
        guard = DepthGuard(max_depth=5)

        with guard:
            assert guard.depth == 1
            with guard:
                assert guard.depth == 2
            assert guard.depth == 1
        assert guard.depth == 0

    def test_exceeding_raises(self) -> None:
        """Entering past max_depth raises with a diagnostic."""
        guard = DepthGuard(max_depth=1)

        with guard:  # noqa: SIM117
            with pytest.raises(DepthLimitExceededError) as exc_info:
                with guard:
                    pass

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.LITERAL_DEPTH_EXCEEDED
        assert isinstance(exc_info.value, EvaluationError)

    def test_failed_enter_leaves_depth_unchanged(self) -> None:
        """A refused enter does not leak a level."""
        guard = DepthGuard(max_depth=1)

        with guard:
            with pytest.raises(DepthLimitExceededError):
                guard.__enter__()
            assert guard.depth == 1
        assert guard.depth == 0

    def test_exit_on_exception(self) -> None:
        """Depth is restored when the body raises."""
        guard = DepthGuard(max_depth=3)

        with pytest.raises(RuntimeError), guard:
            raise RuntimeError

        assert guard.depth == 0

    def test_reset(self) -> None:
        """reset() returns to depth zero."""
        guard = DepthGuard(max_depth=3)
        guard.__enter__()

        guard.reset()

        assert guard.depth == 0


# ============================================================================
# depth_clamp
# ============================================================================


class TestDepthClamp:
    """depth_clamp() against the interpreter recursion limit."""

    def test_small_depth_unchanged(self) -> None:
        """Values within budget pass through."""
        assert depth_clamp(10) == 10

    def test_clamp_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Clamping is reported."""
        with caplog.at_level(logging.WARNING, logger="ioblate"):
            depth_clamp(sys.getrecursionlimit())

        assert "Clamping" in caplog.text

    @given(st.integers(min_value=0, max_value=100_000))
    def test_never_exceeds_budget(self, requested: int) -> None:
        """Result is within the recursion budget and never above the request."""
        result = depth_clamp(requested)

        assert result <= requested
        assert result <= (sys.getrecursionlimit() - 50) // 3
