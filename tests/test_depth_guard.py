"""Tests for DepthGuard, safe_depth and depth_clamp."""

from __future__ import annotations

import logging
import sys

import pytest

from sexpengine.constants import MAX_DEPTH, RECURSION_RESERVE_FRAMES
from sexpengine.core.depth_guard import (
    DepthGuard,
    DepthLimitExceededError,
    depth_clamp,
    safe_depth,
)
from sexpengine.diagnostics import DiagnosticCode, ErrorTemplate, SexpError


class TestDepthGuard:
    """Test the context manager protocol."""

    def test_default_max_depth(self) -> None:
        assert DepthGuard().max_depth == MAX_DEPTH

    def test_enter_and_exit_track_depth(self) -> None:
        guard = DepthGuard(max_depth=5)

        with guard:
            assert guard.depth == 1
            with guard:
                assert guard.depth == 2
        assert guard.depth == 0

    def test_exceeding_raises(self) -> None:
        guard = DepthGuard(max_depth=2)

        with guard, guard:
            assert guard.is_exceeded()
            with pytest.raises(DepthLimitExceededError) as exc_info, guard:
                pass

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.MAX_DEPTH_EXCEEDED

    def test_failed_enter_leaves_depth_unchanged(self) -> None:
        guard = DepthGuard(max_depth=1)

        with guard:
            with pytest.raises(DepthLimitExceededError):
                guard.__enter__()
            assert guard.depth == 1
        assert guard.depth == 0

    def test_exit_on_exception_restores_depth(self) -> None:
        guard = DepthGuard(max_depth=3)

        with pytest.raises(RuntimeError), guard:
            raise RuntimeError
        assert guard.depth == 0

    def test_check_with_custom_diagnostic(self) -> None:
        guard = DepthGuard(max_depth=1)
        diagnostic = ErrorTemplate.nesting_depth_exceeded(1, None)

        guard.check(diagnostic)
        with guard, pytest.raises(DepthLimitExceededError) as exc_info:
            guard.check(diagnostic)

        assert exc_info.value.diagnostic is diagnostic

    def test_reset(self) -> None:
        guard = DepthGuard(max_depth=3)
        guard.__enter__()
        guard.__enter__()

        guard.reset()

        assert guard.depth == 0

    def test_error_is_sexp_error(self) -> None:
        assert issubclass(DepthLimitExceededError, SexpError)


class TestRecursionLimitClamping:
    """Test safe_depth() and depth_clamp()."""

    def test_safe_depth_formula(self) -> None:
        limit = sys.getrecursionlimit()

        assert safe_depth() == limit - RECURSION_RESERVE_FRAMES
        assert safe_depth(32) == (limit - RECURSION_RESERVE_FRAMES) // 32

    def test_safe_depth_is_at_least_one(self) -> None:
        assert safe_depth(10**9) == 1

    def test_clamp_passes_small_depths(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert depth_clamp(10) == 10

        assert caplog.records == []

    def test_clamp_reduces_and_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="sexpengine.core.depth_guard"):
            clamped = depth_clamp(10**6, frames_per_level=32)

        assert clamped == safe_depth(32)
        assert "exceeds Python recursion limit" in caplog.text

    def test_guard_clamps_on_construction(self) -> None:
        guard = DepthGuard(max_depth=10**6, frames_per_level=32)

        assert guard.max_depth == safe_depth(32)

    def test_clamp_follows_recursion_limit(self) -> None:
        original = sys.getrecursionlimit()
        try:
            sys.setrecursionlimit(original + 3200)
            assert depth_clamp(10**6, frames_per_level=32) == safe_depth(32)
            assert safe_depth(32) == (original + 3200 - RECURSION_RESERVE_FRAMES) // 32
        finally:
            sys.setrecursionlimit(original)
