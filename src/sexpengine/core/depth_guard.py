"""Nesting limits that fail with a diagnostic instead of a RecursionError.

Both the grammar (one level per ``(``) and the AST visitors (one level per
node) recurse as deep as the input nests. DepthGuard counts those levels and
raises DepthLimitExceededError once a limit is reached; the limit itself is
clamped so that the interpreter stack can always sustain it.

A guard is plain mutable state owned by one parse or one traversal; nothing
is shared between threads.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from sexpengine.constants import MAX_DEPTH, RECURSION_RESERVE_FRAMES
from sexpengine.diagnostics import Diagnostic, SexpError
from sexpengine.diagnostics.templates import ErrorTemplate

__all__ = ["DepthGuard", "DepthLimitExceededError", "depth_clamp", "safe_depth"]

logger = logging.getLogger(__name__)


class DepthLimitExceededError(SexpError):
    """Source lists, or a constructed tree, nest deeper than allowed.

    The attached diagnostic is PARSE_NESTING_DEPTH_EXCEEDED when raised by
    the grammar (with the span of the offending ``(``) and
    MAX_DEPTH_EXCEEDED when raised by a visitor.
    """


@dataclass(slots=True)
class DepthGuard:
    """Counter of active nesting levels, used as a context manager.

    Entering a level that would reach past max_depth raises before the
    counter moves, so a failed ``with guard:`` leaves the count untouched.

    Usage:
        guard = DepthGuard(max_depth=20, frames_per_level=32)
        with guard:
            outcome = list_body.run(cursor)

    Attributes:
        max_depth: Levels allowed, after clamping to the recursion limit
        frames_per_level: Interpreter frames one level costs; the clamp
            divides the available stack by it
        current_depth: Levels currently entered
    """

    max_depth: int = MAX_DEPTH
    frames_per_level: int = 1
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.max_depth = depth_clamp(self.max_depth, frames_per_level=self.frames_per_level)

    def __enter__(self) -> DepthGuard:
        self.check()
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.current_depth -= 1

    @property
    def depth(self) -> int:
        """Levels currently entered."""
        return self.current_depth

    def is_exceeded(self) -> bool:
        """True when entering one more level would fail."""
        return self.current_depth >= self.max_depth

    def check(self, diagnostic: Diagnostic | None = None) -> None:
        """Raise if no further level may be entered.

        Args:
            diagnostic: Attached to the error; a MAX_DEPTH_EXCEEDED
                diagnostic is used when omitted

        Raises:
            DepthLimitExceededError: If the guard is at its limit
        """
        if self.is_exceeded():
            raise DepthLimitExceededError(
                diagnostic or ErrorTemplate.expression_depth_exceeded(self.max_depth)
            )

    def reset(self) -> None:
        """Forget every entered level."""
        self.current_depth = 0


def safe_depth(
    frames_per_level: int = 1, reserve_frames: int = RECURSION_RESERVE_FRAMES
) -> int:
    """Deepest nesting the current recursion limit can carry.

    Args:
        frames_per_level: Interpreter frames one level costs
        reserve_frames: Frames kept free for callers (test runners, CLI)

    Returns:
        ``(recursion limit - reserve_frames) // frames_per_level``, never
        below 1
    """
    available = sys.getrecursionlimit() - reserve_frames
    return max(1, available // frames_per_level)


def depth_clamp(
    requested_depth: int,
    reserve_frames: int = RECURSION_RESERVE_FRAMES,
    *,
    frames_per_level: int = 1,
) -> int:
    """Lower requested_depth to safe_depth() when it would not fit.

    Logs a WARNING when the value is lowered.

    Example:
        >>> import sys
        >>> sys.setrecursionlimit(1000)
        >>> depth_clamp(40)
        40
        >>> depth_clamp(40, frames_per_level=32)  # 850 // 32
        26
    """
    limit = safe_depth(frames_per_level, reserve_frames)
    if requested_depth <= limit:
        return requested_depth
    logger.warning(
        "Requested depth %d exceeds Python recursion limit (%d) at %d frames per level. "
        "Clamping to %d; raise sys.setrecursionlimit() to allow deeper nesting.",
        requested_depth,
        sys.getrecursionlimit(),
        frames_per_level,
        limit,
    )
    return limit
