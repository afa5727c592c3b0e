"""Diagnostic codes, source locations and the Diagnostic record.

Python 3.13+. Zero external dependencies.
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
    """Stable numeric identifiers for every diagnostic.

    The thousands digit is the category:
        2xxx: AST traversal (visitors, serializers)
        3xxx: Parsing
    """

    MAX_DEPTH_EXCEEDED = 2010

    UNEXPECTED_EOF = 3001
    PARSE_FAILED = 3004
    PARSE_NESTING_DEPTH_EXCEEDED = 3005

    @property
    def category(self) -> str:
        """``"traversal"`` or ``"syntax"``."""
        return "traversal" if self.value < 3000 else "syntax"


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Where in the source a diagnostic applies.

    Offsets count characters (code points), not bytes. line and column are
    1-based, matching what editors display.

    Attributes:
        start: First offset covered (0-based)
        end: Offset just past the covered text
        line: Line of start
        column: Column of start
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Reject impossible locations.

        Raises:
            ValueError: On a negative start, an end before start, or a line
                or column below 1
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        for name, value in (("line", self.line), ("column", self.column)):
            if value < 1:
                msg = f"SourceSpan.{name} must be >= 1, got {value}"
                raise ValueError(msg)

    @property
    def length(self) -> int:
        """Number of characters covered."""
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One reportable problem, for people and for tools.

    Attributes:
        code: What went wrong
        message: One-line description
        span: Location, when one applies
        hint: How to fix it
        expected: Every expectation the parser collected, in encounter order
        severity: ``"error"`` or ``"warning"``
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    expected: tuple[str, ...] = ()
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        return self.message

    def format_error(self) -> str:
        """Render in the default (rust) style, without a source excerpt."""
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
