"""Factories for every Diagnostic the engine emits.

Raising code never formats messages itself; it asks ErrorTemplate for a
Diagnostic and passes that along. Wording therefore lives in one module and
tests can assert on exact text.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan


class ErrorTemplate:
    """Namespace of Diagnostic constructors, one per DiagnosticCode."""

    @staticmethod
    def unexpected_eof(position: int) -> Diagnostic:
        """Input ended where a character was required (offset ``position``)."""
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message=f"Unexpected EOF at position {position}",
            hint="Check for unclosed lists, strings or block comments",
        )

    @staticmethod
    def parse_failed(messages: tuple[str, ...], span: SourceSpan | None) -> Diagnostic:
        """Top-level parse failure.

        Args:
            messages: Unmet expectations collected by the failing rule
            span: Where matching stopped, or None when unknown
        """
        where = "" if span is None else f" at line {span.line}, column {span.column}"
        return Diagnostic(
            code=DiagnosticCode.PARSE_FAILED,
            message=f"Could not parse program{where}",
            span=span,
            expected=messages,
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, span: SourceSpan | None) -> Diagnostic:
        """A list opened one level deeper than ``max_depth`` allows."""
        return Diagnostic(
            code=DiagnosticCode.PARSE_NESTING_DEPTH_EXCEEDED,
            message=f"Maximum list nesting depth ({max_depth}) exceeded",
            span=span,
            hint="Reduce nesting, or raise max_nesting_depth and sys.setrecursionlimit()",
        )

    @staticmethod
    def expression_depth_exceeded(max_depth: int) -> Diagnostic:
        """Tree walk went deeper than the visitor's ``max_depth``."""
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=f"Maximum traversal depth ({max_depth}) exceeded",
            hint="The tree is nested deeper than the visitor allows",
        )
