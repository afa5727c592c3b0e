"""Rendering of diagnostics for terminals and tools.

Three renderings share one entry point, DiagnosticFormatter.format():

- rust: multi-line report with a location arrow, an optional source
  excerpt, the accumulated parser expectations and a help line
- simple: ``CODE: message`` on a single line
- json: one JSON object per diagnostic

Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]

_SEVERITY_COLORS: dict[str, str] = {
    "error": "\033[1;31m",  # Bold red
    "warning": "\033[1;33m",  # Bold yellow
}
_RESET = "\033[0m"


class OutputFormat(StrEnum):
    """Rendering styles accepted by DiagnosticFormatter (and the CLI)."""

    RUST = "rust"
    SIMPLE = "simple"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Render Diagnostic objects.

    Attributes:
        output_format: Rendering style
        color: Wrap the severity label in ANSI escapes (rust style only)
        truncate_at: Cut free-text fields (message, hint, expectations) to
            this many characters, appending ``...``. None keeps them whole.

    Example:
        >>> span = SourceSpan(start=4, end=4, line=1, column=5)
        >>> diagnostic = ErrorTemplate.parse_failed(("Expected end of input",), span)
        >>> print(DiagnosticFormatter().format(diagnostic, source="(a) b"))
        error[PARSE_FAILED]: Could not parse program at line 1, column 5
          --> 1:5
             1 | (a) b
               |     ^
          = expected: Expected end of input
    """

    output_format: OutputFormat = OutputFormat.RUST
    color: bool = False
    truncate_at: int | None = None

    def format(self, diagnostic: Diagnostic, source: str | None = None) -> str:
        """Render one diagnostic.

        Args:
            diagnostic: Diagnostic to render
            source: Text the diagnostic's span points into. When given, the
                rust style adds the offending line with a caret under it.
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._rust(diagnostic, source)
            case OutputFormat.SIMPLE:
                return f"{diagnostic.code.name}: {self._clip(diagnostic.message)}"
            case OutputFormat.JSON:
                return json.dumps(self.to_record(diagnostic), ensure_ascii=False)

    def format_all(self, diagnostics: Iterable[Diagnostic], source: str | None = None) -> str:
        """Render several diagnostics, separated by blank lines."""
        return "\n\n".join(self.format(diagnostic, source) for diagnostic in diagnostics)

    def to_record(self, diagnostic: Diagnostic) -> dict[str, Any]:
        """The JSON-ready mapping behind the json style.

        Keys with no value (span, expectations, hint) are left out.
        """
        record: dict[str, Any] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "severity": diagnostic.severity,
            "message": self._clip(diagnostic.message),
        }
        if (span := diagnostic.span) is not None:
            record |= {
                "line": span.line,
                "column": span.column,
                "start": span.start,
                "end": span.end,
            }
        if diagnostic.expected:
            record["expected"] = [self._clip(item) for item in diagnostic.expected]
        if diagnostic.hint:
            record["hint"] = self._clip(diagnostic.hint)
        return record

    def _rust(self, diagnostic: Diagnostic, source: str | None) -> str:
        message = self._clip(diagnostic.message)
        lines = [f"{self._severity(diagnostic)}[{diagnostic.code.name}]: {message}"]

        span = diagnostic.span
        if span is not None:
            lines.append(f"  --> {span.line}:{span.column}")
            if source is not None:
                from sexpengine.syntax.position import get_error_context  # noqa: PLC0415 - circular

                excerpt = get_error_context(source, span.start, context_lines=0)
                lines.extend(f"  {row}" for row in excerpt.splitlines())

        lines.extend(f"  = expected: {self._clip(item)}" for item in diagnostic.expected)
        if diagnostic.hint:
            lines.append(f"  = help: {self._clip(diagnostic.hint)}")
        return "\n".join(lines)

    def _severity(self, diagnostic: Diagnostic) -> str:
        label = diagnostic.severity
        if not self.color:
            return label
        return f"{_SEVERITY_COLORS[label]}{label}{_RESET}"

    def _clip(self, text: str) -> str:
        if self.truncate_at is None or len(text) <= self.truncate_at:
            return text
        return text[: self.truncate_at] + "..."
