"""sexpengine exception hierarchy with structured diagnostics.

All exceptions can store Diagnostic objects for rich error information.

Python 3.13+. Zero external dependencies.
"""

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from sexpengine.syntax.cursor import ParseFailure

__all__ = ["SexpError", "SexpSyntaxError"]


class SexpError(Exception):
    """Base exception for all sexpengine errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize SexpError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class SexpSyntaxError(SexpError):
    """Source text could not be parsed into a Program.

    Raised once, for the terminal failure of the program rule. There is no
    partial result: either the whole input parses or this is raised.

    Attributes:
        failure: The terminal ParseFailure (messages and cursor), if any
        line: 1-based line of the failure (0 if unknown)
        column: 1-based column of the failure (0 if unknown)
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        failure: "ParseFailure | None" = None,
        diagnostic: Diagnostic | None = None,
        line: int = 0,
        column: int = 0,
    ) -> None:
        """Initialize SexpSyntaxError.

        Args:
            message: Formatted report OR Diagnostic object
            failure: The ParseFailure that ended the parse
            diagnostic: Structured diagnostic when message is a plain report
            line: 1-based line of the failure
            column: 1-based column of the failure
        """
        super().__init__(message)
        if diagnostic is not None:
            self.diagnostic = diagnostic
        self.failure = failure
        self.line = line
        self.column = column

    @property
    def messages(self) -> tuple[str, ...]:
        """Accumulated parser messages (empty when there is no failure)."""
        if self.failure is None:
            return ()
        return self.failure.messages
