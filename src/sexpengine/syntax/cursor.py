"""Cursor and parse outcomes: the values every parser consumes and returns.

A Cursor is a read position inside an immutable source string. Parsers
never mutate one; consuming input means returning a new Cursor further
along. Backtracking is therefore free: an alternative simply reuses the
cursor it was given.

A parser returns a ParseOutcome, which is either a ParseResult (value plus
the cursor after the consumed text) or a ParseFailure (the expectations that
were not met plus the cursor where matching stopped).

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

from sexpengine.diagnostics import ErrorTemplate

__all__ = ["Cursor", "ParseFailure", "ParseOutcome", "ParseResult"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Read position in a source string.

    ``remaining`` is derived from source and offset, so
    ``offset == len(source) - len(remaining)`` always holds and no slice is
    copied until someone asks for it.

    Example:
        >>> cursor = Cursor("(add 1 2)")
        >>> cursor.current
        '('
        >>> cursor.advance(4).remaining
        ' 1 2)'
        >>> cursor.offset
        0
    """

    source: str
    offset: int = 0

    @property
    def remaining(self) -> str:
        """Unconsumed suffix of source."""
        return self.source[self.offset :]

    @property
    def is_eof(self) -> bool:
        return self.offset >= len(self.source)

    @property
    def current(self) -> str:
        """Character at offset.

        Raises:
            EOFError: If no input remains
        """
        if self.is_eof:
            raise EOFError(ErrorTemplate.unexpected_eof(self.offset).message)
        return self.source[self.offset]

    def startswith(self, prefix: str) -> bool:
        """Whether the remaining input begins with prefix."""
        return self.source.startswith(prefix, self.offset)

    def advance(self, count: int = 1) -> "Cursor":
        """Cursor count characters further on, stopping at the end of source.

        Example:
            >>> Cursor("abc").advance(99).offset
            3
        """
        return Cursor(self.source, min(self.offset + count, len(self.source)))

    def slice_to(self, end: int) -> str:
        """Source text from offset up to (not including) end."""
        return self.source[self.offset : end]


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """A match: the parsed value and the cursor just past it.

    ``cursor.offset`` is never smaller than the offset the parser started
    from.
    """

    value: T
    cursor: Cursor


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """A non-match: unmet expectations and where matching stopped.

    ``messages`` keeps encounter order; alternations concatenate the
    messages of every branch they tried.

    Example:
        >>> ParseFailure(('Expected ")"',), Cursor("(a", 2)).format_error()
        '1:3: Expected ")"'
    """

    messages: tuple[str, ...]
    cursor: Cursor

    def format_error(self) -> str:
        """``"line:column: message; message"`` with 1-based line and column."""
        from .position import position_of  # noqa: PLC0415 - circular

        line, column = position_of(self.cursor)
        return f"{line}:{column}: {'; '.join(self.messages)}"


type ParseOutcome[T] = ParseResult[T] | ParseFailure
