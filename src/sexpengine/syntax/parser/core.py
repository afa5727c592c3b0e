"""Core S-expression parser implementation.

This module provides the SexpParser class that runs the grammar of
:mod:`sexpengine.syntax.parser.rules` over source text and turns its outcome
into either a :class:`~sexpengine.syntax.ast.Program` or a
:class:`~sexpengine.diagnostics.SexpSyntaxError`.

Architecture:
    Sub-parsers are combinator values that take an immutable
    :class:`~sexpengine.syntax.cursor.Cursor` and return a
    :class:`~sexpengine.syntax.cursor.ParseResult` or a
    :class:`~sexpengine.syntax.cursor.ParseFailure`. Failures stay values
    while the grammar backtracks; only the terminal failure of the program
    rule becomes an exception.

Security:
    Includes configurable input size and nesting depth limits to prevent
    DoS via unbounded memory allocation or stack exhaustion.
"""

import logging

from sexpengine.constants import MAX_SOURCE_SIZE
from sexpengine.diagnostics import ErrorTemplate, SexpSyntaxError, SourceSpan
from sexpengine.syntax.ast import Program
from sexpengine.syntax.cursor import Cursor, ParseFailure
from sexpengine.syntax.parser.rules import Grammar
from sexpengine.syntax.position import format_failure, position_of

__all__ = ["SexpParser"]

logger = logging.getLogger(__name__)


class SexpParser:
    """S-expression parser using immutable cursor combinators.

    Design:
    - A fresh Grammar per parse: no state is shared between calls
    - All-or-nothing: a Program for the whole input, or SexpSyntaxError
    - Error reports include 1-based line:column and every expectation

    Attributes:
        max_source_size: Maximum allowed source size in characters (default: 10 MB)
        max_nesting_depth: Maximum list nesting depth (None: derived from
            the recursion limit)
    """

    __slots__ = ("_max_nesting_depth", "_max_source_size")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
    ) -> None:
        """Initialize parser with optional size and nesting depth limits.

        Args:
            max_source_size: Maximum source size in characters (default: 10 MB).
                            Set to 0 to disable the size limit (not recommended).
            max_nesting_depth: Maximum list nesting depth. Values the current
                              recursion limit cannot sustain are clamped.
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_nesting_depth = max_nesting_depth

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size in characters."""
        return self._max_source_size

    @property
    def max_nesting_depth(self) -> int | None:
        """Requested maximum list nesting depth (None: automatic)."""
        return self._max_nesting_depth

    def parse(self, source: str) -> Program:
        """Parse source into a Program.

        Args:
            source: Program text

        Returns:
            Program whose body holds every top-level list and comment

        Raises:
            ValueError: If source exceeds max_source_size (DoS prevention)
            SexpSyntaxError: If the input is not a valid program
            DepthLimitExceededError: If lists nest deeper than allowed

        Example:
            >>> program = SexpParser().parse('(log "hi")')
            >>> program.body[0].items[0].name
            'log'
        """
        if self._max_source_size > 0 and len(source) > self._max_source_size:
            msg = (
                f"Source size ({len(source):,} characters) exceeds maximum "
                f"({self._max_source_size:,} characters). "
                "Configure max_source_size in SexpParser constructor to increase limit."
            )
            raise ValueError(msg)

        grammar = Grammar(max_nesting_depth=self._max_nesting_depth)
        logger.debug(
            "Parsing %d characters (max nesting depth %d)",
            len(source),
            grammar.depth_guard.max_depth,
        )

        outcome = grammar.program.run(Cursor(source, 0))
        if isinstance(outcome, ParseFailure):
            raise self._syntax_error(outcome)

        logger.debug("Parsed %d top-level expressions", len(outcome.value.body))
        return outcome.value

    @staticmethod
    def _syntax_error(failure: ParseFailure) -> SexpSyntaxError:
        """Build the exception for a terminal failure of the program rule."""
        line, column = position_of(failure.cursor)
        offset = failure.cursor.offset
        span = (
            SourceSpan(start=offset, end=offset, line=line, column=column)
            if line > 0
            else None
        )
        logger.debug("Parse failed at %d:%d: %s", line, column, "; ".join(failure.messages))
        return SexpSyntaxError(
            format_failure(failure),
            failure=failure,
            diagnostic=ErrorTemplate.parse_failed(failure.messages, span),
            line=line,
            column=column,
        )
