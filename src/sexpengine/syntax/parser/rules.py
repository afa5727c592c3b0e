"""Grammar rules for S-expression source.

A Grammar instance owns one parser per rule, built once in __init__:

    program         ::= expression* EOF
    expression      ::= ws (block_comment | line_comment | list_expression) ws
    list_item       ::= ws (expression | identifier | numeric_literal | string_literal) ws
    list_expression ::= "(" list_item* ")"
    block_comment   ::= "#|" any* "|#"
    line_comment    ::= ";" any* (eol | EOF)
    identifier      ::= [a-zA-Z_] [a-zA-Z0-9_]*
    numeric_literal ::= integer | float
    string_literal  ::= '"' any* '"'

Rule order inside list_item matters: expression is tried first, then
identifier, numeric_literal and string_literal. Strings have no escape
sequences; the first closing quote ends them.

list_expression and list_item are mutually recursive. list_expression
refers to list_item through a DeferredParser, so either rule can be built
first.

Security:
    Each nesting level re-enters the rule chain and costs about
    FRAMES_PER_NESTING_LEVEL interpreter frames. The list body runs under a
    DepthGuard whose limit is clamped against sys.getrecursionlimit();
    crossing it raises DepthLimitExceededError instead of RecursionError.
"""

import re
from collections.abc import Callable

from sexpengine.constants import FRAMES_PER_NESTING_LEVEL
from sexpengine.core.depth_guard import DepthGuard, safe_depth
from sexpengine.diagnostics import ErrorTemplate, SourceSpan
from sexpengine.syntax.ast import (
    BlockComment,
    Expression,
    Identifier,
    LineComment,
    ListExpression,
    ListItem,
    NumericLiteral,
    Program,
    Span,
    StringLiteral,
)
from sexpengine.syntax.cursor import Cursor, ParseOutcome
from sexpengine.syntax.parser.combinators import (
    DeferredParser,
    DirectParser,
    Parser,
    as_parser,
    between,
    choice,
    end_of_input,
    ignore_left,
    ignore_right,
    literal,
    many,
    many_till,
    map_,
    map_error_to,
    map_to,
    pattern,
    spanned,
)
from sexpengine.syntax.parser.primitives import any_char, float_, integer
from sexpengine.syntax.parser.whitespace import eol, whitespace
from sexpengine.syntax.position import position_of

__all__ = ["Grammar"]

_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"[a-zA-Z_]\w*", re.ASCII)

_EXPECTED_LIST_ITEM = "Expected an identifier, a number, a string or another list"
_EXPECTED_EXPRESSION = "Expected a list or a comment"


def _node[T, N](parser: Parser[T], build: Callable[[T, Span], N]) -> Parser[N]:
    """Map a rule's raw value to an AST node carrying its source span."""
    return map_(spanned(parser), lambda pair: build(*pair))


def _padded[T](parser: Parser[T]) -> Parser[T]:
    """Surround parser with optional whitespace on both sides."""
    return ignore_left(whitespace(), ignore_right(parser, whitespace()))


class Grammar:
    """Parsers for every grammar rule, sharing one nesting-depth guard.

    A Grammar is cheap to build but holds mutable guard state while a parse
    is in progress; use one instance per parse (SexpParser does).

    Attributes:
        depth_guard: Guard bounding list nesting
        block_comment: ``#| ... |#`` to BlockComment
        line_comment: ``; ...`` to LineComment
        identifier: Identifier
        numeric_literal: NumericLiteral (integer first, then float)
        string_literal: StringLiteral
        list_expression: ListExpression
        expression: Top-level form (comment or list), whitespace-padded
        list_item: Element of a list, whitespace-padded
        program: Whole input to Program
    """

    def __init__(self, max_nesting_depth: int | None = None) -> None:
        """Build all rules.

        Args:
            max_nesting_depth: Deepest allowed list nesting. None uses the
                largest depth the current recursion limit sustains; explicit
                values above it are clamped with a warning.
        """
        if max_nesting_depth is None:
            max_nesting_depth = safe_depth(FRAMES_PER_NESTING_LEVEL)
        self.depth_guard = DepthGuard(
            max_depth=max_nesting_depth, frames_per_level=FRAMES_PER_NESTING_LEVEL
        )

        self.block_comment: Parser[BlockComment] = _node(
            ignore_left(literal("#|"), many_till(any_char(), literal("|#"))),
            lambda chars, span: BlockComment(comment="".join(chars), span=span),
        )
        self.line_comment: Parser[LineComment] = _node(
            ignore_left(
                literal(";"),
                many_till(any_char(), choice(map_to(eol(), None), end_of_input())),
            ),
            lambda chars, span: LineComment(comment="".join(chars), span=span),
        )
        self.identifier: Parser[Identifier] = _node(
            pattern(_IDENTIFIER_RE),
            lambda name, span: Identifier(name=name, span=span),
        )
        self.numeric_literal: Parser[NumericLiteral] = _node(
            choice(integer(), float_()),
            lambda value, span: NumericLiteral(value=value, span=span),
        )
        self.string_literal: Parser[StringLiteral] = _node(
            ignore_left(literal('"'), many_till(any_char(), literal('"'))),
            lambda chars, span: StringLiteral(value="".join(chars), span=span),
        )
        self.list_expression: Parser[ListExpression] = _node(
            between(
                literal("("),
                literal(")"),
                self._nested(many(DeferredParser(lambda: self.list_item))),
            ),
            lambda items, span: ListExpression(items=tuple(items), span=span),
        )
        self.expression: Parser[Expression] = map_error_to(
            _padded(choice(self.block_comment, self.line_comment, self.list_expression)),
            _EXPECTED_EXPRESSION,
        )
        self.list_item: Parser[ListItem] = map_error_to(
            _padded(
                choice(
                    self.expression,
                    self.identifier,
                    self.numeric_literal,
                    self.string_literal,
                )
            ),
            _EXPECTED_LIST_ITEM,
        )
        self.program: Parser[Program] = _node(
            many_till(self.expression, end_of_input()),
            lambda body, span: Program(body=tuple(body), span=span),
        )

    def _nested[T](self, parser: Parser[T]) -> Parser[T]:
        """Run parser one nesting level deeper.

        Must run after the opening parenthesis is consumed, so the guard
        only counts real lists, not failed attempts at one.

        Raises:
            DepthLimitExceededError: If the nesting limit is already reached
        """
        inner = as_parser(parser)
        guard = self.depth_guard

        def parse_nested(cursor: Cursor) -> ParseOutcome[T]:
            if guard.is_exceeded():
                start = max(0, cursor.offset - 1)
                line, column = position_of(Cursor(cursor.source, start))
                span = SourceSpan(start=start, end=cursor.offset, line=line, column=column)
                guard.check(ErrorTemplate.nesting_depth_exceeded(guard.max_depth, span))
            with guard:
                return inner.run(cursor)

        return DirectParser(parse_nested, "nested")
