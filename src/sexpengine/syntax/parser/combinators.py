"""Parser abstraction and combinator catalog.

A parser is a value that, given a Cursor, produces a ParseOutcome. Two
variants exist:

- DirectParser holds the run function.
- DeferredParser holds a zero-argument thunk producing another parser. It is
  resolved at run time, which lets grammar rules refer to each other before
  both are constructed.

Every combinator accepts either a Parser or a zero-argument callable
returning one, and returns a new parser without touching its arguments.

Backtracking:
    or_ and choice retry each alternative from the ORIGINAL cursor, no matter
    how far a failed branch got. Failure cursors therefore always point at
    the start of the alternation, never at the deepest point reached.

Repetition:
    many, many_till, sequence and choice loop instead of recursing per
    element, so input length never limits the interpreter stack. Only
    grammar nesting recurses.

Pattern Reference:
    - Haskell Parsec (many, manyTill, sepBy, between, lookAhead, count)
    - Elm parser (andThen, andMap)
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Any, final

from sexpengine.syntax.ast import Span
from sexpengine.syntax.cursor import Cursor, ParseFailure, ParseOutcome, ParseResult

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Parser abstraction
    "Parser",
    "DirectParser",
    "DeferredParser",
    "ParserLike",
    "as_parser",
    "run_parser",
    # Primitives
    "succeed",
    "fail",
    "literal",
    "pattern",
    "satisfy",
    "end_of_input",
    "until",
    # Value and error mapping
    "map_",
    "map_to",
    "map_error",
    "map_error_to",
    "skip",
    # Chaining
    "and_then",
    "and_map",
    "ignore_left",
    "ignore_right",
    "sequence",
    # Alternation
    "or_",
    "choice",
    "optional",
    "maybe",
    "look_ahead",
    # Repetition
    "many",
    "many_till",
    "skip_many",
    "sep_by",
    "count",
    # Enclosing
    "between",
    "parens",
    "braces",
    "brackets",
    # Tooling
    "spanned",
    "debug",
]

logger = logging.getLogger(__name__)

_PREDICATE_FAILED = "Could not satisfy predicate"
_EXPECTED_END = "Expected end of input"


# =============================================================================
# Parser abstraction
# =============================================================================


class Parser[T](ABC):
    """Anything that turns a Cursor into a ParseOutcome."""

    __slots__ = ()

    @abstractmethod
    def run(self, cursor: Cursor) -> ParseOutcome[T]:
        """Run the parser at cursor."""

    def parse(self, text: str) -> ParseOutcome[T]:
        """Run the parser from the start of text."""
        return self.run(Cursor(text, 0))


type ParserLike[T] = Parser[T] | Callable[[], ParserLike[T]]


@final
class DirectParser[T](Parser[T]):
    """Parser holding its run function.

    Attributes:
        name: Label used by debug() and repr()
    """

    __slots__ = ("_fn", "name")

    def __init__(self, fn: Callable[[Cursor], ParseOutcome[T]], name: str | None = None) -> None:
        self._fn = fn
        self.name = name or fn.__name__

    def run(self, cursor: Cursor) -> ParseOutcome[T]:
        return self._fn(cursor)

    def __repr__(self) -> str:
        return f"DirectParser({self.name})"


@final
class DeferredParser[T](Parser[T]):
    """Parser represented as a thunk, resolved every time it runs.

    Resolution loops until a DirectParser is reached: a thunk may yield
    another DeferredParser, or a bare zero-argument callable, which is
    invoked in turn.

    Example:
        >>> item = DeferredParser(lambda: grammar.list_item)  # not yet built
    """

    __slots__ = ("_thunk",)

    def __init__(self, thunk: Callable[[], ParserLike[T]]) -> None:
        self._thunk = thunk

    def resolve(self) -> DirectParser[T]:
        """Follow the chain of thunks down to a DirectParser.

        Raises:
            TypeError: If a thunk yields something that is neither a parser
                nor a zero-argument callable
        """
        target: object = self._thunk()
        while True:
            match target:
                case DirectParser():
                    return target
                case DeferredParser():
                    target = target._thunk()
                case _ if callable(target):
                    target = target()
                case _:
                    msg = f"Deferred parser resolved to {target!r}, not a parser"
                    raise TypeError(msg)

    def run(self, cursor: Cursor) -> ParseOutcome[T]:
        return self.resolve().run(cursor)

    def __repr__(self) -> str:
        return f"DeferredParser({getattr(self._thunk, '__qualname__', self._thunk)!r})"


def as_parser[T](parser: ParserLike[T]) -> Parser[T]:
    """Normalize a parser-like value into a Parser.

    Zero-argument callables become DeferredParsers; they are not invoked
    here, so rules can reference rules that do not exist yet.

    Raises:
        TypeError: If parser is neither a Parser nor callable
    """
    match parser:
        case Parser():
            return parser
        case _ if callable(parser):
            return DeferredParser(parser)
        case _:
            msg = f"Expected a parser or a zero-argument callable, got {parser!r}"
            raise TypeError(msg)


def run_parser[T](parser: ParserLike[T], text: str) -> ParseOutcome[T]:
    """Build the initial cursor over text and run parser on it."""
    return as_parser(parser).run(Cursor(text, 0))


# =============================================================================
# Primitives
# =============================================================================


def succeed[T](value: T) -> Parser[T]:
    """Always succeed with value, consuming nothing."""

    def parse_succeed(cursor: Cursor) -> ParseOutcome[T]:
        return ParseResult(value, cursor)

    return DirectParser(parse_succeed, f"succeed({value!r})")


def fail(message: str) -> Parser[Any]:
    """Always fail with message, consuming nothing."""

    def parse_fail(cursor: Cursor) -> ParseOutcome[Any]:
        return ParseFailure((message,), cursor)

    return DirectParser(parse_fail, f"fail({message!r})")


def literal(text: str) -> Parser[str]:
    """Match text exactly.

    Fails with ``Expected "<text>"`` and the cursor unchanged.

    Example:
        >>> literal("#|").parse("#| note |#").cursor.offset
        2
    """
    message = f'Expected "{text}"'
    length = len(text)

    def parse_literal(cursor: Cursor) -> ParseOutcome[str]:
        if cursor.startswith(text):
            return ParseResult(text, cursor.advance(length))
        return ParseFailure((message,), cursor)

    return DirectParser(parse_literal, f"literal({text!r})")


def _anchored(regex: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile regex for matching at the cursor offset.

    ``Pattern.match(source, offset)`` already anchors at offset; a leading
    ``^`` would only match at the real start of the source, and MULTILINE
    would let it match after any newline, so both are dropped.
    """
    if isinstance(regex, re.Pattern):
        source, flags = regex.pattern, regex.flags
    else:
        source, flags = regex, 0
    return re.compile(source.removeprefix("^"), flags & ~re.MULTILINE)


def pattern(regex: str | re.Pattern[str]) -> Parser[str]:
    """Match a regular expression anchored at the current position.

    Consumes the matched text and yields it. Fails with
    ``Expected to match /^<regex>/`` and the cursor unchanged.

    Example:
        >>> pattern(r"[0-9]+").parse("123abc").value
        '123'
    """
    compiled = _anchored(regex)
    message = f"Expected to match /^{compiled.pattern}/"

    def parse_pattern(cursor: Cursor) -> ParseOutcome[str]:
        match = compiled.match(cursor.source, cursor.offset)
        if match is None:
            return ParseFailure((message,), cursor)
        value = match.group(0)
        return ParseResult(value, cursor.advance(len(value)))

    return DirectParser(parse_pattern, f"pattern({compiled.pattern!r})")


def satisfy(predicate: Callable[[str], bool]) -> Parser[str]:
    """Consume one character if predicate accepts it.

    Fails with ``Could not satisfy predicate`` on empty input or rejection.
    """

    def parse_satisfy(cursor: Cursor) -> ParseOutcome[str]:
        if not cursor.is_eof:
            head = cursor.current
            if predicate(head):
                return ParseResult(head, cursor.advance())
        return ParseFailure((_PREDICATE_FAILED,), cursor)

    return DirectParser(parse_satisfy)


def end_of_input() -> Parser[None]:
    """Succeed with None iff no input remains."""

    def parse_end(cursor: Cursor) -> ParseOutcome[None]:
        if cursor.is_eof:
            return ParseResult(None, cursor)
        return ParseFailure((_EXPECTED_END,), cursor)

    return DirectParser(parse_end, "end_of_input")


def until(predicate: Callable[[str], bool]) -> Parser[str]:
    """Consume characters while predicate holds. Never fails.

    Example:
        >>> until(str.isalpha).parse("abc123").value
        'abc'
    """

    def parse_until(cursor: Cursor) -> ParseOutcome[str]:
        source = cursor.source
        end = cursor.offset
        while end < len(source) and predicate(source[end]):
            end += 1
        return ParseResult(cursor.slice_to(end), cursor.advance(end - cursor.offset))

    return DirectParser(parse_until)


# =============================================================================
# Value and error mapping
# =============================================================================


def map_[T, U](parser: ParserLike[T], fn: Callable[[T], U]) -> Parser[U]:
    """Replace a success value with fn(value). Failures pass through."""
    inner = as_parser(parser)

    def parse_map(cursor: Cursor) -> ParseOutcome[U]:
        outcome = inner.run(cursor)
        if isinstance(outcome, ParseFailure):
            return outcome
        return ParseResult(fn(outcome.value), outcome.cursor)

    return DirectParser(parse_map)


def map_to[U](parser: ParserLike[Any], value: U) -> Parser[U]:
    """Replace a success value with a constant."""
    return map_(parser, lambda _: value)


def skip(parser: ParserLike[Any]) -> Parser[None]:
    """Run parser, discarding its value."""
    return map_to(parser, None)


def map_error[T](
    parser: ParserLike[T], fn: Callable[[tuple[str, ...]], Iterable[str]]
) -> Parser[T]:
    """Rewrite the message list of a failure. Successes pass through."""
    inner = as_parser(parser)

    def parse_map_error(cursor: Cursor) -> ParseOutcome[T]:
        outcome = inner.run(cursor)
        if isinstance(outcome, ParseResult):
            return outcome
        return ParseFailure(tuple(fn(outcome.messages)), outcome.cursor)

    return DirectParser(parse_map_error)


def map_error_to[T](parser: ParserLike[T], message: str) -> Parser[T]:
    """Replace every failure message with a single domain-level message."""
    return map_error(parser, lambda _: (message,))


# =============================================================================
# Chaining
# =============================================================================


def and_then[T, U](fn: Callable[[T], ParserLike[U]], parser: ParserLike[T]) -> Parser[U]:
    """Monadic bind: run parser, then the parser fn builds from its value."""
    inner = as_parser(parser)

    def parse_and_then(cursor: Cursor) -> ParseOutcome[U]:
        outcome = inner.run(cursor)
        if isinstance(outcome, ParseFailure):
            return outcome
        return as_parser(fn(outcome.value)).run(outcome.cursor)

    return DirectParser(parse_and_then)


def and_map[T, U](parser: ParserLike[T], fn_parser: ParserLike[Callable[[T], U]]) -> Parser[U]:
    """Applicative apply: run parser, then fn_parser, and apply its function.

    Example:
        >>> pair = and_map(digit(), map_(digit(), lambda b: lambda a: (a, b)))
        >>> pair.parse("12").value
        (1, 2)
    """
    inner = as_parser(parser)
    fn_inner = as_parser(fn_parser)

    def parse_and_map(cursor: Cursor) -> ParseOutcome[U]:
        outcome = inner.run(cursor)
        if isinstance(outcome, ParseFailure):
            return outcome
        applied = fn_inner.run(outcome.cursor)
        if isinstance(applied, ParseFailure):
            return applied
        return ParseResult(applied.value(outcome.value), applied.cursor)

    return DirectParser(parse_and_map)


def ignore_left[U](left: ParserLike[Any], right: ParserLike[U]) -> Parser[U]:
    """Run left then right, keeping right's value."""
    left_inner = as_parser(left)
    right_inner = as_parser(right)

    def parse_ignore_left(cursor: Cursor) -> ParseOutcome[U]:
        outcome = left_inner.run(cursor)
        if isinstance(outcome, ParseFailure):
            return outcome
        return right_inner.run(outcome.cursor)

    return DirectParser(parse_ignore_left)


def ignore_right[T](left: ParserLike[T], right: ParserLike[Any]) -> Parser[T]:
    """Run left then right, keeping left's value."""
    left_inner = as_parser(left)
    right_inner = as_parser(right)

    def parse_ignore_right(cursor: Cursor) -> ParseOutcome[T]:
        outcome = left_inner.run(cursor)
        if isinstance(outcome, ParseFailure):
            return outcome
        right_outcome = right_inner.run(outcome.cursor)
        if isinstance(right_outcome, ParseFailure):
            return right_outcome
        return ParseResult(outcome.value, right_outcome.cursor)

    return DirectParser(parse_ignore_right)


def sequence(*parsers: ParserLike[Any]) -> Parser[list[Any]]:
    """Run parsers strictly left to right, collecting every value.

    The first failure is returned as-is.
    """
    inners = tuple(as_parser(p) for p in parsers)

    def parse_sequence(cursor: Cursor) -> ParseOutcome[list[Any]]:
        values: list[Any] = []
        current = cursor
        for inner in inners:
            outcome = inner.run(current)
            if isinstance(outcome, ParseFailure):
                return outcome
            values.append(outcome.value)
            current = outcome.cursor
        return ParseResult(values, current)

    return DirectParser(parse_sequence)


# =============================================================================
# Alternation
# =============================================================================


def or_[T](left: ParserLike[T], right: ParserLike[T]) -> Parser[T]:
    """Try left; on failure try right from the original cursor.

    If both fail, the messages of both branches are concatenated (left
    first) and the failure cursor is the original cursor.

    Example:
        >>> or_(literal("ab"), literal("ac")).parse("ac").value
        'ac'
    """
    left_inner = as_parser(left)
    right_inner = as_parser(right)

    def parse_or(cursor: Cursor) -> ParseOutcome[T]:
        left_outcome = left_inner.run(cursor)
        if isinstance(left_outcome, ParseResult):
            return left_outcome
        right_outcome = right_inner.run(cursor)
        if isinstance(right_outcome, ParseResult):
            return right_outcome
        return ParseFailure(left_outcome.messages + right_outcome.messages, cursor)

    return DirectParser(parse_or)


def choice[T](*parsers: ParserLike[T]) -> Parser[T]:
    """Ordered choice over any number of alternatives.

    Equivalent to folding or_ from the left, starting at a parser that fails
    with no messages: the first success wins, otherwise the failure carries
    every alternative's messages in order, at the original cursor.
    """
    inners = tuple(as_parser(p) for p in parsers)

    def parse_choice(cursor: Cursor) -> ParseOutcome[T]:
        messages: list[str] = []
        for inner in inners:
            outcome = inner.run(cursor)
            if isinstance(outcome, ParseResult):
                return outcome
            messages.extend(outcome.messages)
        return ParseFailure(tuple(messages), cursor)

    return DirectParser(parse_choice)


def optional[T](default: T, parser: ParserLike[T]) -> Parser[T]:
    """Run parser, falling back to default without consuming input."""
    return or_(parser, succeed(default))


def maybe[T](parser: ParserLike[T]) -> Parser[T | None]:
    """Run parser, yielding None instead of failing."""
    return optional(None, parser)


def look_ahead[T](parser: ParserLike[T]) -> Parser[T]:
    """Run parser without consuming input.

    The outcome keeps its value or messages, but the cursor is always the
    original one, on success and on failure alike.
    """
    inner = as_parser(parser)

    def parse_look_ahead(cursor: Cursor) -> ParseOutcome[T]:
        outcome = inner.run(cursor)
        if isinstance(outcome, ParseResult):
            return ParseResult(outcome.value, cursor)
        return ParseFailure(outcome.messages, cursor)

    return DirectParser(parse_look_ahead)


# =============================================================================
# Repetition
# =============================================================================


def many[T](parser: ParserLike[T], *, at_least_once: bool = False) -> Parser[list[T]]:
    """Apply parser until it fails, collecting values in order.

    The final failing attempt is discarded and the cursor rewinds to just
    before it. With at_least_once, a failing first attempt fails the whole
    combinator with that failure. Repetition stops after an attempt that
    succeeds without consuming input.

    Example:
        >>> outcome = many(digit()).parse("12a")
        >>> outcome.value, outcome.cursor.remaining
        ([1, 2], 'a')
    """
    inner = as_parser(parser)

    def parse_many(cursor: Cursor) -> ParseOutcome[list[T]]:
        values: list[T] = []
        current = cursor
        while True:
            outcome = inner.run(current)
            if isinstance(outcome, ParseFailure):
                if at_least_once and not values:
                    return outcome
                return ParseResult(values, current)
            values.append(outcome.value)
            if outcome.cursor.offset == current.offset:
                return ParseResult(values, current)
            current = outcome.cursor

    return DirectParser(parse_many)


def skip_many(parser: ParserLike[Any], *, at_least_once: bool = False) -> Parser[None]:
    """Apply parser repeatedly, discarding the values."""
    return map_to(many(parser, at_least_once=at_least_once), None)


def many_till[T](parser: ParserLike[T], end: ParserLike[Any]) -> Parser[list[T]]:
    """Apply parser until end matches, consuming the terminator.

    Before every iteration end is tried first; when it succeeds the values
    collected so far are returned with the cursor after the terminator.
    When neither end nor parser matches, the failure carries the body's
    messages followed by the terminator's, at the body's failure cursor.

    Example:
        >>> outcome = many_till(any_char(), literal("|#")).parse("abc|#")
        >>> "".join(outcome.value), outcome.cursor.offset
        ('abc', 5)
    """
    inner = as_parser(parser)
    end_inner = as_parser(end)

    def parse_many_till(cursor: Cursor) -> ParseOutcome[list[T]]:
        values: list[T] = []
        current = cursor
        while True:
            end_outcome = end_inner.run(current)
            if isinstance(end_outcome, ParseResult):
                return ParseResult(values, end_outcome.cursor)
            outcome = inner.run(current)
            if isinstance(outcome, ParseFailure):
                return ParseFailure(outcome.messages + end_outcome.messages, outcome.cursor)
            if outcome.cursor.offset == current.offset:
                # Body cannot make progress, so the terminator is unreachable
                return ParseFailure(end_outcome.messages, current)
            values.append(outcome.value)
            current = outcome.cursor

    return DirectParser(parse_many_till)


def sep_by[T](
    parser: ParserLike[T],
    sep: ParserLike[Any],
    *,
    at_least_once: bool = False,
    optionally_trailing: bool = False,
) -> Parser[list[T]]:
    """Parse ``parser (sep parser)*``.

    Args:
        parser: Element parser
        sep: Separator parser (values discarded)
        at_least_once: Require at least one element
        optionally_trailing: Accept and discard one trailing separator

    Example:
        >>> sep_by(digit(), literal(","), optionally_trailing=True).parse("1,2,").value
        [1, 2]
    """
    item = as_parser(parser)
    separator = as_parser(sep)

    one_or_more: Parser[list[T]] = and_map(
        item,
        map_(many(ignore_left(separator, item)), lambda tail: lambda head: [head, *tail]),
    )
    if optionally_trailing:
        one_or_more = ignore_right(one_or_more, maybe(separator))

    if at_least_once:
        return one_or_more
    return or_(one_or_more, map_(succeed(()), list))


def count[T](n: int, parser: ParserLike[T]) -> Parser[list[T]]:
    """Apply parser exactly n times, short-circuiting on the first failure.

    Built from recursive and_then, one level per application.
    """
    inner = as_parser(parser)

    def accumulate(remaining: int, values: list[T]) -> Parser[list[T]]:
        if remaining <= 0:
            return succeed(values)
        return and_then(lambda value: accumulate(remaining - 1, [*values, value]), inner)

    return DeferredParser(lambda: accumulate(n, []))


# =============================================================================
# Enclosing
# =============================================================================


def between[T](open_: ParserLike[Any], close: ParserLike[Any], parser: ParserLike[T]) -> Parser[T]:
    """Run parser enclosed by open_ and close, keeping only its value."""
    return ignore_left(open_, ignore_right(parser, close))


def parens[T](parser: ParserLike[T]) -> Parser[T]:
    """Run parser between ``(`` and ``)``."""
    return between(literal("("), literal(")"), parser)


def braces[T](parser: ParserLike[T]) -> Parser[T]:
    """Run parser between ``{`` and ``}``."""
    return between(literal("{"), literal("}"), parser)


def brackets[T](parser: ParserLike[T]) -> Parser[T]:
    """Run parser between ``[`` and ``]``."""
    return between(literal("["), literal("]"), parser)


# =============================================================================
# Tooling
# =============================================================================


def spanned[T](parser: ParserLike[T]) -> Parser[tuple[T, Span]]:
    """Pair a success value with the Span of the text it consumed."""
    inner = as_parser(parser)

    def parse_spanned(cursor: Cursor) -> ParseOutcome[tuple[T, Span]]:
        outcome = inner.run(cursor)
        if isinstance(outcome, ParseFailure):
            return outcome
        span = Span(start=cursor.offset, end=outcome.cursor.offset)
        return ParseResult((outcome.value, span), outcome.cursor)

    return DirectParser(parse_spanned)


def debug[T](parser: ParserLike[T], title: str | None = None) -> Parser[T]:
    """Log every outcome of parser at DEBUG level; the outcome is unchanged."""
    inner = as_parser(parser)
    label = title or repr(inner)

    def parse_debug(cursor: Cursor) -> ParseOutcome[T]:
        outcome = inner.run(cursor)
        if isinstance(outcome, ParseResult):
            logger.debug(
                "%s succeeded at %d..%d: %r",
                label,
                cursor.offset,
                outcome.cursor.offset,
                outcome.value,
            )
        else:
            logger.debug("%s failed at %d: %s", label, cursor.offset, "; ".join(outcome.messages))
        return outcome

    return DirectParser(parse_debug, f"debug({label})")
