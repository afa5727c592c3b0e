"""Node types of the S-expression tree.

Seven immutable node kinds. Containers (Program, ListExpression) hold their
children in tuples, so a tree is a plain value: no parent links, no cycles,
hashable and safe to share between threads.

Every node carries an optional Span. Spans never take part in equality, so
``parse_program("(a  b)") == parse_program("(a b)")``.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass, field
from typing import TypeIs

# ruff: noqa: RUF022 - grouped by role
__all__ = [
    "Span",
    "Program",
    "ListExpression",
    "Identifier",
    "NumericLiteral",
    "StringLiteral",
    "BlockComment",
    "LineComment",
    "Expression",
    "ListItem",
    "ASTNode",
    "is_comment",
]


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open range ``[start, end)`` of source offsets covered by a node.

    For ``(add 1 2)`` the list spans 0..9 and ``add`` spans 1..4.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            msg = f"Span.start cannot be negative (got {self.start})"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span.end {self.end} precedes Span.start {self.start}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class BlockComment:
    """``#| ... |#`` comment; ``comment`` is the text between the markers."""

    comment: str
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class LineComment:
    """``; ...`` comment; ``comment`` excludes the semicolon and line break."""

    comment: str
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Identifier:
    name: str
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class NumericLiteral:
    """Number atom. ``42`` holds an int, ``-3.14`` a float."""

    value: int | float
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """Double-quoted atom; ``value`` is the raw text between the quotes."""

    value: str
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class ListExpression:
    """Parenthesized sequence of atoms, comments and nested lists.

    ``()`` is a valid, empty list.
    """

    items: tuple["ListItem", ...]
    span: Span | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Program:
    """Tree root: top-level lists and comments in source order."""

    body: tuple["Expression", ...]
    span: Span | None = field(default=None, compare=False)


# Allowed at top level
type Expression = BlockComment | LineComment | ListExpression

# Allowed inside a list
type ListItem = Expression | Identifier | NumericLiteral | StringLiteral

type ASTNode = Program | ListItem


def is_comment(node: object) -> TypeIs[BlockComment | LineComment]:
    return isinstance(node, (BlockComment, LineComment))
