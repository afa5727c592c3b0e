"""S-expression syntax package.

Provides the combinator parser, AST definitions, visitor pattern, and
serialization. Separate from any code generator so tooling (linters,
formatters, editors) can depend on the tree alone.

Python 3.13+.
"""

from .ast import (
    ASTNode,
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
from .cursor import Cursor, ParseFailure, ParseOutcome, ParseResult
from .parser import SexpParser
from .position import format_failure, position_of
from .serializer import (
    SerializationValidationError,
    SexpSerializer,
    serialize,
    to_dict,
    to_json,
)
from .visitor import ASTTransformer, ASTVisitor, strip_comments

__all__ = [
    "ASTNode",
    "ASTTransformer",
    "ASTVisitor",
    "BlockComment",
    "Cursor",
    "Expression",
    "Identifier",
    "LineComment",
    "ListExpression",
    "ListItem",
    "NumericLiteral",
    "ParseFailure",
    "ParseOutcome",
    "ParseResult",
    "Program",
    "SerializationValidationError",
    "SexpParser",
    "SexpSerializer",
    "Span",
    "StringLiteral",
    "format_failure",
    "parse_program",
    "position_of",
    "serialize",
    "strip_comments",
    "to_dict",
    "to_json",
]


def parse_program(source: str) -> Program:
    """Parse S-expression source into a Program.

    Convenience function for SexpParser.parse().

    Args:
        source: Program text

    Returns:
        Program containing every top-level list and comment

    Raises:
        SexpSyntaxError: If the input is not a valid program
        DepthLimitExceededError: If lists nest deeper than the recursion
            limit allows

    Example:
        >>> from sexpengine.syntax import parse_program
        >>> program = parse_program("(add 1 2.5)")
        >>> [item.value for item in program.body[0].items[1:]]
        [1, 2.5]
    """
    parser = SexpParser()
    return parser.parse(source)
