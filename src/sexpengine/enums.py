"""Enumerations for sexpengine type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class NodeType(StrEnum):
    """Kind tag of an AST node in the interchange shape.

    StrEnum provides automatic string conversion: str(NodeType.PROGRAM) == "Program"
    """

    PROGRAM = "Program"
    """Top-level sequence of expressions"""

    BLOCK_COMMENT = "BlockComment"
    """Block comment: #| text |#"""

    LINE_COMMENT = "LineComment"
    """Line comment: ; text"""

    IDENTIFIER = "Identifier"
    """Bare name: log, add, my_var"""

    NUMERIC_LITERAL = "NumericLiteral"
    """Integer or float: 42, -7, 3.14"""

    STRING_LITERAL = "StringLiteral"
    """Double-quoted text: "hello" """

    LIST_EXPRESSION = "ListExpression"
    """Parenthesized list: (add 1 2)"""

