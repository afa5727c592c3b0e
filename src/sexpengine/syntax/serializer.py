"""Serialize the S-expression AST.

Two output shapes:
- Source text (SexpSerializer / serialize): formatters, code generators,
  property-based testing (roundtrip: parse -> serialize -> parse)
- Tagged records (to_dict / to_json): ``{"type": <NodeType>, ...fields}``,
  the interchange shape consumed by code generators and tooling

Python 3.13+.
"""

import json
import math
import re
from decimal import Decimal
from typing import Any

from sexpengine.enums import NodeType

from .ast import (
    ASTNode,
    BlockComment,
    Identifier,
    LineComment,
    ListExpression,
    NumericLiteral,
    Program,
    Span,
    StringLiteral,
)
from .visitor import ASTVisitor

__all__ = [
    "DictSerializer",
    "SerializationValidationError",
    "SexpSerializer",
    "serialize",
    "to_dict",
    "to_json",
]

_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"[a-zA-Z_]\w*", re.ASCII)


class SerializationValidationError(ValueError):
    """Raised when a node cannot be written as source that parses back.

    Common causes:
    - A string literal containing a double quote (no escape sequences)
    - A block comment containing ``|#``, or a line comment containing a line ending
    - An identifier that does not match ``[a-zA-Z_][a-zA-Z0-9_]*``
    - A float that is inf or nan
    """


def _format_number(value: int | float) -> str:
    """Render a numeric literal the way the grammar reads it.

    Floats are written positionally from their shortest repr(), so 1e-05
    becomes 0.00001 and 1e+16 becomes 10000000000000000.0.
    """
    if not isinstance(value, float):
        return str(value)
    if not math.isfinite(value):
        return repr(value)
    text = format(Decimal(repr(value)), "f")
    return text if "." in text else f"{text}.0"


def _validate(node: ASTNode) -> None:
    """Check that a single (non-container) node has a source form.

    Raises:
        SerializationValidationError: If node cannot be written back
    """
    match node:
        case Identifier(name=name) if _IDENTIFIER_RE.fullmatch(name) is None:
            msg = f"Identifier {name!r} is not a valid identifier"
            raise SerializationValidationError(msg)
        case StringLiteral(value=value) if '"' in value:
            msg = f"String literal {value!r} contains a double quote"
            raise SerializationValidationError(msg)
        case BlockComment(comment=comment) if "|#" in comment:
            msg = f"Block comment {comment!r} contains the terminator '|#'"
            raise SerializationValidationError(msg)
        case LineComment(comment=comment) if "\n" in comment or comment.endswith("\r"):
            msg = f"Line comment {comment!r} contains a line ending"
            raise SerializationValidationError(msg)
        case NumericLiteral(value=float() as value) if not math.isfinite(value):
            msg = f"Float {value!r} is not finite"
            raise SerializationValidationError(msg)
        case _:
            pass


class SexpSerializer(ASTVisitor):
    """Converts the AST back to S-expression source.

    Layout: top-level expressions one per line, list items separated by a
    single space. A line comment is always followed by a newline.

    Usage:
        >>> from sexpengine.syntax import parse_program, SexpSerializer
        >>> program = parse_program("( add  1\\n 2 )")
        >>> SexpSerializer().serialize(program)
        '(add 1 2)\\n'
    """

    def serialize(self, program: Program, *, validate: bool = True) -> str:
        """Serialize Program to source.

        Args:
            program: Program AST node
            validate: If True (default), reject nodes whose source form would
                     not parse back to the same node.

        Returns:
            Source text

        Raises:
            SerializationValidationError: If validate=True and a node has no
                source form
            DepthLimitExceededError: If the tree is nested too deeply
        """
        output: list[str] = []
        with self._depth_guard:
            for expression in program.body:
                if validate and isinstance(expression, (Identifier, NumericLiteral, StringLiteral)):
                    msg = f"{type(expression).__name__} is not allowed at the top level"
                    raise SerializationValidationError(msg)
                self._serialize_node(expression, output, validate=validate)
                if not isinstance(expression, LineComment):
                    output.append("\n")
        return "".join(output)

    def _serialize_node(self, node: ASTNode, output: list[str], *, validate: bool) -> None:
        if validate:
            _validate(node)
        match node:
            case ListExpression(items=items):
                self._serialize_list(items, output, validate=validate)
            case BlockComment(comment=comment):
                output.append(f"#|{comment}|#")
            case LineComment(comment=comment):
                output.append(f";{comment}\n")
            case Identifier(name=name):
                output.append(name)
            case NumericLiteral(value=value):
                output.append(_format_number(value))
            case StringLiteral(value=value):
                output.append(f'"{value}"')
            case Program():
                msg = "Program cannot be nested inside another node"
                raise SerializationValidationError(msg)

    def _serialize_list(
        self, items: tuple[ASTNode, ...], output: list[str], *, validate: bool
    ) -> None:
        with self._depth_guard:
            output.append("(")
            for index, item in enumerate(items):
                if index > 0 and not isinstance(items[index - 1], LineComment):
                    output.append(" ")
                self._serialize_node(item, output, validate=validate)
            output.append(")")


def serialize(program: Program, *, validate: bool = True) -> str:
    """Serialize Program to S-expression source.

    Convenience function for SexpSerializer.serialize().

    Example:
        >>> from sexpengine.syntax import parse_program, serialize
        >>> serialize(parse_program('(log "hi") ; done'))
        '(log "hi")\\n; done\\n'
    """
    return SexpSerializer().serialize(program, validate=validate)


# ============================================================================
# TAGGED RECORDS
# ============================================================================


class DictSerializer(ASTVisitor[dict[str, Any]]):
    """Converts the AST to tagged records.

    Every node becomes ``{"type": <NodeType value>, ...fields}`` with child
    tuples as lists. Spans are omitted unless include_spans is set.
    """

    __slots__ = ("_include_spans",)

    def __init__(self, *, include_spans: bool = False, max_depth: int | None = None) -> None:
        super().__init__(max_depth=max_depth)
        self._include_spans = include_spans

    def _record(self, node_type: NodeType, span: Span | None, **fields: Any) -> dict[str, Any]:
        record: dict[str, Any] = {"type": node_type.value, **fields}
        if self._include_spans and span is not None:
            record["span"] = {"start": span.start, "end": span.end}
        return record

    def visit_Program(self, node: Program) -> dict[str, Any]:  # noqa: N802 - ast.NodeVisitor naming
        with self._depth_guard:
            return self._record(
                NodeType.PROGRAM, node.span, body=[self.visit(child) for child in node.body]
            )

    def visit_ListExpression(self, node: ListExpression) -> dict[str, Any]:  # noqa: N802
        with self._depth_guard:
            return self._record(
                NodeType.LIST_EXPRESSION,
                node.span,
                items=[self.visit(child) for child in node.items],
            )

    def visit_BlockComment(self, node: BlockComment) -> dict[str, Any]:  # noqa: N802
        return self._record(NodeType.BLOCK_COMMENT, node.span, comment=node.comment)

    def visit_LineComment(self, node: LineComment) -> dict[str, Any]:  # noqa: N802
        return self._record(NodeType.LINE_COMMENT, node.span, comment=node.comment)

    def visit_Identifier(self, node: Identifier) -> dict[str, Any]:  # noqa: N802
        return self._record(NodeType.IDENTIFIER, node.span, name=node.name)

    def visit_NumericLiteral(self, node: NumericLiteral) -> dict[str, Any]:  # noqa: N802
        return self._record(NodeType.NUMERIC_LITERAL, node.span, value=node.value)

    def visit_StringLiteral(self, node: StringLiteral) -> dict[str, Any]:  # noqa: N802
        return self._record(NodeType.STRING_LITERAL, node.span, value=node.value)

    def generic_visit(self, node: ASTNode) -> dict[str, Any]:
        msg = f"Unknown AST node type: {type(node).__name__}"
        raise TypeError(msg)


def to_dict(node: ASTNode, *, include_spans: bool = False) -> dict[str, Any]:
    """Convert node (and its subtree) to tagged records.

    Example:
        >>> from sexpengine.syntax import parse_program
        >>> to_dict(parse_program("(a 1)"))
        {'type': 'Program', 'body': [{'type': 'ListExpression', 'items': [{'type': 'Identifier', 'name': 'a'}, {'type': 'NumericLiteral', 'value': 1}]}]}
    """  # noqa: E501
    return DictSerializer(include_spans=include_spans).visit(node)


def to_json(node: ASTNode, *, include_spans: bool = False, indent: int | None = None) -> str:
    """Convert node to a JSON document of tagged records."""
    return json.dumps(to_dict(node, include_spans=include_spans), indent=indent, ensure_ascii=False)
