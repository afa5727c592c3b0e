"""Tests for source serialization and the tagged-record interchange shape."""

from __future__ import annotations

import json

import pytest
from hypothesis import assume, event, given

from sexpengine.core.depth_guard import DepthLimitExceededError
from sexpengine.enums import NodeType
from sexpengine.syntax import parse_program
from sexpengine.syntax.ast import (
    BlockComment,
    Identifier,
    LineComment,
    ListExpression,
    NumericLiteral,
    Program,
    StringLiteral,
)
from sexpengine.syntax.serializer import (
    DictSerializer,
    SerializationValidationError,
    SexpSerializer,
    serialize,
    to_dict,
    to_json,
)

from .strategies import program_depth, program_nodes

# ============================================================================
# SOURCE SERIALIZATION
# ============================================================================


class TestSerialize:
    """Test serialize() layout."""

    def test_normalizes_whitespace(self) -> None:
        assert serialize(parse_program("( add  1\n 2 )")) == "(add 1 2)\n"

    def test_one_top_level_expression_per_line(self) -> None:
        source = '(set x 1) #| doc |# (log "x")'

        assert serialize(parse_program(source)) == '(set x 1)\n#| doc |#\n(log "x")\n'

    def test_line_comment_ends_its_line(self) -> None:
        program = parse_program("(a ; note\n b) ; done")

        assert serialize(program) == "(a ; note\nb)\n; done\n"

    def test_numbers(self) -> None:
        program = Program(
            body=(
                ListExpression(
                    items=(
                        NumericLiteral(value=-7),
                        NumericLiteral(value=3.14),
                        NumericLiteral(value=2.0),
                    )
                ),
            )
        )

        assert serialize(program) == "(-7 3.14 2.0)\n"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1e-05, "0.00001"),
            (-2.5e-07, "-0.00000025"),
            (1e16, "10000000000000000.0"),
            (1.5e20, "150000000000000000000.0"),
            (1e100, "1" + "0" * 100 + ".0"),
        ],
    )
    def test_floats_written_without_exponent(self, value: float, expected: str) -> None:
        program = Program(body=(ListExpression(items=(NumericLiteral(value=value),)),))

        assert serialize(program) == f"({expected})\n"

    @pytest.mark.parametrize("source", ["(a 0.00001)", "(10000000000000000.0 -0.0000001)"])
    def test_small_and_large_floats_roundtrip(self, source: str) -> None:
        program = parse_program(source)

        assert parse_program(serialize(program)) == program

    def test_empty_program(self) -> None:
        assert serialize(Program(body=())) == ""

    def test_depth_limit(self) -> None:
        program = parse_program("((x))")

        SexpSerializer(max_depth=3).serialize(program)
        with pytest.raises(DepthLimitExceededError):
            SexpSerializer(max_depth=2).serialize(program)

    @given(program_nodes())
    def test_roundtrip(self, program: Program) -> None:
        """parse(serialize(p)) == p for every representable program."""
        assume(program_depth(program) <= 8)
        event(f"depth={program_depth(program)}")

        assert parse_program(serialize(program)) == program

    @given(program_nodes())
    def test_serialize_is_idempotent(self, program: Program) -> None:
        assume(program_depth(program) <= 8)
        once = serialize(program)

        assert serialize(parse_program(once)) == once


class TestSerializeValidation:
    """Nodes without a source form are rejected unless validation is off."""

    @pytest.mark.parametrize(
        ("node", "match"),
        [
            (Identifier(name="1bad"), "not a valid identifier"),
            (Identifier(name="with-dash"), "not a valid identifier"),
            (StringLiteral(value='say "hi"'), "contains a double quote"),
            (BlockComment(comment="a |# b"), "contains the terminator"),
            (LineComment(comment="a\nb"), "contains a line ending"),
            (LineComment(comment="a\r"), "contains a line ending"),
            (NumericLiteral(value=float("inf")), "is not finite"),
            (NumericLiteral(value=float("nan")), "is not finite"),
        ],
    )
    def test_rejects_inside_list(self, node, match: str) -> None:
        program = Program(body=(ListExpression(items=(node,)),))

        with pytest.raises(SerializationValidationError, match=match):
            serialize(program)

    def test_rejects_top_level_atoms(self) -> None:
        program = Program(body=(Identifier(name="x"),))  # type: ignore[arg-type]

        with pytest.raises(SerializationValidationError, match="not allowed at the top level"):
            serialize(program)

    def test_validation_error_is_value_error(self) -> None:
        assert issubclass(SerializationValidationError, ValueError)

    def test_validate_false_writes_anything(self) -> None:
        program = Program(body=(ListExpression(items=(StringLiteral(value='a"b'),)),))

        assert serialize(program, validate=False) == '("a"b")\n'


# ============================================================================
# TAGGED RECORDS
# ============================================================================


class TestToDict:
    """Test to_dict() and DictSerializer."""

    def test_program_shape(self) -> None:
        assert to_dict(parse_program('(log 1 2.5 "s") ; c')) == {
            "type": "Program",
            "body": [
                {
                    "type": "ListExpression",
                    "items": [
                        {"type": "Identifier", "name": "log"},
                        {"type": "NumericLiteral", "value": 1},
                        {"type": "NumericLiteral", "value": 2.5},
                        {"type": "StringLiteral", "value": "s"},
                    ],
                },
                {"type": "LineComment", "comment": " c"},
            ],
        }

    def test_type_tags_are_node_types(self) -> None:
        record = to_dict(parse_program("#| b |#"))

        assert record["type"] == NodeType.PROGRAM
        assert record["body"][0]["type"] == NodeType.BLOCK_COMMENT

    def test_single_node(self) -> None:
        assert to_dict(Identifier(name="x")) == {"type": "Identifier", "name": "x"}

    def test_include_spans(self) -> None:
        record = to_dict(parse_program(" (a)"), include_spans=True)

        assert record["span"] == {"start": 0, "end": 4}
        assert record["body"][0]["span"] == {"start": 1, "end": 4}
        assert record["body"][0]["items"][0]["span"] == {"start": 2, "end": 3}

    def test_spanless_nodes_omit_span(self) -> None:
        assert "span" not in to_dict(Identifier(name="x"), include_spans=True)

    def test_unknown_node_rejected(self) -> None:
        with pytest.raises(TypeError, match="Unknown AST node type"):
            DictSerializer().visit(object())  # type: ignore[arg-type]

    def test_depth_limit(self) -> None:
        with pytest.raises(DepthLimitExceededError):
            DictSerializer(max_depth=2).visit(parse_program("((x))"))


class TestToJson:
    """Test to_json()."""

    def test_parses_back_to_dict(self) -> None:
        program = parse_program('(greet "wörld")')

        assert json.loads(to_json(program)) == to_dict(program)

    def test_non_ascii_kept_verbatim(self) -> None:
        assert "wörld" in to_json(parse_program('(greet "wörld")'))

    def test_indent(self) -> None:
        output = to_json(parse_program("(a)"), indent=2)

        assert output.startswith('{\n  "type": "Program"')

    def test_spans(self) -> None:
        data = json.loads(to_json(parse_program("(a)"), include_spans=True))

        assert data["span"] == {"start": 0, "end": 3}
