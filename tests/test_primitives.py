"""Tests for character, number and whitespace primitives."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sexpengine.syntax.cursor import ParseFailure, ParseResult
from sexpengine.syntax.parser.combinators import choice
from sexpengine.syntax.parser.primitives import (
    any_char,
    char,
    digit,
    digit_char,
    float_,
    hex_digit,
    integer,
    letter,
    lower,
    none_of,
    oct_digit,
    one_of,
    upper,
)
from sexpengine.syntax.parser.whitespace import crlf, eol, newline, space, tab, whitespace

from .strategies import decimal_floats

# ============================================================================
# CHARACTERS
# ============================================================================


class TestCharacters:
    """Test single-character parsers and their domain messages."""

    def test_char(self) -> None:
        assert char("x").parse("xy").value == "x"
        assert char("x").parse("y").messages == ('Expected "x"',)

    def test_any_char(self) -> None:
        assert any_char().parse("\n").value == "\n"
        assert any_char().parse("").messages == ("Expected any character",)

    def test_one_of(self) -> None:
        assert one_of("+-").parse("-1").value == "-"
        assert one_of("+-").parse("1").messages == ('Expected one character of "+-"',)

    def test_none_of(self) -> None:
        assert none_of('"').parse("a").value == "a"
        assert none_of('"').parse('"').messages == ('Expected no character of """',)

    @pytest.mark.parametrize(
        ("parser", "good", "bad", "message"),
        [
            (lower(), "q", "Q", "Expected a lowercase character"),
            (upper(), "Q", "q", "Expected an uppercase character"),
            (letter(), "Z", "1", "Expected a letter"),
            (digit_char(), "5", "x", "Expected a decimal digit"),
            (oct_digit(), "7", "8", "Expected an octal digit"),
            (hex_digit(), "f", "g", "Expected a hexadecimal digit"),
        ],
    )
    def test_character_classes(self, parser, good: str, bad: str, message: str) -> None:
        assert parser.parse(good).value == good
        failure = parser.parse(bad)
        assert isinstance(failure, ParseFailure)
        assert failure.messages == (message,)
        assert failure.cursor.offset == 0

    def test_digit_yields_int(self) -> None:
        assert digit().parse("7").value == 7
        assert digit().parse("x").messages == ("Expected a digit",)


# ============================================================================
# NUMBERS
# ============================================================================


class TestInteger:
    """Test integer()."""

    @pytest.mark.parametrize(
        ("source", "value", "consumed"),
        [
            ("0", 0, 1),
            ("42", 42, 2),
            ("-7", -7, 2),
            ("+3", 3, 2),
            ("12)", 12, 2),
            ("5 6", 5, 1),
        ],
    )
    def test_accepts(self, source: str, value: int, consumed: int) -> None:
        result = integer().parse(source)

        assert isinstance(result, ParseResult)
        assert result.value == value
        assert isinstance(result.value, int)
        assert result.cursor.offset == consumed

    @pytest.mark.parametrize("source", ["007", "3.14", "abc", "-", "", ".5"])
    def test_rejects(self, source: str) -> None:
        failure = integer().parse(source)

        assert isinstance(failure, ParseFailure)
        assert failure.messages == ("Expected an integer",)
        assert failure.cursor.offset == 0

    @given(st.integers())
    def test_any_python_int(self, value: int) -> None:
        assert integer().parse(str(value)).value == value


class TestFloat:
    """Test float_()."""

    @pytest.mark.parametrize(
        ("source", "value"),
        [("3.14", 3.14), ("0.5", 0.5), ("-2.25", -2.25), ("+1.0", 1.0), ("10.01", 10.01)],
    )
    def test_accepts(self, source: str, value: float) -> None:
        result = float_().parse(source)

        assert isinstance(result, ParseResult)
        assert result.value == value
        assert isinstance(result.value, float)

    @pytest.mark.parametrize("source", ["3", ".5", "5.", "01.5", "1e5", "abc"])
    def test_rejects(self, source: str) -> None:
        failure = float_().parse(source)

        assert isinstance(failure, ParseFailure)
        assert failure.messages == ("Expected a float",)

    @given(decimal_floats())
    def test_repr_roundtrip(self, value: float) -> None:
        assert float_().parse(repr(value)).value == value


class TestNumberChoice:
    """integer() before float_() must still read floats."""

    def test_integer_first_reads_float(self) -> None:
        result = choice(integer(), float_()).parse("3.14")

        assert isinstance(result, ParseResult)
        assert result.value == 3.14
        assert result.cursor.offset == 4

    def test_both_messages_on_failure(self) -> None:
        failure = choice(integer(), float_()).parse("x")

        assert isinstance(failure, ParseFailure)
        assert failure.messages == ("Expected an integer", "Expected a float")


# ============================================================================
# WHITESPACE AND LINE ENDINGS
# ============================================================================


class TestWhitespace:
    """Test whitespace and line-ending parsers."""

    def test_whitespace_consumes_mixed_run(self) -> None:
        result = whitespace().parse(" \t\r\n x")

        assert result.value == " \t\r\n "
        assert result.cursor.offset == 5

    def test_whitespace_may_be_empty(self) -> None:
        result = whitespace().parse("x")

        assert result.value == ""
        assert result.cursor.offset == 0

    def test_whitespace_at_least_once(self) -> None:
        assert whitespace(at_least_once=True).parse("x").messages == ("Expected whitespace",)
        assert whitespace(at_least_once=True).parse("  x").value == "  "

    @pytest.mark.parametrize(
        ("parser", "source", "message"),
        [
            (space(), " ", "Expected space"),
            (tab(), "\t", "Expected tab"),
            (newline(), "\n", "Expected newline"),
        ],
    )
    def test_single_characters(self, parser, source: str, message: str) -> None:
        assert parser.parse(source).value == source
        assert parser.parse("x").messages == (message,)

    def test_crlf_normalizes_to_newline(self) -> None:
        result = crlf().parse("\r\nx")

        assert result.value == "\n"
        assert result.cursor.offset == 2

    def test_crlf_failure(self) -> None:
        assert crlf().parse("\n").messages == ("Expected crlf",)

    @pytest.mark.parametrize(("source", "consumed"), [("\n", 1), ("\r\n", 2)])
    def test_eol(self, source: str, consumed: int) -> None:
        result = eol().parse(source)

        assert result.value == "\n"
        assert result.cursor.offset == consumed

    def test_eol_failure_lists_both_endings(self) -> None:
        assert eol().parse("x").messages == ("Expected newline", "Expected crlf")
