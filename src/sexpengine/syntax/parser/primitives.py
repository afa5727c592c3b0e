"""Character and number primitives built on the combinator catalog.

Every primitive replaces the generic pattern/predicate failure with a
domain-level message, so grammar errors read "Expected an integer" rather
than quoting a regular expression.
"""

import re

from sexpengine.syntax.parser.combinators import (
    Parser,
    map_,
    map_error_to,
    pattern,
    satisfy,
)

__all__ = [
    "any_char",
    "char",
    "digit",
    "digit_char",
    "float_",
    "hex_digit",
    "integer",
    "letter",
    "lower",
    "none_of",
    "oct_digit",
    "one_of",
    "upper",
]

# Integer part shared by integer() and float_(): "0" or no leading zeros.
_INTEGER_PART: str = r"[+-]?(?:0|[1-9][0-9]*)"

# The lookahead refuses a match that is really the head of a float ("3.14")
# or of a zero-padded number ("007"), so choice(integer(), float_()) stays
# correct and "007" is not read as 0 followed by 07.
_INTEGER_RE: re.Pattern[str] = re.compile(_INTEGER_PART + r"(?![.0-9])")
_FLOAT_RE: re.Pattern[str] = re.compile(_INTEGER_PART + r"\.[0-9]+")


# =============================================================================
# Characters
# =============================================================================


def char(expected: str) -> Parser[str]:
    """Match exactly one given character."""
    return map_error_to(satisfy(lambda c: c == expected), f'Expected "{expected}"')


def any_char() -> Parser[str]:
    """Match any single character; fails only at end of input."""
    return map_error_to(satisfy(lambda _: True), "Expected any character")


def one_of(chars: str) -> Parser[str]:
    """Match one character contained in chars."""
    allowed = frozenset(chars)
    return map_error_to(satisfy(allowed.__contains__), f'Expected one character of "{chars}"')


def none_of(chars: str) -> Parser[str]:
    """Match one character NOT contained in chars."""
    rejected = frozenset(chars)
    return map_error_to(
        satisfy(lambda c: c not in rejected), f'Expected no character of "{chars}"'
    )


def lower() -> Parser[str]:
    return map_error_to(pattern(r"[a-z]"), "Expected a lowercase character")


def upper() -> Parser[str]:
    return map_error_to(pattern(r"[A-Z]"), "Expected an uppercase character")


def letter() -> Parser[str]:
    return map_error_to(pattern(r"[a-zA-Z]"), "Expected a letter")


def digit_char() -> Parser[str]:
    """Match one ASCII decimal digit, yielding it as a string."""
    return map_error_to(pattern(r"[0-9]"), "Expected a decimal digit")


def oct_digit() -> Parser[str]:
    return map_error_to(pattern(r"[0-7]"), "Expected an octal digit")


def hex_digit() -> Parser[str]:
    return map_error_to(pattern(r"[a-fA-F0-9]"), "Expected a hexadecimal digit")


# =============================================================================
# Numbers
# =============================================================================


def integer() -> Parser[int]:
    """Match an optionally signed decimal integer.

    Accepted: ``0``, ``42``, ``-7``, ``+3``.
    Rejected: ``007`` (redundant leading zero), ``3.14`` (a float).

    Example:
        >>> integer().parse("-12)").value
        -12
    """
    return map_error_to(map_(pattern(_INTEGER_RE), int), "Expected an integer")


def float_() -> Parser[float]:
    """Match an optionally signed decimal with a fractional part.

    Exponents and a bare leading or trailing dot (``.5``, ``5.``) are not
    accepted.
    """
    return map_error_to(map_(pattern(_FLOAT_RE), float), "Expected a float")


def digit() -> Parser[int]:
    """Match one ASCII decimal digit, yielding its integer value."""
    return map_error_to(map_(pattern(r"[0-9]"), int), "Expected a digit")
