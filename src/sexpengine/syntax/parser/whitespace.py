"""Whitespace and line-ending parsers.

The grammar treats any run of whitespace (``\\s``, including newlines) as
insignificant between tokens. Line endings matter only to line comments,
which end at ``\\n``, ``\\r\\n`` or end of input.
"""

from sexpengine.syntax.parser.combinators import (
    Parser,
    literal,
    map_error_to,
    map_to,
    or_,
    pattern,
)
from sexpengine.syntax.parser.primitives import char

__all__ = ["crlf", "eol", "newline", "space", "tab", "whitespace"]


def whitespace(*, at_least_once: bool = False) -> Parser[str]:
    """Match a run of whitespace characters.

    Args:
        at_least_once: Require at least one character. When False the
            parser never fails and may consume nothing.
    """
    regex = r"\s+" if at_least_once else r"\s*"
    return map_error_to(pattern(regex), "Expected whitespace")


def space() -> Parser[str]:
    return map_error_to(char(" "), "Expected space")


def tab() -> Parser[str]:
    return map_error_to(char("\t"), "Expected tab")


def newline() -> Parser[str]:
    return map_error_to(char("\n"), "Expected newline")


def crlf() -> Parser[str]:
    """Match ``\\r\\n``, normalized to ``\\n``."""
    return map_error_to(map_to(literal("\r\n"), "\n"), "Expected crlf")


def eol() -> Parser[str]:
    """Match a line ending (``\\n`` or ``\\r\\n``), yielding ``\\n``."""
    return or_(newline(), crlf())
