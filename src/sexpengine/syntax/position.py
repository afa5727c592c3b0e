"""Position utilities and failure reports for S-expression source.

Converts character offsets into line/column pairs for error reporting and
renders a terminal ParseFailure into a human-readable report.

Line endings: LF and CRLF terminate a line. A bare CR is ordinary line
content.
"""

import re

from .cursor import Cursor, ParseFailure

__all__ = [
    "format_failure",
    "format_position",
    "get_error_context",
    "get_line_content",
    "line_column",
    "position_of",
]

# Split after every LF, so each piece keeps its own terminator ("\n" or "\r\n").
_LINE_SPLIT = re.compile(r"(?<=\n)")

_CYAN = "\033[36m"
_RED = "\033[31m"
_RESET = "\033[0m"


def line_column(source: str, offset: int) -> tuple[int, int]:
    """Get 1-based (line, column) for a character offset.

    Walks the lines of source, subtracting each line's length (terminator
    included) until the line containing offset is found. A position inside a
    line terminator belongs to the line it terminates; the end-of-input
    position belongs to the last line.

    Args:
        source: Complete source text
        offset: Character offset into source

    Returns:
        (line, column), both 1-based, or (0, 0) if offset lies beyond the
        end of source

    Raises:
        ValueError: If offset is negative

    Example:
        >>> line_column("ab\\ncd", 0)
        (1, 1)
        >>> line_column("ab\\ncd", 3)
        (2, 1)
        >>> line_column("ab\\r\\ncd", 5)
        (2, 2)
        >>> line_column("ab", 7)
        (0, 0)
    """
    if offset < 0:
        msg = f"Position must be >= 0, got {offset}"
        raise ValueError(msg)

    column = offset
    pieces = _LINE_SPLIT.split(source)
    last = len(pieces) - 1
    for index, piece in enumerate(pieces):
        if column < len(piece) or (index == last and column <= len(piece)):
            return (index + 1, column + 1)
        column -= len(piece)
    return (0, 0)


def position_of(cursor: Cursor) -> tuple[int, int]:
    """Get 1-based (line, column) of a cursor against its original text."""
    return line_column(cursor.source, cursor.offset)


def format_position(source: str, offset: int) -> str:
    """Format offset as a human-readable ``line:column`` string.

    Example:
        >>> format_position("hello\\nworld", 6)
        '2:1'
    """
    line, column = line_column(source, offset)
    return f"{line}:{column}"


def get_line_content(source: str, line_number: int) -> str:
    """Extract the content of a 1-based line, without its terminator.

    Raises:
        ValueError: If line_number is out of range

    Example:
        >>> get_line_content("hello\\r\\nworld", 1)
        'hello'
    """
    lines = _LINE_SPLIT.split(source)
    if not 1 <= line_number <= len(lines):
        msg = f"Line {line_number} out of range (source has {len(lines)} lines)"
        raise ValueError(msg)
    return lines[line_number - 1].removesuffix("\n").removesuffix("\r")


def get_error_context(source: str, offset: int, context_lines: int = 2, marker: str = "^") -> str:
    """Get formatted error context showing position in source.

    Creates a multi-line string showing the error location with
    surrounding numbered lines and a marker under the error column.

    Example:
        >>> print(get_error_context("(a)\\n(b\\n(c)", 6, context_lines=1))
           1 | (a)
           2 | (b
             |   ^
           3 | (c)
    """
    line, column = line_column(source, offset)
    if line == 0:
        return ""

    total = len(_LINE_SPLIT.split(source))
    start_line = max(1, line - context_lines)
    end_line = min(total, line + context_lines)

    context = []
    for number in range(start_line, end_line + 1):
        prefix = f"{number:4} | "
        context.append(prefix + get_line_content(source, number))
        if number == line:
            context.append(" " * (len(prefix) - 2) + "| " + " " * (column - 1) + marker)
    return "\n".join(context)


def format_failure(failure: ParseFailure, *, color: bool = False) -> str:
    """Render a terminal failure as a report.

    Example:
        >>> failure = ParseFailure(("Expected end of input",), Cursor("(a) b", 4))
        >>> print(format_failure(failure))
        There was an error at position 1:5
        <BLANKLINE>
          - Expected end of input
    """
    line, column = position_of(failure.cursor)
    position = f"{line}:{column}"
    if color:
        position = f"{_CYAN}{position}{_RESET}"
    bullets = [
        f"  - {_RED}{message}{_RESET}" if color else f"  - {message}"
        for message in failure.messages
    ]
    return "\n".join([f"There was an error at position {position}", "", *bullets])
