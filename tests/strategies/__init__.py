"""Hypothesis strategies for sexpengine property-based testing.

Usage:
    from tests.strategies import identifiers, program_nodes
"""

from .sexp import (
    IDENTIFIER_FIRST_CHARS,
    IDENTIFIER_REST_CHARS,
    WHITESPACE_CHARS,
    atom_nodes,
    block_comment_contents,
    comment_nodes,
    decimal_floats,
    finite_floats,
    identifier_nodes,
    identifiers,
    line_comment_contents,
    list_expression_nodes,
    nested_list_source,
    numeric_literal_nodes,
    program_depth,
    program_nodes,
    string_contents,
    string_literal_nodes,
    whitespace_runs,
)

__all__ = [
    "IDENTIFIER_FIRST_CHARS",
    "IDENTIFIER_REST_CHARS",
    "WHITESPACE_CHARS",
    "atom_nodes",
    "block_comment_contents",
    "comment_nodes",
    "decimal_floats",
    "finite_floats",
    "identifier_nodes",
    "identifiers",
    "line_comment_contents",
    "list_expression_nodes",
    "nested_list_source",
    "numeric_literal_nodes",
    "program_depth",
    "program_nodes",
    "string_contents",
    "string_literal_nodes",
    "whitespace_runs",
]
