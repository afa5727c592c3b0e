"""sexpengine - Parser-combinator engine and S-expression grammar.

A small, generic parser-combinator library (immutable cursor, ordered choice
with backtracking, repetition, lazy recursion, accumulated error messages)
and the recursive grammar built on it, turning S-expression source into an
abstract syntax tree for downstream code generators.

Public API:
    parse_program - Parse source text to a Program
    serialize - Serialize a Program back to source
    to_dict / to_json - Tagged-record interchange shape
    strip_comments - Remove comment nodes from a tree
    SexpParser - Configurable parser (size and nesting limits)

Exceptions:
    SexpError - Base exception class
    SexpSyntaxError - Parse errors (messages, line, column, diagnostic)
    DepthLimitExceededError - Nesting or traversal limit exceeded

Submodules:
    sexpengine.syntax.ast - AST node types
    sexpengine.syntax.parser.combinators - The combinator catalog
    sexpengine.diagnostics - Diagnostic codes, templates and formatting
"""

from .core.depth_guard import DepthLimitExceededError
from .diagnostics import SexpError, SexpSyntaxError
from .syntax import SexpParser, parse_program, serialize, strip_comments, to_dict, to_json

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("sexpengine")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "DepthLimitExceededError",
    "SexpError",
    "SexpParser",
    "SexpSyntaxError",
    "__version__",
    "parse_program",
    "serialize",
    "strip_comments",
    "to_dict",
    "to_json",
]
