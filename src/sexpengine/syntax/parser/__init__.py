"""S-expression parser module.

This module provides the SexpParser class and the combinator engine it is
built from, organized into focused submodules.

Module Organization:
- combinators.py: Parser abstraction and the generic combinator catalog
- primitives.py: Character and number parsers
- whitespace.py: Whitespace and line-ending parsers
- rules.py: Grammar rules (comments, atoms, lists, program)
- core.py: Main SexpParser class and parse() entry point

Public API:
    SexpParser: Main parser class
    Grammar: Rule set for one parse (advanced usage)
"""

from sexpengine.syntax.parser.core import SexpParser
from sexpengine.syntax.parser.rules import Grammar

__all__ = ["Grammar", "SexpParser"]
