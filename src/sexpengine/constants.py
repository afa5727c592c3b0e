"""Shared constants for sexpengine.

Centralized configuration constants used across the syntax and core
packages. Placing constants here avoids circular imports and provides a
single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for parsing and AST traversal
- Input limits: DoS prevention via size constraints

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    "FRAMES_PER_NESTING_LEVEL",
    "RECURSION_RESERVE_FRAMES",
    # Input limits
    "MAX_SOURCE_SIZE",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================
#
# Two subsystems recurse proportionally to list nesting:
#
# 1. GRAMMAR (syntax/parser/rules.py):
#    Every nested "(...)" re-enters list_item -> expression -> list_expression
#    through a chain of combinator calls. Repetition itself is iterative, so
#    only nesting consumes interpreter frames.
#
# 2. VISITORS (syntax/visitor.py, syntax/serializer.py):
#    One guarded frame group per AST level.
#
# Both use MAX_DEPTH as the requested ceiling. The grammar additionally clamps
# it against sys.getrecursionlimit(), because one nesting level costs roughly
# FRAMES_PER_NESTING_LEVEL interpreter frames.
#
# ============================================================================

# Requested maximum depth for recursion protection.
MAX_DEPTH: int = 100

# Interpreter frames consumed by one level of list nesting in the grammar
# (deferred resolution, whitespace wrapping, choice, between, many).
FRAMES_PER_NESTING_LEVEL: int = 32

# Frames left for the caller's own stack (test runners, CLI, embedding code).
RECURSION_RESERVE_FRAMES: int = 150

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum source size in characters (10 MB).
# Prevents DoS attacks via unbounded memory allocation from large sources.
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024
