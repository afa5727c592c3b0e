"""Command-line AST dumper.

Parses an S-expression source file and prints its tree as tagged-record
JSON (or as normalized source). On failure the diagnostic goes to stderr.

Usage:
    sexpengine program.sexp
    sexpengine --strip-comments --spans program.sexp
    sexpengine --output sexp program.sexp
    cat program.sexp | sexpengine -

Exit Codes:
    0   Parsed successfully
    1   Syntax error, or nesting too deep to parse or walk
    2   File read error

Python 3.13+.
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from sexpengine.diagnostics import DiagnosticFormatter, OutputFormat, SexpError, SexpSyntaxError
from sexpengine.syntax import SexpParser, serialize, strip_comments, to_json
from sexpengine.syntax.position import format_failure

__all__ = ["main"]

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sexpengine",
        description="Parse S-expression source and print its syntax tree.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Dump the tree as JSON:
  sexpengine program.sexp

  # Drop comments and include source offsets:
  sexpengine --strip-comments --spans program.sexp

  # Machine-readable diagnostics:
  sexpengine --format json broken.sexp
""",
    )
    parser.add_argument(
        "file",
        help="Source file to parse ('-' reads stdin)",
    )
    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.RUST.value,
        help="Diagnostic format on failure (default: rust)",
    )
    parser.add_argument(
        "--output",
        choices=["json", "sexp"],
        default="json",
        help="Print the tree as tagged-record JSON or as normalized source (default: json)",
    )
    parser.add_argument(
        "--strip-comments",
        action="store_true",
        help="Remove block and line comments from the tree",
    )
    parser.add_argument(
        "--spans",
        action="store_true",
        help="Include source offsets in JSON output",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )
    parser.add_argument(
        "--max-nesting-depth",
        type=int,
        default=None,
        help="Deepest allowed list nesting (default: derived from the recursion limit)",
    )
    parser.add_argument(
        "--color",
        action="store_true",
        help="Colorize diagnostics with ANSI escapes",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log parser activity to stderr",
    )
    return parser


def _read_source(name: str) -> str:
    """Read source text from a path, or from stdin for '-'.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def _report(error: SexpError, source: str, args: argparse.Namespace) -> None:
    """Print a parse or depth error to stderr in the requested format."""
    if error.diagnostic is None:
        print(str(error), file=sys.stderr)
        return

    output_format = OutputFormat(args.format)
    formatter = DiagnosticFormatter(output_format=output_format, color=args.color)
    print(formatter.format(error.diagnostic, source), file=sys.stderr)

    if (
        output_format is OutputFormat.SIMPLE
        and isinstance(error, SexpSyntaxError)
        and error.failure is not None
    ):
        print(format_failure(error.failure, color=args.color), file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        source = _read_source(args.file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"[ERROR] Cannot read {args.file}: {e}", file=sys.stderr)
        return 2

    parser = SexpParser(max_nesting_depth=args.max_nesting_depth)
    try:
        program = parser.parse(source)
        if args.strip_comments:
            program = strip_comments(program)
        if args.output == "sexp":
            rendered = serialize(program, validate=False)
        else:
            rendered = to_json(program, include_spans=args.spans, indent=args.indent) + "\n"
    except SexpError as e:
        logger.debug("Processing %s failed: %s", args.file, type(e).__name__)
        _report(e, source, args)
        return 1
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    sys.stdout.write(rendered)
    return 0


if __name__ == "__main__":
    sys.exit(main())
