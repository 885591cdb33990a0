"""
vvlang CLI Entrypoint.

This module provides the command-line interface for the vvlang front end.
It parses source files or inline strings and prints the resulting program,
token stream, or JSON AST, and can launch the interactive REPL.

Example usage:
    vvlang
    vvlang program.vv
    vvlang -s "let x = 5;" --json
    vvlang -s "let x = 5;" --tokens
    vvlang --repl --verbose

Environment:
    VVLANG_LOG_LEVEL: default logging level (e.g. DEBUG, INFO). Overridden by --verbose.

Exit status:
    0 on success, 1 when the source produced diagnostics, 2 when the source is empty.

Functions:
    run_vvlang(source: str, is_string: bool = False, tokens: bool = False, as_json: bool = False) -> int:
        Lexes or parses the source and prints the result.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or run).
"""

import argparse
import logging
import os
import sys

from vvlang.vv_ast import to_json
from vvlang.vv_lexer import Lexer
from vvlang.vv_parser import Parser

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    level_name = "DEBUG" if verbose else os.getenv("VVLANG_LOG_LEVEL", "WARNING")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr
    )
    logging.getLogger("vvlang").setLevel(level)


def run_vvlang(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    as_json: bool = False,
) -> int:
    """
    Run the vvlang front end over a file or string and print the result.

    Args:
        source (str): The vvlang source code or path to a `.vv` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): If True, prints the token stream instead of parsing.
        as_json (bool): If True, prints the parsed program as JSON.

    Returns:
        int: 0 on success, 1 if the parser reported diagnostics.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.vv'.
        EmptySourceError: If the source text is empty.
    """
    if not is_string and not source.endswith(".vv"):
        raise ValueError("Only .vv files are supported.")
    if not is_string:
        logger.debug("reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if tokens:
        for tok in Lexer(source, emit_newlines=True):
            print(repr(tok))
        return 0

    parser = Parser(source)
    program = parser.parse_program()
    logger.debug(
        "parsed %d statements, %d diagnostics",
        len(program.statements),
        len(parser.diagnostics),
    )

    if as_json:
        print(to_json(program))
    elif program.statements:
        print(program)

    if parser.diagnostics:
        parser.report_errors()
        return 1
    return 0


def main() -> None:
    """
    Entry point for the vvlang CLI.

    Launches the REPL if no arguments are passed or `--repl` is specified,
    otherwise parses the given file or string.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print the token stream instead of the parsed program.
        - `--json`: Print the parsed program as JSON.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Enable DEBUG logging.
    """
    if len(sys.argv) == 1:
        # No args passed: open REPL instead
        from vvlang.vv_repl import start_repl

        configure_logging()
        start_repl()
        return
    parser = argparse.ArgumentParser(prog="vvlang")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print tokens instead of the program"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the AST as JSON"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of parsing",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    configure_logging(args.verbose)

    if args.repl or args.source is None:
        from vvlang.vv_repl import start_repl

        start_repl(
            mode="tokens" if args.tokens else "program",
            verbose=args.verbose,
            as_json=args.as_json,
        )
        return

    try:
        status = run_vvlang(
            source=args.source,
            is_string=args.string,
            tokens=args.tokens,
            as_json=args.as_json,
        )
    except (ValueError, OSError) as e:  # EmptySourceError is a ValueError
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)
    sys.exit(status)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
