"""
Monkey CLI Entrypoint.

This module provides the command-line interface for the Monkey front end. It lexes
and parses source code and prints the resulting tree, and can launch the REPL.

Features:
    - Read source from `.monkey` files or inline strings.
    - Print the fully parenthesized rendering, the token stream, or JSON.
    - Output to console or file.
    - Report parse errors on stderr with a non-zero exit status.
    - Launch an interactive REPL.

Example usage:
    monkey hello.monkey
    monkey -s "let x = 1 + 2 * 3;"
    monkey -s "a + b" --tokens
    monkey prog.monkey --json -o prog.json
    monkey --repl --verbose

Environment:
    MONKEY_LOG_LEVEL: Log level used when `--verbose` is not given (default WARNING).

Functions:
    configure_logging(verbose: bool = False) -> None
    run_monkey(source, is_string=False, tokens=False, as_json=False, out=None, strict=False) -> int
    main(argv: list[str] | None = None) -> int
"""

import argparse
import json
import logging
import os
import sys

from monkey.monkey_lexer import Lexer, tokenize
from monkey.monkey_parser import Parser, ParserError

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "MONKEY_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """
    Configure root logging once for the CLI process.

    Args:
        verbose (bool): Force DEBUG level. Otherwise MONKEY_LOG_LEVEL is used.
    """
    if verbose:
        level: int | str = logging.DEBUG
    else:
        level = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
        if not isinstance(logging.getLevelName(level), int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def run_monkey(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    as_json: bool = False,
    out: str | None = None,
    strict: bool = False,
) -> int:
    """
    Run the Monkey front end: lex, parse, and write the result.

    Args:
        source (str): Monkey source code or path to a `.monkey` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): If True, print the token stream instead of the tree.
        as_json (bool): If True, print the tree as JSON instead of its rendering.
        out (str | None): Optional path to write the output to. If None, prints to stdout.
        strict (bool): If True, raise ParserError instead of reporting errors.

    Returns:
        int: 0 on a clean parse, 1 if the parser recorded errors.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.monkey'.
        ParserError: If `strict` is True and the parser recorded errors.
    """
    if not is_string and not source.endswith(".monkey"):
        raise ValueError("Only .monkey files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if tokens:
        text = "\n".join(f"{tok.type}\t{tok.literal}" for tok in tokenize(source))
        _write(text, out)
        return 0

    parser = Parser(Lexer(source))
    program = parser.parse_program()
    errors = parser.errors

    if errors:
        if strict:
            raise ParserError(errors)
        for msg in errors:
            print(f"parser error: {msg}", file=sys.stderr)
        return 1

    if as_json:
        text = json.dumps(program.to_dict(), indent=2)
    else:
        text = str(program)
    _write(text, out)
    return 0


def _write(text: str, out: str | None) -> None:
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info("wrote %s", out)
    else:
        print(text)


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Monkey CLI.

    Launches the REPL if no arguments are passed or `--repl` is specified, otherwise
    runs the lexer and parser over the given source.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print the token stream.
        - `--json`: Print the parsed tree as JSON.
        - `-o`, `--out`: Write output to a file.
        - `--strict`: Raise on parse errors instead of reporting them.
        - `--repl`: Launch the interactive REPL.
        - `-v`, `--verbose`: Enable debug logging.
    """
    args_list = sys.argv[1:] if argv is None else argv
    parser = argparse.ArgumentParser(prog="monkey")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--tokens", action="store_true", help="Print tokens instead of the tree"
    )
    output.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the tree as JSON"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--strict", action="store_true", help="Raise on the first failed parse"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL instead of parsing"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(args_list)
    configure_logging(args.verbose)

    if args.repl or args.source is None:
        from monkey.monkey_repl import start_repl

        start_repl(show_tokens=args.tokens)
        return 0

    return run_monkey(
        source=args.source,
        is_string=args.string,
        tokens=args.tokens,
        as_json=args.as_json,
        out=args.out,
        strict=args.strict,
    )


if __name__ == "__main__":
    sys.exit(main())
