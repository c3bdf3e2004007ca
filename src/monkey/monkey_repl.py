"""
Interactive read-parse-print loop for Monkey.

Each line entered is lexed and parsed on its own; the REPL prints either the
fully parenthesized rendering of the program or the parser's error list.

Commands:
    exit, quit: leave the REPL.
    tokens: toggle token-dump mode (print the token stream instead of the tree).
"""

import logging

from monkey.monkey_lexer import Lexer, tokenize
from monkey.monkey_parser import Parser

logger = logging.getLogger(__name__)

PROMPT = ">> "


def print_parser_errors(errors: list[str]) -> None:
    print("[error] >>> parser errors:")
    for msg in errors:
        print(f"\t{msg}")


def eval_line(src: str, show_tokens: bool = False) -> None:
    """Parse one line of input and print the result."""
    if show_tokens:
        for tok in tokenize(src):
            print(tok)
        return

    parser = Parser(Lexer(src))
    program = parser.parse_program()
    if parser.errors:
        print_parser_errors(parser.errors)
        return
    print(program)


def start_repl(show_tokens: bool = False) -> None:
    print("Monkey REPL. Type 'exit' or 'quit' to leave.")
    while True:
        try:
            line = input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            print()
            print("Exiting Monkey REPL.")
            return

        src = line.strip()
        if not src:
            continue
        if src in ("exit", "quit"):
            print("Exiting Monkey REPL.")
            return
        if src == "tokens":
            show_tokens = not show_tokens
            print(f"[mode] >>> Token mode {'ON' if show_tokens else 'OFF'}")
            continue

        logger.debug("repl input: %r", src)
        eval_line(src, show_tokens=show_tokens)


__all__ = ["eval_line", "print_parser_errors", "start_repl"]
