import pytest

from monkey.monkey_ast import Program
from monkey.monkey_lexer import Lexer
from monkey.monkey_parser import Parser


def parse_checked(source: str) -> Program:
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    assert parser.errors == [], f"parser errors for {source!r}: {parser.errors}"
    return program


@pytest.fixture  # type: ignore[misc]
def parse_errors() -> object:
    def _parse(source: str) -> tuple[Program, list[str]]:
        parser = Parser(Lexer(source))
        program = parser.parse_program()
        return program, parser.errors

    return _parse
