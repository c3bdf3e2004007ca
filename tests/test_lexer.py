import pytest
from hypothesis import given
from hypothesis import strategies as st

from monkey.monkey_constants import TOKEN_TYPES, keywords, lookup_ident
from monkey.monkey_lexer import (
    EOF_CHAR,
    CharacterStream,
    Lexer,
    LexerError,
    LexState,
    Token,
    tokenize,
)


def types_of(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


def test_delimiters_and_operators() -> None:
    assert types_of("=+(){},;") == [
        "=",
        "+",
        "(",
        ")",
        "{",
        "}",
        ",",
        ";",
        "EOF",
    ]


def test_single_char_operators() -> None:
    tokens = tokenize("- / * < > !")
    assert [(t.type, t.literal) for t in tokens[:-1]] == [
        ("-", "-"),
        ("/", "/"),
        ("*", "*"),
        ("<", "<"),
        (">", ">"),
        ("!", "!"),
    ]


def test_two_char_operators_are_greedy() -> None:
    tokens = tokenize("10 == 10; 10 != 9;")
    assert tokens == [
        Token("INT", "10"),
        Token("==", "=="),
        Token("INT", "10"),
        Token(";", ";"),
        Token("INT", "10"),
        Token("!=", "!="),
        Token("INT", "9"),
        Token(";", ";"),
        Token("EOF", ""),
    ]


def test_bang_and_assign_standalone() -> None:
    assert types_of("!x = y") == ["!", "IDENT", "=", "IDENT", "EOF"]
    assert types_of("=!") == ["=", "!", "EOF"]
    assert types_of("!!=") == ["!", "!=", "EOF"]


def test_let_statement_tokens() -> None:
    tokens = tokenize("let five = 5;")
    assert tokens == [
        Token("LET", "let"),
        Token("IDENT", "five"),
        Token("=", "="),
        Token("INT", "5"),
        Token(";", ";"),
        Token("EOF", ""),
    ]


def test_full_program_tokens() -> None:
    source = """let add = fn(x, y) {
  x + y;
};
if (5 < 10) {
    return true;
} else {
    return false;
}
"""
    assert types_of(source) == [
        "LET", "IDENT", "=", "FUNCTION", "(", "IDENT", ",", "IDENT", ")", "{",
        "IDENT", "+", "IDENT", ";",
        "}", ";",
        "IF", "(", "INT", "<", "INT", ")", "{",
        "RETURN", "TRUE", ";",
        "}", "ELSE", "{",
        "RETURN", "FALSE", ";",
        "}",
        "EOF",
    ]  # fmt: skip


@pytest.mark.parametrize(  # type: ignore[misc]
    "word,expected",
    [
        ("fn", "FUNCTION"),
        ("let", "LET"),
        ("true", "TRUE"),
        ("false", "FALSE"),
        ("if", "IF"),
        ("else", "ELSE"),
        ("return", "RETURN"),
        ("foobar", "IDENT"),
        ("Let", "IDENT"),
        ("_under_score", "IDENT"),
    ],
)
def test_keyword_lookup(word: str, expected: str) -> None:
    assert lookup_ident(word) == expected
    assert tokenize(word)[0] == Token(expected, word)


def test_keyword_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        keywords["while"] = "WHILE"  # type: ignore[index]


def test_identifiers_stop_at_digits() -> None:
    assert tokenize("x1") == [Token("IDENT", "x"), Token("INT", "1"), Token("EOF", "")]


def test_sign_is_separate_token() -> None:
    assert tokenize("-15") == [Token("-", "-"), Token("INT", "15"), Token("EOF", "")]


def test_bad_number_syntax() -> None:
    tokens = tokenize("12abc")
    assert len(tokens) == 2
    illegal, eof = tokens
    assert illegal.type == "ILLEGAL"
    assert "bad number syntax" in illegal.literal
    assert "12abc" in illegal.literal
    assert eof.type == "EOF"


def test_bad_number_resumes_scanning() -> None:
    tokens = tokenize("let x = 3four; y")
    assert [t.type for t in tokens] == ["LET", "IDENT", "=", "ILLEGAL", ";", "IDENT", "EOF"]


def test_illegal_character() -> None:
    tokens = tokenize("a @ b")
    assert tokens[1].type == "ILLEGAL"
    assert tokens[1].literal == "illegal character: '@'"
    assert tokens[2] == Token("IDENT", "b")
    assert tokens[-1].type == "EOF"


def test_non_ascii_letters_are_illegal() -> None:
    tokens = tokenize("é")
    assert tokens[0].type == "ILLEGAL"
    assert "é" in tokens[0].literal


@pytest.mark.parametrize("source", ["", " ", "\t\n", "  \r\n \x0b\x0c "])  # type: ignore[misc]
def test_whitespace_only_yields_single_eof(source: str) -> None:
    assert tokenize(source) == [Token("EOF", "")]


def test_eof_repeats_forever() -> None:
    lexer = Lexer("x")
    assert lexer.next_token() == Token("IDENT", "x")
    for _ in range(5):
        assert lexer.next_token() == Token("EOF", "")
    assert lexer.state is LexState.DONE


def test_lexer_iterates_without_eof() -> None:
    assert list(Lexer("a + 1")) == [
        Token("IDENT", "a"),
        Token("+", "+"),
        Token("INT", "1"),
    ]


def test_token_repr_eq_hash() -> None:
    t1 = Token("INT", "42")
    t2 = Token("INT", "42")
    t3 = Token("IDENT", "x")

    assert repr(t1) == "Token(INT, 42)"
    assert t1 == t2
    assert t1 != t3
    assert len({t1, t2, t3}) == 2


def test_token_is_immutable() -> None:
    tok = Token("INT", "1")
    with pytest.raises(AttributeError):
        tok.literal = "2"  # type: ignore[misc]


def test_character_stream_methods() -> None:
    stream = CharacterStream("ab")
    assert stream.peek() == "a"
    assert stream.next() == "a"
    assert stream.width == 1
    stream.backup()
    assert stream.position == 0
    assert stream.accept("xa")
    assert not stream.accept("xyz")
    assert stream.lexeme() == "a"
    stream.ignore()
    assert stream.start == stream.position == 1
    stream.accept_run("b")
    assert stream.end_of_file()
    assert stream.next() == EOF_CHAR
    assert stream.width == 0


def test_character_stream_double_backup_raises() -> None:
    stream = CharacterStream("abc")
    stream.next()
    stream.backup()
    with pytest.raises(LexerError, match="backup without a preceding read"):
        stream.backup()


def test_accept_never_matches_end_of_input() -> None:
    stream = CharacterStream("")
    assert not stream.accept("abc")
    assert stream.position == 0


@given(st.text(max_size=100))  # type: ignore[misc]
def test_lexer_does_not_crash_on_random_input(text: str) -> None:
    tokens = tokenize(text)
    assert tokens[-1].type == "EOF"
    assert all(tok.type in TOKEN_TYPES for tok in tokens)
    assert [tok.type for tok in tokens].count("EOF") == 1


@given(st.text(alphabet="abc_xyz019 =!+-*/<>(){},;", max_size=60))  # type: ignore[misc]
def test_lexemes_reassemble_source(text: str) -> None:
    tokens = tokenize(text)
    if any(tok.type == "ILLEGAL" for tok in tokens):
        return
    assert "".join(tok.literal for tok in tokens) == "".join(text.split())


@given(st.text(alphabet=" \t\r\n", max_size=30))  # type: ignore[misc]
def test_whitespace_property(text: str) -> None:
    lexer = Lexer(text)
    assert lexer.next_token() == Token("EOF", "")
