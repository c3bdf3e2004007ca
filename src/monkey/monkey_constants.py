"""
Token kinds and lookup tables shared by the Monkey lexer and parser.

Operators and delimiters use their literal text as their kind, so the lexer
can emit them straight from the matched lexeme. Keywords are resolved through
``keywords`` by ``lookup_ident``.

Exports:
    - token kind constants (EOF, ILLEGAL, IDENT, INT, ASSIGN, ...)
    - TOKEN_TYPES: the closed set of kinds
    - keywords: read-only keyword table
    - operator_tokens: single-character operator/delimiter kinds
    - lookup_ident()
"""

from types import MappingProxyType

ILLEGAL = "ILLEGAL"
EOF = "EOF"

# Identifiers + literals
IDENT = "IDENT"
INT = "INT"

# Operators
ASSIGN = "="
PLUS = "+"
MINUS = "-"
BANG = "!"
ASTERISK = "*"
SLASH = "/"
LT = "<"
GT = ">"
EQ = "=="
NOT_EQ = "!="

# Delimiters
COMMA = ","
SEMICOLON = ";"
LPAREN = "("
RPAREN = ")"
LBRACE = "{"
RBRACE = "}"

# Keywords
FUNCTION = "FUNCTION"
LET = "LET"
TRUE = "TRUE"
FALSE = "FALSE"
IF = "IF"
ELSE = "ELSE"
RETURN = "RETURN"

keywords = MappingProxyType(
    {
        "fn": FUNCTION,
        "let": LET,
        "true": TRUE,
        "false": FALSE,
        "if": IF,
        "else": ELSE,
        "return": RETURN,
    }
)

# Kinds the lexer matches from a single character.
operator_tokens = (
    SEMICOLON,
    LPAREN,
    RPAREN,
    COMMA,
    PLUS,
    MINUS,
    SLASH,
    ASTERISK,
    LT,
    GT,
    LBRACE,
    RBRACE,
)

TOKEN_TYPES = frozenset(
    {
        ILLEGAL,
        EOF,
        IDENT,
        INT,
        ASSIGN,
        BANG,
        EQ,
        NOT_EQ,
        *operator_tokens,
        *keywords.values(),
    }
)


def lookup_ident(ident: str) -> str:
    """Returns the keyword kind for ``ident``, or IDENT if it is not reserved."""
    return keywords.get(ident, IDENT)


__all__ = [
    "ASSIGN",
    "ASTERISK",
    "BANG",
    "COMMA",
    "ELSE",
    "EOF",
    "EQ",
    "FALSE",
    "FUNCTION",
    "GT",
    "IDENT",
    "IF",
    "ILLEGAL",
    "INT",
    "LBRACE",
    "LET",
    "LPAREN",
    "LT",
    "MINUS",
    "NOT_EQ",
    "PLUS",
    "RBRACE",
    "RETURN",
    "RPAREN",
    "SEMICOLON",
    "SLASH",
    "TOKEN_TYPES",
    "TRUE",
    "keywords",
    "lookup_ident",
    "operator_tokens",
]
