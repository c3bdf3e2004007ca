"""
Lexical analyzer for the Monkey programming language.

This module converts raw source text into a stream of classified tokens, one at a
time, on demand:

Classes:
    CharacterStream: Cursor over the source with single-character backup.
    Token: Immutable (type, literal) pair produced by the lexer.
    LexState: Scanning modes of the lexer state machine.
    Lexer: Drives the state machine and hands out tokens in source order.

Features:
    - Skips whitespace
    - Greedy recognition of the two-character operators `==` and `!=`
    - Recognizes:
        * Identifiers and keywords (ASCII letters and `_`)
        * Integer literals (digit runs, sign is a separate token)
        * Single-character operators and delimiters

Lexical errors never raise. They surface as ILLEGAL tokens whose literal is a
readable message, and scanning resumes just past the offending input.

Example:
    >>> lexer = Lexer("let x = 5;")
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - CharacterStream
    - Token
    - LexState
    - Lexer
    - LexerError
    - tokenize
"""

from __future__ import annotations

import enum
import logging
import string
from collections import deque
from collections.abc import Callable, Iterator
from typing import Any

from monkey.monkey_constants import EOF, ILLEGAL, INT, lookup_ident, operator_tokens

logger = logging.getLogger(__name__)

# Returned by CharacterStream.next() once the source is exhausted.
EOF_CHAR = ""

DIGITS = string.digits
LETTERS = string.ascii_letters + "_"
TOKEN_BUFFER_SIZE = 2


class LexerError(Exception):
    """Raised when the lexer's own cursor or buffer is misused."""


class CharacterStream:
    """
    A cursor over a source string that accumulates one lexeme at a time.

    ``start`` and ``position`` delimit the pending lexeme. ``width`` is the width
    of the most recently read character (0 after reading past the end), which is
    what ``backup`` rewinds by.

    Attributes:
        source (str): The input source string.
        start (int): Index where the pending lexeme begins.
        position (int): Index of the next character to read.
        width (int): Width of the last character read.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.start = 0
        self.position = 0
        self.width = 0
        self._can_backup = False

    def next(self) -> str:
        """
        Consumes and returns the next character.

        Returns:
            str: The next character, or EOF_CHAR once the source is exhausted.
        """
        self._can_backup = True
        if self.position >= len(self.source):
            self.width = 0
            return EOF_CHAR
        char = self.source[self.position]
        self.width = 1
        self.position += 1
        return char

    def backup(self) -> None:
        """
        Steps back over the character returned by the last ``next`` call.

        Raises:
            LexerError: If called twice without a read in between.
        """
        if not self._can_backup:
            raise LexerError(
                f"CharacterStreamError: backup without a preceding read at position=<{self.position}>"
            )
        self._can_backup = False
        self.position -= self.width

    def peek(self) -> str:
        """Returns the next character without consuming it."""
        char = self.next()
        self.backup()
        return char

    def ignore(self) -> None:
        """Drops the pending lexeme."""
        self.start = self.position

    def accept(self, valid: str) -> bool:
        """Consumes the next character if it is one of ``valid``.

        Args:
            valid (str): Characters that may be consumed.

        Returns:
            bool: True if a character was consumed.
        """
        char = self.next()
        if char != EOF_CHAR and char in valid:
            return True
        self.backup()
        return False

    def accept_run(self, valid: str) -> None:
        """Consumes a run of characters from ``valid``."""
        while self.accept(valid):
            pass

    def lexeme(self) -> str:
        """Returns the pending lexeme between ``start`` and ``position``.

        Returns:
            str: The text accumulated since the last ``ignore``.
        """
        return self.source[self.start : self.position]

    def end_of_file(self) -> bool:
        """Checks if the cursor has consumed all of the source.

        Returns:
            bool: True once ``position`` reaches the end of ``source``.
        """
        return self.position >= len(self.source)


class Token:
    """An immutable lexical token.

    Attributes:
        type (str): The token kind (e.g. 'IDENT', 'INT', '+', 'EOF').
        literal (str): The matched source text, or a message for ILLEGAL tokens.
    """

    __slots__ = ("type", "literal")

    def __init__(self, type_: str, literal: str) -> None:
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "literal", literal)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable, cannot set {name!r}")

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.literal})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.literal == other.literal
        )

    def __hash__(self) -> int:
        return hash((self.type, self.literal))


class LexState(enum.Enum):
    """Scanning modes of the lexer state machine."""

    TEXT = "text"
    IDENTIFIER = "identifier"
    NUMBER = "number"
    DONE = "done"


def is_space(char: str) -> bool:
    """Returns True for any Unicode whitespace character."""
    return char.isspace()


def is_digit(char: str) -> bool:
    """Returns True for an ASCII digit; False for EOF_CHAR."""
    return char != EOF_CHAR and char in DIGITS


def is_letter(char: str) -> bool:
    """Returns True for an ASCII letter or underscore; False for EOF_CHAR."""
    return char != EOF_CHAR and char in LETTERS


class Lexer:
    """Lexical analyzer for the Monkey language.

    Each call to ``next_token`` runs state steps until a token is buffered.
    A step may emit tokens into a small FIFO and returns the next state; once
    the state is ``LexState.DONE`` every call returns an EOF token.

    Attributes:
        stream (CharacterStream): Cursor over the source being scanned.
        state (LexState): The scanning mode the next step runs in.
    """

    def __init__(self, source: str) -> None:
        self.stream = CharacterStream(source)
        self.state = LexState.TEXT
        self._tokens: deque[Token] = deque(maxlen=TOKEN_BUFFER_SIZE)
        self._steps: dict[LexState, Callable[[], LexState]] = {
            LexState.TEXT: self.lex_text,
            LexState.IDENTIFIER: self.lex_identifier,
            LexState.NUMBER: self.lex_number,
        }

    def next_token(self) -> Token:
        """Returns the next token, or an EOF token once input is exhausted."""
        while True:
            if self._tokens:
                return self._tokens.popleft()
            if self.state is LexState.DONE:
                return Token(EOF, "")
            self.state = self._steps[self.state]()

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens up to, but not including, the EOF token."""
        while True:
            tok = self.next_token()
            if tok.type == EOF:
                return
            yield tok

    def emit(self, type_: str) -> None:
        """Buffers the pending lexeme as a token of kind ``type_``.

        Args:
            type_ (str): The token kind to emit.

        Raises:
            LexerError: If the token buffer is already full.
        """
        if len(self._tokens) == self._tokens.maxlen:
            raise LexerError("token buffer overflow")
        self._tokens.append(Token(type_, self.stream.lexeme()))
        self.stream.ignore()

    def errorf(self, message: str) -> LexState:
        """Buffers an ILLEGAL token carrying ``message`` and resumes scanning.

        Args:
            message (str): Description of the offending input.

        Returns:
            LexState: TEXT, so scanning continues past the bad input.
        """
        logger.debug("illegal input at %d: %s", self.stream.start, message)
        if len(self._tokens) == self._tokens.maxlen:
            raise LexerError("token buffer overflow")
        self._tokens.append(Token(ILLEGAL, message))
        self.stream.ignore()
        return LexState.TEXT

    def skip_whitespace(self) -> None:
        """Discards whitespace, leaving the cursor on the first other character."""
        while is_space(self.stream.next()):
            self.stream.ignore()
        self.stream.backup()

    def lex_text(self) -> LexState:
        """Scans operators and delimiters, or picks the state for the next lexeme.

        Returns:
            LexState: IDENTIFIER or NUMBER when one starts at the cursor, DONE at
                end of input, otherwise TEXT.
        """
        self.skip_whitespace()
        stream = self.stream

        # `!`, `=`, `!=` and `==` all have their own text as kind
        if stream.accept("!="):
            stream.accept("=")
            self.emit(stream.lexeme())
            return LexState.TEXT
        if stream.accept("".join(operator_tokens)):
            self.emit(stream.lexeme())
            return LexState.TEXT

        char = stream.peek()
        if is_letter(char):
            return LexState.IDENTIFIER
        if is_digit(char):
            return LexState.NUMBER
        if char == EOF_CHAR:
            return LexState.DONE
        return self.errorf(f"illegal character: {stream.next()!r}")

    def lex_identifier(self) -> LexState:
        """Emits a maximal run of letters as a keyword or IDENT token.

        Returns:
            LexState: Always TEXT.
        """
        self.stream.accept_run(LETTERS)
        self.emit(lookup_ident(self.stream.lexeme()))
        return LexState.TEXT

    def lex_number(self) -> LexState:
        """Emits a digit run as INT, or ILLEGAL if letters follow it directly.

        Returns:
            LexState: Always TEXT.
        """
        self.stream.accept_run(DIGITS)
        if is_letter(self.stream.peek()):
            self.stream.accept_run(LETTERS + DIGITS)
            return self.errorf(f"bad number syntax: {self.stream.lexeme()!r}")
        self.emit(INT)
        return LexState.TEXT


def tokenize(source: str) -> list[Token]:
    """Lexes ``source`` completely, returning every token including the final EOF."""
    lexer = Lexer(source)
    tokens = list(lexer)
    tokens.append(Token(EOF, ""))
    return tokens


__all__ = [
    "CharacterStream",
    "EOF_CHAR",
    "LexState",
    "Lexer",
    "LexerError",
    "Token",
    "tokenize",
]
