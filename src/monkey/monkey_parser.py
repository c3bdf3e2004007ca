"""
Monkey Language Parser

Parses the token stream produced by the Monkey lexer into an abstract syntax tree.

The parser pulls tokens from a `Lexer` one at a time, keeping exactly two tokens
in view (`current_token` and `peek_token`). Statements are dispatched on their
leading token; expressions are parsed by precedence climbing (Pratt parsing)
with one table of prefix parse functions and one of infix parse functions, both
keyed by token kind.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return <expr>;`
    * expression statements, with an optional trailing `;`

- Expressions:
    * identifiers, integer literals, `true` / `false`
    * prefix `!` and `-`
    * infix `+ - * / < > == !=`, all left-associative
    * grouping `( ... )`
    * `if (<cond>) { ... } else { ... }`
    * function literals `fn(a, b) { ... }` and calls `f(a, b)`

Parser Behavior
---------------
- Never raises on bad input. Every structural problem appends one message to
  `Parser.errors` and the offending statement is left out of the program.
- A malformed `let` or `return` skips ahead to the next `;` (or to just before
  a closing `}`) before parsing resumes; a failed expression statement resumes
  at the next token.
- Expressions nested deeper than `MAX_EXPRESSION_DEPTH` are reported as
  "expression nested too deeply" rather than exhausting the call stack.
- `parse(source, strict=True)` turns a non-empty error list into `ParserError`.

Entry Points
------------
- `Parser.parse_program()`: Parse a full program.
- `Parser.parse_expression()`: Parse one expression at a given precedence.
- `parse()`: Lex and parse a source string in one call.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable

from monkey.monkey_ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
)
from monkey.monkey_constants import (
    ASSIGN,
    ASTERISK,
    BANG,
    COMMA,
    ELSE,
    EOF,
    EQ,
    FALSE,
    FUNCTION,
    GT,
    IDENT,
    IF,
    ILLEGAL,
    INT,
    LBRACE,
    LET,
    LPAREN,
    LT,
    MINUS,
    NOT_EQ,
    PLUS,
    RBRACE,
    RETURN,
    RPAREN,
    SEMICOLON,
    SLASH,
    TRUE,
)
from monkey.monkey_lexer import Lexer, Token

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Deepest expression nesting accepted; each level costs several Python frames.
MAX_EXPRESSION_DEPTH = 100

PrefixParseFn = Callable[[], Expression | None]
InfixParseFn = Callable[[Expression], Expression | None]


class Precedence(enum.IntEnum):
    """Binding power of operators, lowest to highest."""

    LOWEST = 1
    EQUALS = 2  # ==
    LESSGREATER = 3  # > or <
    SUM = 4  # +
    PRODUCT = 5  # *
    PREFIX = 6  # -x or !x
    CALL = 7  # f(x)


precedences: dict[str, Precedence] = {
    EQ: Precedence.EQUALS,
    NOT_EQ: Precedence.EQUALS,
    LT: Precedence.LESSGREATER,
    GT: Precedence.LESSGREATER,
    PLUS: Precedence.SUM,
    MINUS: Precedence.SUM,
    SLASH: Precedence.PRODUCT,
    ASTERISK: Precedence.PRODUCT,
    LPAREN: Precedence.CALL,
}


class ParserError(SyntaxError):
    """Raised by `parse(..., strict=True)` when the parser recorded errors.

    Attributes
    ----------
    errors : list[str]
        The parser's messages, in the order they were recorded.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        summary = "; ".join(self.errors)
        super().__init__(f"{len(self.errors)} parse error(s): {summary}")


class Parser:
    """
    Monkey Parser Class

    Builds a `Program` from the tokens of a `Lexer`, resolving operator
    precedence and associativity without backtracking.

    Attributes
    ----------
    lexer : Lexer
        Source of tokens, pulled one at a time.
    current_token : Token
        The token under examination.
    peek_token : Token
        The token after `current_token`.
    prefix_parse_fns : dict[str, PrefixParseFn]
        Parse functions for token kinds that can start an expression.
    infix_parse_fns : dict[str, InfixParseFn]
        Parse functions for token kinds that can continue an expression.

    Methods
    -------
    parse_program() -> Program
        Parse statements until EOF.
    parse_statement() -> Statement | None
        Parse one statement, or record errors and return None.
    parse_expression(precedence) -> Expression | None
        Pratt loop over the prefix and infix tables.
    errors -> list[str]
        Messages recorded so far.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self._errors: list[str] = []
        self._depth = 0

        self.prefix_parse_fns: dict[str, PrefixParseFn] = {
            IDENT: self.parse_identifier,
            INT: self.parse_integer_literal,
            TRUE: self.parse_boolean,
            FALSE: self.parse_boolean,
            BANG: self.parse_prefix_expression,
            MINUS: self.parse_prefix_expression,
            LPAREN: self.parse_grouped_expression,
            IF: self.parse_if_expression,
            FUNCTION: self.parse_function_literal,
        }

        self.infix_parse_fns: dict[str, InfixParseFn] = {
            PLUS: self.parse_infix_expression,
            MINUS: self.parse_infix_expression,
            SLASH: self.parse_infix_expression,
            ASTERISK: self.parse_infix_expression,
            EQ: self.parse_infix_expression,
            NOT_EQ: self.parse_infix_expression,
            LT: self.parse_infix_expression,
            GT: self.parse_infix_expression,
            LPAREN: self.parse_call_expression,
        }

        # Read two tokens so current_token and peek_token are both set
        self.current_token: Token = lexer.next_token()
        self.peek_token: Token = lexer.next_token()

    @property
    def errors(self) -> list[str]:
        """Copy of the messages recorded so far, in order."""
        return list(self._errors)

    def next_token(self) -> None:
        """Shift `peek_token` into `current_token` and pull one more token."""
        self.current_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def current_token_is(self, type_: str) -> bool:
        return self.current_token.type == type_

    def peek_token_is(self, type_: str) -> bool:
        return self.peek_token.type == type_

    def expect_peek(self, type_: str) -> bool:
        """
        Advance if the peek token has kind `type_`, otherwise record an error.

        Args:
            type_ (str): The token kind required next.

        Returns:
            bool: True if the parser advanced, False if an error was recorded.
        """
        if self.peek_token_is(type_):
            self.next_token()
            return True
        self.peek_error(type_)
        return False

    def add_error(self, message: str) -> None:
        """Append `message` to the error list."""
        logger.debug("parse error: %s", message)
        self._errors.append(message)

    def peek_error(self, type_: str) -> None:
        """Record that the peek token is not of kind `type_`."""
        self.add_error(
            f"expected next token to be {type_}, got {self.peek_token.type} instead"
        )

    def no_prefix_parse_fn_error(self, token: Token) -> None:
        """Record that `token` cannot start an expression.

        ILLEGAL tokens report the lexer's own message instead.
        """
        if token.type == ILLEGAL:
            self.add_error(f"illegal token: {token.literal}")
        else:
            self.add_error(f"no prefix parse function for {token.type} found")

    def peek_precedence(self) -> Precedence:
        """Binding power of the peek token, LOWEST if it is not an operator."""
        return precedences.get(self.peek_token.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        """Binding power of the current token, LOWEST if it is not an operator."""
        return precedences.get(self.current_token.type, Precedence.LOWEST)

    def parse_program(self) -> Program:
        """Parse a full Monkey program, collecting errors instead of raising."""
        statements: list[Statement] = []
        while not self.current_token_is(EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        logger.debug(
            "parsed %d statement(s) with %d error(s)",
            len(statements),
            len(self._errors),
        )
        return Program(tuple(statements))

    def parse_statement(self) -> Statement | None:
        """
        Dispatch on the current token to the matching statement parser.

        Returns:
            Statement | None: The statement, or None if it was dropped.
        """
        if self.current_token_is(LET):
            return self.parse_let_statement()
        if self.current_token_is(RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def skip_statement(self) -> None:
        """Advance to the `;` ending the current statement, or to EOF.

        Stops early when the next token is `}` so an enclosing block can
        still close.
        """
        while not (
            self.current_token_is(SEMICOLON)
            or self.current_token_is(EOF)
            or self.peek_token_is(RBRACE)
        ):
            self.next_token()

    def parse_let_statement(self) -> LetStatement | None:
        """
        Parse `let <name> = <value>;` with the current token on `let`.

        Returns:
            LetStatement | None: The statement, or None after skipping a
                malformed one.
        """
        let_tok = self.current_token

        if not self.expect_peek(IDENT):
            self.skip_statement()
            return None
        name = Identifier(self.current_token, self.current_token.literal)

        if not self.expect_peek(ASSIGN):
            self.skip_statement()
            return None

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            self.skip_statement()
            return None

        if self.peek_token_is(SEMICOLON):
            self.next_token()

        return LetStatement(let_tok, name, value)

    def parse_return_statement(self) -> ReturnStatement | None:
        """Parse `return <value>;` with the current token on `return`."""
        return_tok = self.current_token

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            self.skip_statement()
            return None

        if self.peek_token_is(SEMICOLON):
            self.next_token()

        return ReturnStatement(return_tok, value)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        """Parse a bare expression used as a statement; the `;` is optional."""
        tok = self.current_token

        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self.peek_token_is(SEMICOLON):
            self.next_token()

        return ExpressionStatement(tok, expression)

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """
        Parse an expression whose operators all bind tighter than `precedence`.

        Nesting deeper than `MAX_EXPRESSION_DEPTH` records
        "expression nested too deeply" and skips the rest of the statement.

        Args:
            precedence (Precedence): Binding power of the operator to the left.

        Returns:
            Expression | None: The expression, or None if an error was recorded.
        """
        if self._depth >= MAX_EXPRESSION_DEPTH:
            self.add_error("expression nested too deeply")
            self.skip_statement()
            return None

        self._depth += 1
        try:
            prefix = self.prefix_parse_fns.get(self.current_token.type)
            if prefix is None:
                self.no_prefix_parse_fn_error(self.current_token)
                return None
            left = prefix()
            if left is None:
                return None

            while (
                not self.peek_token_is(SEMICOLON)
                and precedence < self.peek_precedence()
            ):
                infix = self.infix_parse_fns.get(self.peek_token.type)
                if infix is None:
                    return left  # pragma: no cover

                self.next_token()
                left = infix(left)
                if left is None:
                    return None

            return left
        finally:
            self._depth -= 1

    def parse_identifier(self) -> Expression:
        return Identifier(self.current_token, self.current_token.literal)

    def parse_integer_literal(self) -> Expression | None:
        """Build an `IntegerLiteral`, rejecting values outside signed 64 bits."""
        tok = self.current_token
        try:
            value = int(tok.literal)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.add_error(f"could not parse {tok.literal!r} as integer")
            return None
        return IntegerLiteral(tok, value)

    def parse_boolean(self) -> Expression:
        """Build a `BooleanLiteral` from `true` or `false`."""
        return BooleanLiteral(self.current_token, self.current_token_is(TRUE))

    def parse_prefix_expression(self) -> Expression | None:
        """Parse `!<expr>` or `-<expr>`; the operand binds at PREFIX."""
        tok = self.current_token
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(tok, tok.literal, right)

    def parse_infix_expression(self, left: Expression) -> Expression | None:
        tok = self.current_token
        # Same precedence for the right operand keeps chains left-associative
        precedence = self.current_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(tok, left, tok.literal, right)

    def parse_grouped_expression(self) -> Expression | None:
        """Parse `( <expr> )`, returning the inner expression unwrapped."""
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self.expect_peek(RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Expression | None:
        """
        Parse `if (<cond>) { ... }` with an optional `else { ... }`.

        Returns:
            Expression | None: An `IfExpression`, or None if any part failed.
        """
        if_tok = self.current_token

        if not self.expect_peek(LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self.expect_peek(RPAREN):
            return None

        if not self.expect_peek(LBRACE):
            return None
        consequence = self.parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self.peek_token_is(ELSE):
            self.next_token()
            if not self.expect_peek(LBRACE):
                return None
            alternative = self.parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(if_tok, condition, consequence, alternative)

    def parse_block_statement(self) -> BlockStatement | None:
        """Parse statements up to the closing `}`; current token is the `{`."""
        block_tok = self.current_token
        statements: list[Statement] = []

        self.next_token()
        while not self.current_token_is(RBRACE):
            if self.current_token_is(EOF):
                self.add_error(f"expected next token to be {RBRACE}, got {EOF} instead")
                return None
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()

        return BlockStatement(block_tok, tuple(statements))

    def parse_function_literal(self) -> Expression | None:
        """Parse `fn(<params>) { ... }` with the current token on `fn`."""
        fn_tok = self.current_token

        if not self.expect_peek(LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(LBRACE):
            return None
        body = self.parse_block_statement()
        if body is None:
            return None

        return FunctionLiteral(fn_tok, tuple(parameters), body)

    def parse_function_parameters(self) -> list[Identifier] | None:
        """
        Parse a comma-separated identifier list through the closing `)`.

        Returns:
            list[Identifier] | None: The parameters, or None on a malformed list.
        """
        identifiers: list[Identifier] = []

        if self.peek_token_is(RPAREN):
            self.next_token()
            return identifiers

        if not self.expect_peek(IDENT):
            return None
        identifiers.append(Identifier(self.current_token, self.current_token.literal))

        while self.peek_token_is(COMMA):
            self.next_token()
            if not self.expect_peek(IDENT):
                return None
            identifiers.append(
                Identifier(self.current_token, self.current_token.literal)
            )

        if not self.expect_peek(RPAREN):
            return None
        return identifiers

    def parse_call_expression(self, function: Expression) -> Expression | None:
        """Parse the argument list after `function`; current token is the `(`."""
        call_tok = self.current_token
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(call_tok, function, tuple(arguments))

    def parse_call_arguments(self) -> list[Expression] | None:
        """Parse comma-separated argument expressions through the closing `)`."""
        args: list[Expression] = []

        if self.peek_token_is(RPAREN):
            self.next_token()
            return args

        self.next_token()
        arg = self.parse_expression(Precedence.LOWEST)
        if arg is None:
            return None
        args.append(arg)

        while self.peek_token_is(COMMA):
            self.next_token()
            self.next_token()
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            args.append(arg)

        if not self.expect_peek(RPAREN):
            return None
        return args


def parse(source: str, strict: bool = False) -> Program:
    """
    Lex and parse `source` in one call.

    Args:
        source (str): Monkey source text.
        strict (bool): If True, raise instead of returning a partial program.

    Returns:
        Program: The parsed program (possibly missing malformed statements).

    Raises:
        ParserError: If `strict` is True and any error was recorded.
    """
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    if strict and parser.errors:
        raise ParserError(parser.errors)
    return program


__all__ = ["Parser", "ParserError", "Precedence", "parse", "precedences"]
