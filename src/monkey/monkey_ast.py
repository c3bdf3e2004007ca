"""
Defines the abstract syntax tree (AST) for the Monkey programming language.

The node family is closed: every statement is one of LetStatement,
ReturnStatement, ExpressionStatement or BlockStatement, and every expression is
one of the Expression subclasses below. Nodes are frozen dataclasses built once
by the parser and never mutated; each keeps the token it originated from.

Each node provides:
    token_literal(): the literal text of its originating token.
    __str__(): a deterministic rendering that fully parenthesizes prefix and
        infix expressions, e.g. `a + b * c` renders as `(a + (b * c))`.
    to_dict(): a nested plain-dict form suitable for JSON output or debugging.

Example:
    node = InfixExpression(Token("+", "+"), left, "+", right)
    str(node)  # "(a + b)"
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, TypedDict

from monkey.monkey_lexer import Token


class NodeDict(TypedDict, total=False):
    """Serialized form of a node. Remaining keys mirror the node's fields."""

    kind: str
    token: str


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class Node:
    token: Token

    def token_literal(self) -> str:
        return self.token.literal

    def to_dict(self) -> NodeDict:
        data: dict[str, Any] = {
            "kind": type(self).__name__,
            "token": self.token.literal,
        }
        for field in fields(self):
            if field.name != "token":
                data[field.name] = _serialize(getattr(self, field.name))
        return data  # type: ignore[return-value]


@dataclass(frozen=True)
class Statement(Node):
    pass


@dataclass(frozen=True)
class Expression(Node):
    pass


@dataclass(frozen=True)
class Program:
    """Root node: the ordered statements of one source text."""

    statements: tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(stmt) for stmt in self.statements)

    def to_dict(self) -> NodeDict:
        return {  # type: ignore[typeddict-unknown-key]
            "kind": "Program",
            "statements": [stmt.to_dict() for stmt in self.statements],
        }


# Expressions


@dataclass(frozen=True)
class Identifier(Expression):
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class PrefixExpression(Expression):
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None = None

    def __str__(self) -> str:
        out = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f"else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    parameters: tuple[Identifier, ...]
    body: BlockStatement

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    function: Expression
    arguments: tuple[Expression, ...]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


# Statements


@dataclass(frozen=True)
class LetStatement(Statement):
    name: Identifier
    value: Expression | None = None

    def __str__(self) -> str:
        if self.value is None:
            return f"{self.token_literal()} {self.name} = ;"
        return f"{self.token_literal()} {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    return_value: Expression | None = None

    def __str__(self) -> str:
        if self.return_value is None:
            return f"{self.token_literal()};"
        return f"{self.token_literal()} {self.return_value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression | None = None

    def __str__(self) -> str:
        return "" if self.expression is None else str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    statements: tuple[Statement, ...] = ()

    def __str__(self) -> str:
        return "".join(str(stmt) for stmt in self.statements)


__all__ = [
    "BlockStatement",
    "BooleanLiteral",
    "CallExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "IfExpression",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "Node",
    "NodeDict",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
]
