"""
Defines the abstract syntax tree (AST) for the vvlang programming language.

The grammar is fixed, so the tree is a closed set of node classes grouped into
two syntactic categories:

Statements:
    LetStatement, ReturnStatement, ExpressionStatement, IfStatement

Expressions:
    Identifier, IntegerLiteral, BooleanLiteral, PrefixExpression,
    InfixExpression, CallExpression, FunctionLiteral, EmptyExpression

Each node tracks:
    line (int): Source line number for error messages.
    col (int): Source column number for error messages.
Both are excluded from equality, so trees built by hand compare equal to parsed ones.

Every node exposes:
    to_dict(): nested plain-dict form, suitable for JSON output.
    __str__(): canonical source rendering with every operation parenthesized,
        e.g. `((-a) * b)`.

Usage:
    A `Program` is the parser's output and the evaluator's input. Consumers
    dispatch on node type with `isinstance`; nodes own their children exclusively.
"""

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, TypedDict, Union


class ASTDict(TypedDict, total=False):
    """Serialized shape of a node as returned by `to_dict()`.

    Only `kind`, `line` and `col` are always present; the other keys depend on the variant.
    """

    kind: str
    line: int
    col: int
    name: str
    value: Any
    operator: str
    operand: "ASTDict"
    left: "ASTDict"
    right: "ASTDict"
    callee: "ASTDict"
    arguments: list["ASTDict"]
    parameters: list["ASTDict"]
    body: list["ASTDict"]
    identifier: "ASTDict"
    expression: "ASTDict | None"
    condition: "ASTDict"
    consequence: list["ASTDict"]
    alternative: list["ASTDict"] | None


def _position() -> Any:
    return field(default=0, compare=False, kw_only=True)


# Expressions


@dataclass
class Identifier:
    name: str
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> ASTDict:
        return {
            "kind": "identifier",
            "name": self.name,
            "line": self.line,
            "col": self.col,
        }


@dataclass
class IntegerLiteral:
    value: int
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        return str(self.value)

    def to_dict(self) -> ASTDict:
        return {
            "kind": "integer",
            "value": self.value,
            "line": self.line,
            "col": self.col,
        }


@dataclass
class BooleanLiteral:
    value: bool
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        return "true" if self.value else "false"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "boolean",
            "value": self.value,
            "line": self.line,
            "col": self.col,
        }


@dataclass
class PrefixExpression:
    operator: str
    operand: "Expression"
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        return f"({self.operator}{self.operand})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "prefix",
            "operator": self.operator,
            "operand": self.operand.to_dict(),
            "line": self.line,
            "col": self.col,
        }


@dataclass
class InfixExpression:
    operator: str
    left: "Expression"
    right: "Expression"
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "infix",
            "operator": self.operator,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
            "line": self.line,
            "col": self.col,
        }


@dataclass
class CallExpression:
    callee: "Expression"
    arguments: list["Expression"] = field(default_factory=list)
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.callee}({args})"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "call",
            "callee": self.callee.to_dict(),
            "arguments": [a.to_dict() for a in self.arguments],
            "line": self.line,
            "col": self.col,
        }


@dataclass
class FunctionLiteral:
    parameters: list[Identifier] = field(default_factory=list)
    body: list["Statement"] = field(default_factory=list)
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {_render_block(self.body)}"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "function",
            "parameters": [p.to_dict() for p in self.parameters],
            "body": [s.to_dict() for s in self.body],
            "line": self.line,
            "col": self.col,
        }


@dataclass
class EmptyExpression:
    """Placeholder left where no expression could be parsed."""

    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        return ""

    def to_dict(self) -> ASTDict:
        return {"kind": "empty", "line": self.line, "col": self.col}


Expression = Union[
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    CallExpression,
    FunctionLiteral,
    EmptyExpression,
]


# Statements


@dataclass
class LetStatement:
    identifier: Identifier
    expression: Expression
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        return f"let {self.identifier} = {self.expression};"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "let",
            "identifier": self.identifier.to_dict(),
            "expression": self.expression.to_dict(),
            "line": self.line,
            "col": self.col,
        }


@dataclass
class ReturnStatement:
    expression: Expression | None = None
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        if self.expression is None:
            return "return;"
        return f"return {self.expression};"

    def to_dict(self) -> ASTDict:
        return {
            "kind": "return",
            "expression": (
                None if self.expression is None else self.expression.to_dict()
            ),
            "line": self.line,
            "col": self.col,
        }


@dataclass
class ExpressionStatement:
    expression: Expression
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        return str(self.expression)

    def to_dict(self) -> ASTDict:
        return {
            "kind": "expression",
            "expression": self.expression.to_dict(),
            "line": self.line,
            "col": self.col,
        }


@dataclass
class IfStatement:
    condition: Expression
    consequence: list["Statement"] = field(default_factory=list)
    alternative: list["Statement"] | None = None
    line: int = _position()
    col: int = _position()

    def __str__(self) -> str:
        out = f"if ({self.condition}) {_render_block(self.consequence)}"
        if self.alternative is not None:
            out += f" else {_render_block(self.alternative)}"
        return out

    def to_dict(self) -> ASTDict:
        return {
            "kind": "if",
            "condition": self.condition.to_dict(),
            "consequence": [s.to_dict() for s in self.consequence],
            "alternative": (
                None
                if self.alternative is None
                else [s.to_dict() for s in self.alternative]
            ),
            "line": self.line,
            "col": self.col,
        }


Statement = Union[LetStatement, ReturnStatement, ExpressionStatement, IfStatement]


def _render_block(statements: list[Statement]) -> str:
    if not statements:
        return "{ }"
    return "{ " + " ".join(str(s) for s in statements) + " }"


@dataclass
class Program:
    """The ordered top-level statements of one parsed source text."""

    statements: list[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        return "\n".join(str(s) for s in self.statements)

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "program",
            "statements": [s.to_dict() for s in self.statements],
        }


def to_json(program: Program, indent: int = 2) -> str:
    """Serializes a Program to a JSON string."""
    return json.dumps(program.to_dict(), indent=indent)


__all__ = [
    "ASTDict",
    "BooleanLiteral",
    "CallExpression",
    "EmptyExpression",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "IfStatement",
    "InfixExpression",
    "IntegerLiteral",
    "LetStatement",
    "PrefixExpression",
    "Program",
    "ReturnStatement",
    "Statement",
    "to_json",
]
