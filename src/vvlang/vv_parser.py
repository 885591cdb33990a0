"""
vvlang Language Parser

Parses vvlang source text into an abstract syntax tree (`Program`).

The parser owns its `Lexer` and pulls tokens on demand, keeping two tokens of
lookahead (`current` and `peek`). Statements are parsed by recursive descent;
expressions by precedence climbing (Pratt parsing), where every token kind that
may start an expression has a prefix rule and every binary operator has a
binding power plus an infix rule.

Supported Constructs
--------------------
- Statements:
    * `let <ident> = <expr>;`
    * `return <expr>;` and bare `return;`
    * `if (<expr>) { ... } else { ... }`
    * Bare expressions with an optional trailing `;`

- Expressions:
    * Identifiers, integer and boolean literals
    * Prefix `-` and `!`
    * Infix `+ - * / < > == !=` (left associative)
    * Grouping parentheses and calls `f(a, b)`
    * Function literals `fn(x, y) { ... }`

Parser Behavior
---------------
- Never aborts on malformed input. Each syntax error becomes a `Diagnostic`
  (message, line, column) and parsing resumes at the next statement boundary.
- Statements that fail to parse are absent from the result. An unrecognized
  token in expression position yields an `EmptyExpression` placeholder instead,
  so the surrounding statement stays well formed.
- A closing `}`, `)`, `;` or `,` met where an operand was expected is left for
  the construct it closes, so one missing operand costs one diagnostic.
- Input nested deeper than `MAX_NESTING` is reported once as a diagnostic.
- The only hard failure is `EmptySourceError`, raised at construction.

Precedence (low to high)
------------------------
LOWEST < EQUALS (`==` `!=`) < LESSGREATER (`<` `>`) < SUM (`+` `-`)
< PRODUCT (`*` `/`) < PREFIX (`-x` `!x`) < CALL (`f(...)`)

Entry Points
------------
- `Parser(source).parse_program()`: Parse a full program.
- `parse(source)`: Convenience wrapper returning `(program, diagnostics)`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO

from vvlang.vv_ast import (
    BooleanLiteral,
    CallExpression,
    EmptyExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfStatement,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
)
from vvlang.vv_constants import (
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
    INT,
    LBRACE,
    LET,
    LPAREN,
    LT,
    MINUS,
    NEWLINE,
    NOT_EQ,
    PLUS,
    RBRACE,
    RETURN,
    RPAREN,
    SEMICOLON,
    SLASH,
    TRUE,
    expression_ends,
    statement_starts,
)
from vvlang.vv_lexer import Lexer, Token

logger = logging.getLogger(__name__)

# Combined depth of nested expressions and blocks before parsing gives up
MAX_NESTING = 100


class Precedence(IntEnum):
    """Binding power of operators, lowest first."""

    LOWEST = 1
    EQUALS = 2
    LESSGREATER = 3
    SUM = 4
    PRODUCT = 5
    PREFIX = 6
    CALL = 7


precedences: dict[str, Precedence] = {
    EQ: Precedence.EQUALS,
    NOT_EQ: Precedence.EQUALS,
    LT: Precedence.LESSGREATER,
    GT: Precedence.LESSGREATER,
    PLUS: Precedence.SUM,
    MINUS: Precedence.SUM,
    ASTERISK: Precedence.PRODUCT,
    SLASH: Precedence.PRODUCT,
    LPAREN: Precedence.CALL,
}


@dataclass(frozen=True)
class Diagnostic:
    """A recorded, non-fatal syntax error."""

    message: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        return f"line {self.line}, col {self.column}: {self.message}"


class ParseError(SyntaxError):
    """Raised by grammar rules to abandon the current statement.

    Always caught by `Parser.parse_statement`, which turns it into a Diagnostic.
    """

    def __init__(self, message: str, token: Token) -> None:
        super().__init__(message)
        self.message = message
        self.line = token.line
        self.col = token.col


class NestingError(ParseError):
    """Raised when input nests deeper than `MAX_NESTING`.

    Reported once, by the outermost statement, instead of at every level.
    """


def describe(token: Token) -> str:
    """Human-readable name of a token for diagnostics."""
    if token.type == EOF:
        return "end of input"
    return f"`{token.literal}`"


class Parser:
    """
    vvlang Parser Class

    Builds a `Program` from source text, accumulating diagnostics rather than
    raising on syntax errors.

    Attributes
    ----------
    lexer : Lexer
        The token source, owned exclusively by this parser.
    current : Token
        The token under examination.
    peek : Token
        The token after `current`.
    diagnostics : list[Diagnostic]
        Syntax errors in encounter order.
    prefix_parse_fns : dict[str, Callable[[], Expression]]
        Prefix rule per token kind that may start an expression.
    infix_parse_fns : dict[str, Callable[[Expression], Expression]]
        Infix rule per binary operator (and `(` for calls).

    Raises
    ------
    EmptySourceError
        If `source` is empty.
    """

    def __init__(self, source: str) -> None:
        self.lexer = Lexer(source, emit_newlines=True)
        self.diagnostics: list[Diagnostic] = []
        self.depth = 0
        self.nesting = 0
        self.previous: Token | None = None
        self.pending: list[Token] = []

        self.prefix_parse_fns: dict[str, Callable[[], Expression]] = {
            IDENT: self.parse_identifier,
            INT: self.parse_integer_literal,
            TRUE: self.parse_boolean_literal,
            FALSE: self.parse_boolean_literal,
            BANG: self.parse_prefix_expression,
            MINUS: self.parse_prefix_expression,
            LPAREN: self.parse_grouped_expression,
            FUNCTION: self.parse_function_literal,
        }
        self.infix_parse_fns: dict[str, Callable[[Expression], Expression]] = {
            kind: self.parse_infix_expression for kind in precedences if kind != LPAREN
        }
        self.infix_parse_fns[LPAREN] = self.parse_call_expression

        self.current: Token = self._pull()
        self.peek: Token = self._pull()

    @property
    def errors(self) -> list[str]:
        return [d.message for d in self.diagnostics]

    # Token handling

    def _pull(self) -> Token:
        if self.pending:
            return self.pending.pop()
        # Line breaks only matter for diagnostics, and tokens already carry their line
        tok = self.lexer.next_token()
        while tok.type == NEWLINE:
            tok = self.lexer.next_token()
        return tok

    def advance(self) -> Token:
        self.previous = self.current
        self.current = self.peek
        self.peek = self._pull()
        return self.current

    def step_back(self) -> None:
        """Undo the last `advance`, so `current` is again the token before it."""
        if self.previous is None:
            return
        self.pending.append(self.peek)
        self.peek = self.current
        self.current = self.previous
        self.previous = None

    def current_is(self, kind: str) -> bool:
        return self.current.type == kind

    def peek_is(self, kind: str) -> bool:
        return self.peek.type == kind

    def expect_peek(self, kind: str, expected: str) -> Token:
        """Advances onto `peek` if it has the given kind, otherwise raises ParseError."""
        if not self.peek_is(kind):
            raise ParseError(
                f"expected {expected}, found {describe(self.peek)}", self.peek
            )
        return self.advance()

    def peek_precedence(self) -> Precedence:
        return precedences.get(self.peek.type, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return precedences.get(self.current.type, Precedence.LOWEST)

    def record(self, message: str, line: int, col: int) -> None:
        diagnostic = Diagnostic(message, line, col)
        logger.debug("diagnostic: %s", diagnostic)
        self.diagnostics.append(diagnostic)

    # Statements

    def parse_program(self) -> Program:
        """Parse the whole input and return its statements in source order."""
        program = Program()
        while not self.current_is(EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                program.statements.append(stmt)
            self.advance()
        return program

    def parse_statement(self) -> Statement | None:
        """Parse one statement starting at `current`.

        On return `current` is the last token of the statement. Syntax errors are
        recorded and the parser skips ahead to the next statement boundary, in
        which case None is returned.
        """
        tok = self.current
        logger.debug("statement at line %d: %r", tok.line, tok)
        try:
            if tok.type == LET:
                return self.parse_let_statement()
            if tok.type == RETURN:
                return self.parse_return_statement()
            if tok.type == IF:
                return self.parse_if_statement()
            return self.parse_expression_statement()
        except ParseError as e:
            if isinstance(e, NestingError) and self.nesting > 0:
                raise
            self.record(e.message, e.line, e.col)
            self.synchronize()
            return None

    def synchronize(self) -> None:
        """Skip tokens until the next statement can start after `current`.

        Stops on a `;`, before a statement keyword, before a token on a later line,
        before end of input, and inside a block before its closing `}`.
        """
        while not self.current_is(SEMICOLON) and not self.current_is(EOF):
            if self.peek.type in statement_starts or self.peek_is(EOF):
                return
            if self.depth > 0 and self.peek_is(RBRACE):
                return
            if self.peek.line > self.current.line:
                return
            self.advance()

    def parse_let_statement(self) -> LetStatement:
        let_tok = self.current
        name_tok = self.expect_peek(IDENT, "identifier")
        identifier = Identifier(name_tok.literal, line=name_tok.line, col=name_tok.col)
        self.expect_peek(ASSIGN, "`=` operator")
        self.advance()
        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(SEMICOLON, "`;`")
        return LetStatement(
            identifier, expression, line=let_tok.line, col=let_tok.col
        )

    def parse_return_statement(self) -> ReturnStatement:
        return_tok = self.current
        if self.peek_is(SEMICOLON):
            self.advance()
            return ReturnStatement(None, line=return_tok.line, col=return_tok.col)
        self.advance()
        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(SEMICOLON, "`;`")
        return ReturnStatement(expression, line=return_tok.line, col=return_tok.col)

    def parse_expression_statement(self) -> ExpressionStatement:
        tok = self.current
        if tok.type in self.prefix_parse_fns:
            expression = self.parse_expression(Precedence.LOWEST)
        else:
            # Nothing precedes the token in this statement, so it is consumed here
            expression = self.missing_operand()
        if self.peek_is(SEMICOLON):
            self.advance()
        return ExpressionStatement(expression, line=tok.line, col=tok.col)

    def parse_if_statement(self) -> IfStatement:
        if_tok = self.current
        self.expect_peek(LPAREN, "`(`")
        self.advance()
        condition = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(RPAREN, "`)`")
        self.expect_peek(LBRACE, "`{`")
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_is(ELSE):
            self.advance()
            self.expect_peek(LBRACE, "`{`")
            alternative = self.parse_block_statement()

        return IfStatement(
            condition, consequence, alternative, line=if_tok.line, col=if_tok.col
        )

    def parse_block_statement(self) -> list[Statement]:
        """Parse `{ ... }` with `current` on the `{`; leaves `current` on the `}`."""
        statements: list[Statement] = []
        self.depth += 1
        self.nesting += 1
        try:
            if self.nesting > MAX_NESTING:
                raise NestingError("block nested too deeply", self.current)
            self.advance()
            while not self.current_is(RBRACE):
                if self.current_is(EOF):
                    raise ParseError(
                        f"expected `}}`, found {describe(self.current)}", self.current
                    )
                stmt = self.parse_statement()
                if stmt is not None:
                    statements.append(stmt)
                self.advance()
        finally:
            self.depth -= 1
            self.nesting -= 1
        return statements

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression:
        """Precedence climbing over `current`; leaves `current` on the last token used."""
        self.nesting += 1
        try:
            if self.nesting > MAX_NESTING:
                raise NestingError("expression nested too deeply", self.current)
            prefix = self.prefix_parse_fns.get(self.current.type)
            if prefix is None:
                placeholder = self.missing_operand()
                # A closing token belongs to the enclosing construct
                if self.current.type in expression_ends:
                    self.step_back()
                return placeholder
            left = prefix()

            while not self.peek_is(SEMICOLON) and precedence < self.peek_precedence():
                self.advance()
                left = self.infix_parse_fns[self.current.type](left)

            return left
        finally:
            self.nesting -= 1

    def missing_operand(self) -> EmptyExpression:
        """Record a missing operand at `current` and return its placeholder."""
        tok = self.current
        self.record(f"no prefix parse function for {describe(tok)}", tok.line, tok.col)
        return EmptyExpression(line=tok.line, col=tok.col)

    def parse_identifier(self) -> Expression:
        tok = self.current
        return Identifier(tok.literal, line=tok.line, col=tok.col)

    def parse_integer_literal(self) -> Expression:
        tok = self.current
        try:
            value = int(tok.literal)
        except ValueError as e:  # exceeds the interpreter's int digit limit
            raise ParseError(f"could not parse `{tok.literal}` as integer", tok) from e
        return IntegerLiteral(value, line=tok.line, col=tok.col)

    def parse_boolean_literal(self) -> Expression:
        tok = self.current
        return BooleanLiteral(tok.type == TRUE, line=tok.line, col=tok.col)

    def parse_prefix_expression(self) -> Expression:
        op_tok = self.current
        self.advance()
        operand = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(
            op_tok.literal, operand, line=op_tok.line, col=op_tok.col
        )

    def parse_infix_expression(self, left: Expression) -> Expression:
        op_tok = self.current
        precedence = self.current_precedence()
        self.advance()
        right = self.parse_expression(precedence)
        return InfixExpression(
            op_tok.literal, left, right, line=op_tok.line, col=op_tok.col
        )

    def parse_grouped_expression(self) -> Expression:
        self.advance()
        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(RPAREN, "`)`")
        return expression

    def parse_call_expression(self, callee: Expression) -> Expression:
        paren_tok = self.current
        arguments = self.parse_call_arguments()
        return CallExpression(callee, arguments, line=paren_tok.line, col=paren_tok.col)

    def parse_call_arguments(self) -> list[Expression]:
        args: list[Expression] = []
        if self.peek_is(RPAREN):
            self.advance()
            return args

        self.advance()
        args.append(self.parse_expression(Precedence.LOWEST))
        while self.peek_is(COMMA):
            self.advance()
            self.advance()
            args.append(self.parse_expression(Precedence.LOWEST))

        self.expect_peek(RPAREN, "`)`")
        return args

    def parse_function_literal(self) -> Expression:
        fn_tok = self.current
        self.expect_peek(LPAREN, "`(`")
        parameters = self.parse_function_parameters()
        self.expect_peek(LBRACE, "`{`")
        body = self.parse_block_statement()
        return FunctionLiteral(parameters, body, line=fn_tok.line, col=fn_tok.col)

    def parse_function_parameters(self) -> list[Identifier]:
        params: list[Identifier] = []
        if self.peek_is(RPAREN):
            self.advance()
            return params

        tok = self.expect_peek(IDENT, "identifier")
        params.append(Identifier(tok.literal, line=tok.line, col=tok.col))
        while self.peek_is(COMMA):
            self.advance()
            tok = self.expect_peek(IDENT, "identifier")
            params.append(Identifier(tok.literal, line=tok.line, col=tok.col))

        self.expect_peek(RPAREN, "`)`")
        return params

    # Reporting

    def report_errors(self, file: TextIO | None = None) -> None:
        """Print accumulated diagnostics in encounter order. Does not modify any state."""
        out = file if file is not None else sys.stderr
        for diagnostic in self.diagnostics:
            print(f"[error] >>> {diagnostic}", file=out)


def parse(source: str) -> tuple[Program, list[Diagnostic]]:
    """Parse `source` and return the program with its diagnostics."""
    parser = Parser(source)
    program = parser.parse_program()
    return program, list(parser.diagnostics)


__all__ = ["Diagnostic", "ParseError", "Parser", "Precedence", "parse"]
