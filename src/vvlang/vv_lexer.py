"""
Lexical analyzer for the vvlang programming language.

This module converts raw source text into a lazy stream of tokens:

Classes:
    Token: A single token with its kind, literal text, and source location.
    Lexer: Pulls characters on demand and produces one Token per `next_token()` call.
    EmptySourceError: Raised when the lexer is constructed over empty input.

Features:
    - Skips spaces and tabs; counts `\\n` and `\\r\\n` line breaks for diagnostics
    - Recognizes identifiers (`[A-Za-z_]+`), keywords, and integer literals
    - Maximal munch for the two-character operators `==` and `!=`
    - Unknown characters become `ILLEGAL` tokens instead of failing
    - End of input is a NUL sentinel; `EOF` is returned forever after it

Example:
    >>> lexer = Lexer("let x = 5;")
    >>> lexer.next_token()
    Token(LET, 'let')

Exports:
    - EmptySourceError
    - Lexer
    - Token
    - tokenize
"""

import logging
from collections.abc import Callable, Iterator
from typing import Any

from vvlang.vv_constants import (
    EOF,
    ILLEGAL,
    IDENT,
    INT,
    NEWLINE,
    double_char_tokens,
    keywords,
    single_char_tokens,
)

logger = logging.getLogger(__name__)

NUL = "\0"
WHITESPACE_CHARS = (" ", "\t")


class EmptySourceError(ValueError):
    """Raised when a Lexer (or Parser) is given literally empty input."""


class Token:
    """Represents a single lexical token in the vvlang language.

    Attributes:
        type (str): The token kind (e.g. 'IDENT', 'INT', 'EOF').
        literal (str): The source text of the token.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "literal", "line", "col")

    def __init__(self, type_: str, literal: str, line: int = 0, col: int = 0):
        self.type = type_
        self.literal = literal
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.literal!r})"

    def __eq__(self, other: Any) -> bool:
        """Tokens compare by kind and literal; position is metadata only."""
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.literal == other.literal
        )

    def __hash__(self) -> int:
        return hash((self.type, self.literal))


def is_letter(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Lexer:
    """Lexical analyzer for the vvlang language.

    The cursor state mirrors a classic hand-written scanner: `char` is always the
    character at `position`, and `read_position` points just past it. Reading beyond
    the last character yields the NUL sentinel rather than an out-of-range access.

    Args:
        source (str): The text to tokenize. Must not be empty.
        emit_newlines (bool): If True, line breaks are returned as `NEWLINE` tokens
            instead of being skipped. Used by the REPL's token mode.

    Raises:
        EmptySourceError: If `source` is the empty string.
    """

    def __init__(self, source: str, emit_newlines: bool = False) -> None:
        if not source:
            raise EmptySourceError(
                f"No character found at position 0 in given text: {source!r}"
            )
        self.input = source
        self.emit_newlines = emit_newlines
        self.position = 0
        self.read_position = 1
        self.char = source[0]
        self.line = 1
        self.line_start = 0

    def read_char(self) -> None:
        """Moves the cursor one character forward."""
        if self.read_position >= len(self.input):
            self.char = NUL
        else:
            self.char = self.input[self.read_position]
        self.position = self.read_position
        self.read_position += 1

    def peek_char(self) -> str:
        """Returns the character after the current one without moving the cursor."""
        if self.read_position >= len(self.input):
            return NUL
        return self.input[self.read_position]

    @property
    def column(self) -> int:
        return self.position - self.line_start + 1

    def _new_line(self) -> None:
        self.line += 1
        self.line_start = self.read_position

    def skip_whitespace(self) -> None:
        """Skips spaces and tabs, plus line breaks unless they are emitted as tokens."""
        while True:
            if self.char in WHITESPACE_CHARS:
                self.read_char()
            elif self.emit_newlines:
                return
            elif self.char == "\n":
                self._new_line()
                self.read_char()
            elif self.char == "\r" and self.peek_char() == "\n":
                self.read_char()
                self._new_line()
                self.read_char()
            else:
                return

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the input.

        Returns:
            Token: The next token. Past the end of input this is always `EOF`.
        """
        self.skip_whitespace()
        line, col = self.line, self.column

        # 1. Identifier or keyword
        if is_letter(self.char):
            literal = self._read_while(is_letter)
            return Token(keywords.get(literal, IDENT), literal, line, col)

        # 2. Integer
        if is_digit(self.char):
            return Token(INT, self._read_while(is_digit), line, col)

        # 3. End of input, repeatable
        if self.char == NUL and self.position >= len(self.input):
            return Token(EOF, "", line, col)

        # 4. Line breaks (only reached with emit_newlines)
        if self.char == "\n":
            token = Token(NEWLINE, "\n", line, col)
            self._new_line()
            self.read_char()
            return token
        if self.char == "\r" and self.peek_char() == "\n":
            self.read_char()
            token = Token(NEWLINE, "\r\n", line, col)
            self._new_line()
            self.read_char()
            return token

        # 5. Operators and delimiters, two-character forms first
        pair = self.char + self.peek_char()
        if pair in double_char_tokens:
            self.read_char()
            self.read_char()
            return Token(double_char_tokens[pair], pair, line, col)

        ch = self.char
        self.read_char()
        if ch in single_char_tokens:
            return Token(single_char_tokens[ch], ch, line, col)

        # 6. Anything else is left for the parser to report
        logger.debug("illegal character %r at line %d, col %d", ch, line, col)
        return Token(ILLEGAL, ch, line, col)

    def _read_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.position
        while predicate(self.char):
            self.read_char()
        return self.input[start : self.position]

    def __iter__(self) -> Iterator[Token]:
        """Yields tokens up to and including the first `EOF`."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == EOF:
                return


def tokenize(source: str, emit_newlines: bool = False) -> list[Token]:
    """Returns every token of `source`, ending with exactly one `EOF` token."""
    return list(Lexer(source, emit_newlines=emit_newlines))


__all__ = ["EmptySourceError", "Lexer", "Token", "tokenize"]
