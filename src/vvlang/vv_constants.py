"""
Token vocabulary for the vvlang language.

Token kinds are plain upper-case string tags. The tables in this module are
read-only lookups shared by the lexer and parser.

Exports:
    - Token kind constants (ILLEGAL, EOF, IDENT, INT, operators, delimiters, keywords, NEWLINE)
    - keywords: maps reserved words to their token kind
    - single_char_tokens: maps one-character symbols to their token kind
    - double_char_tokens: maps two-character operators to their token kind
    - statement_starts: token kinds that begin a statement
    - expression_ends: token kinds that terminate an expression from outside
    - TOKEN_KINDS: the closed set of every token kind
"""

# Special
ILLEGAL = "ILLEGAL"
EOF = "EOF"
NEWLINE = "NEWLINE"

# Identifiers + literals
IDENT = "IDENT"
INT = "INT"

# Operators
ASSIGN = "ASSIGN"
EQ = "EQ"
NOT_EQ = "NOT_EQ"
PLUS = "PLUS"
MINUS = "MINUS"
BANG = "BANG"
ASTERISK = "ASTERISK"
SLASH = "SLASH"
LT = "LT"
GT = "GT"

# Delimiters
COMMA = "COMMA"
SEMICOLON = "SEMICOLON"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACE = "LBRACE"
RBRACE = "RBRACE"

# Keywords
FUNCTION = "FUNCTION"
LET = "LET"
TRUE = "TRUE"
FALSE = "FALSE"
IF = "IF"
ELSE = "ELSE"
RETURN = "RETURN"

keywords: dict[str, str] = {
    "fn": FUNCTION,
    "let": LET,
    "true": TRUE,
    "false": FALSE,
    "if": IF,
    "else": ELSE,
    "return": RETURN,
}

single_char_tokens: dict[str, str] = {
    "=": ASSIGN,
    "+": PLUS,
    "-": MINUS,
    "!": BANG,
    "*": ASTERISK,
    "/": SLASH,
    "<": LT,
    ">": GT,
    ",": COMMA,
    ";": SEMICOLON,
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
}

double_char_tokens: dict[str, str] = {
    "==": EQ,
    "!=": NOT_EQ,
}

statement_starts: frozenset[str] = frozenset({LET, RETURN, IF})

# Tokens that close an enclosing construct; a missing operand never consumes them
expression_ends: frozenset[str] = frozenset({SEMICOLON, COMMA, RPAREN, RBRACE, EOF})

TOKEN_KINDS: frozenset[str] = frozenset(
    {ILLEGAL, EOF, NEWLINE, IDENT, INT}
    | set(single_char_tokens.values())
    | set(double_char_tokens.values())
    | set(keywords.values())
)
