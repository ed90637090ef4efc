"""
Token types for the logoplot turtle language lexer.

Token type categories follow the error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Runtime errors
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Literals ---
    WORD = auto()               # "100, "red  (quoted literal)
    VARIABLE = auto()           # :name

    # --- Pen procedures (no operand) ---
    PENUP = auto()
    PENDOWN = auto()

    # --- Single-operand procedures ---
    FORWARD = auto()
    BACK = auto()
    LEFT = auto()
    RIGHT = auto()
    SETPENCOLOR = auto()
    TURN = auto()
    SETHEADING = auto()
    SETX = auto()
    SETY = auto()

    # --- Binding procedures ---
    MAKE = auto()
    ADDASSIGN = auto()

    # --- Queries ---
    XCOR = auto()
    YCOR = auto()
    HEADING = auto()
    COLOR = auto()

    # --- Control flow ---
    IF = auto()
    WHILE = auto()

    # --- Relational and logical operators (prefix keywords) ---
    EQ = auto()
    NE = auto()
    LT = auto()
    GT = auto()
    AND = auto()
    OR = auto()

    # --- Arithmetic operators (prefix symbols) ---
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    SLASH = auto()              # /

    # --- Delimiters ---
    LBRACKET = auto()           # [
    RBRACKET = auto()           # ]

    # --- Special ---
    ERROR = auto()              # input matching no token pattern
    EOF = auto()                # end of input


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"

    def to(self, other: "SourceSpan") -> "SourceSpan":
        """Span from the start of this span to the end of ``other``."""
        return SourceSpan(self.start, other.end)


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Any              # The literal/variable text, or the keyword
    lexeme: str             # The original source text
    span: SourceSpan        # Location in source

    def __str__(self) -> str:
        if self.type == TokenType.WORD:
            return f'"{self.value}'
        if self.type == TokenType.VARIABLE:
            return f":{self.value}"
        if self.type == TokenType.ERROR:
            return f"unrecognized input {self.lexeme!r}"
        if self.type == TokenType.EOF:
            return "end of input"
        if self.lexeme in SYMBOLS:
            return f"'{self.lexeme}'"
        return self.lexeme or self.type.name


# Keyword mapping - maps exact (case-sensitive) spelling to token type
KEYWORDS: dict[str, TokenType] = {
    "PENUP": TokenType.PENUP,
    "PENDOWN": TokenType.PENDOWN,
    "FORWARD": TokenType.FORWARD,
    "BACK": TokenType.BACK,
    "LEFT": TokenType.LEFT,
    "RIGHT": TokenType.RIGHT,
    "SETPENCOLOR": TokenType.SETPENCOLOR,
    "TURN": TokenType.TURN,
    "SETHEADING": TokenType.SETHEADING,
    "SETX": TokenType.SETX,
    "SETY": TokenType.SETY,
    "MAKE": TokenType.MAKE,
    "ADDASSIGN": TokenType.ADDASSIGN,
    "XCOR": TokenType.XCOR,
    "YCOR": TokenType.YCOR,
    "HEADING": TokenType.HEADING,
    "COLOR": TokenType.COLOR,
    "IF": TokenType.IF,
    "WHILE": TokenType.WHILE,
    "EQ": TokenType.EQ,
    "NE": TokenType.NE,
    "LT": TokenType.LT,
    "GT": TokenType.GT,
    "AND": TokenType.AND,
    "OR": TokenType.OR,
}

SYMBOLS: dict[str, TokenType] = {
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
}

# Token-type groupings used by the parser
PEN_PROCEDURES = frozenset({TokenType.PENUP, TokenType.PENDOWN})

UNARY_PROCEDURES = frozenset({
    TokenType.FORWARD, TokenType.BACK, TokenType.LEFT, TokenType.RIGHT,
    TokenType.SETPENCOLOR, TokenType.TURN, TokenType.SETHEADING,
    TokenType.SETX, TokenType.SETY,
})

BINDING_PROCEDURES = frozenset({TokenType.MAKE, TokenType.ADDASSIGN})

CONTROL_FLOW = frozenset({TokenType.IF, TokenType.WHILE})

QUERIES = frozenset({TokenType.XCOR, TokenType.YCOR, TokenType.HEADING, TokenType.COLOR})

MATH_OPERATORS = frozenset({TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH})

COMPARISON_OPERATORS = frozenset({TokenType.EQ, TokenType.NE, TokenType.LT, TokenType.GT})

LOGICAL_OPERATORS = frozenset({TokenType.AND, TokenType.OR})

# Tokens that can begin an argument expression
ARG_START = MATH_OPERATORS | QUERIES | {TokenType.WORD, TokenType.VARIABLE}

STATEMENT_START = PEN_PROCEDURES | UNARY_PROCEDURES | BINDING_PROCEDURES | CONTROL_FLOW


def describe(token_type: TokenType) -> str:
    """Human-readable name of a token type for diagnostics."""
    if token_type == TokenType.WORD:
        return "quoted literal"
    if token_type == TokenType.VARIABLE:
        return "variable"
    if token_type == TokenType.EOF:
        return "end of input"
    if token_type == TokenType.ERROR:
        return "unrecognized input"
    for text, kind in SYMBOLS.items():
        if kind == token_type:
            return f"'{text}'"
    return token_type.name
