"""
Lexer for the logoplot turtle language.

Converts source text into a stream of tokens for the parser.
Supports:
- Upper-case keywords for procedures, queries, control flow and operators
- Quoted literals ("100, "red) and variable references (:size)
- Prefix arithmetic symbols (+ - * /) and block brackets ([ ])
- Line comments (// to end of line)

Input that matches none of these becomes an ERROR token carrying its span;
the lexer never drops input and never raises unless asked to be strict.
"""

from typing import List, Optional, Iterator
from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, KEYWORDS, SYMBOLS,
)
from .errors import error_unrecognized_input

WHITESPACE = ' \t\n\r\f'


class Lexer:
    """
    Tokenizer for the turtle language.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming (each iteration rescans from the start):
        for token in Lexer(source_code):
            process(token)
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self._lines: Optional[List[str]] = None  # Cached line list
        self._reset()

    def _reset(self) -> None:
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Create a span from start to current position."""
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        """Check if we've reached end of source."""
        return self.pos >= len(self.source)

    def _skip_comment(self) -> None:
        """Skip a line comment (// to end of line)."""
        while self._peek() != '\n' and not self._is_at_end():
            self._advance()

    def _skip_whitespace_and_comments(self) -> None:
        while not self._is_at_end():
            ch = self._peek()
            if ch in WHITESPACE:
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                self._skip_comment()
            else:
                break

    def _make_token(self, token_type: TokenType, value, start: SourceLocation) -> Token:
        """Create a token whose lexeme runs from start to the current position."""
        lexeme = self.source[start.offset:self.pos]
        return Token(token_type, value, lexeme, self._span(start))

    def _scan_atom(self, token_type: TokenType) -> Token:
        """Scan a quoted literal or variable: prefix, then everything up to
        whitespace or a double quote."""
        start = self._location()
        self._advance()  # consume prefix
        while not self._is_at_end() and self._peek() not in WHITESPACE and self._peek() != '"':
            self._advance()
        value = self.source[start.offset + 1:self.pos]
        return self._make_token(token_type, value, start)

    def _scan_word(self) -> Token:
        """Scan a run of letters: a keyword, or an ERROR token."""
        start = self._location()
        while self._peek().isascii() and self._peek().isalpha():
            self._advance()
        lexeme = self.source[start.offset:self.pos]
        if lexeme in KEYWORDS:
            return self._make_token(KEYWORDS[lexeme], lexeme, start)
        return self._make_token(TokenType.ERROR, lexeme, start)

    def _scan_token(self) -> Token:
        """Scan the next token."""
        self._skip_whitespace_and_comments()

        if self._is_at_end():
            return self._make_token(TokenType.EOF, None, self._location())

        start = self._location()
        ch = self._peek()

        if ch == '"':
            return self._scan_atom(TokenType.WORD)
        if ch == ':':
            return self._scan_atom(TokenType.VARIABLE)
        if ch.isascii() and ch.isalpha():
            return self._scan_word()

        self._advance()
        if ch in SYMBOLS:
            return self._make_token(SYMBOLS[ch], ch, start)

        # Unknown character
        return self._make_token(TokenType.ERROR, ch, start)

    def tokenize(self, strict: bool = False) -> List[Token]:
        """
        Tokenize the entire source, returning a list of tokens ending in EOF.

        With ``strict`` the first ERROR token raises LexerError instead.
        """
        tokens = []
        for token in self:
            if strict and token.type == TokenType.ERROR:
                raise error_unrecognized_input(
                    token.lexeme, token.span, self.get_source_line(token.span.start.line)
                )
            tokens.append(token)
        return tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens, starting again from the top of the source."""
        self._reset()
        while True:
            token = self._scan_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None, strict: bool = False) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for error messages
        strict: Raise on unrecognized input instead of emitting ERROR tokens

    Returns:
        List of tokens

    Raises:
        LexerError: If strict and the source holds unrecognized input
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize(strict)
