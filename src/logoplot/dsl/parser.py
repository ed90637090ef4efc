"""
Recursive descent parser for the logoplot turtle language.

Converts a token stream into an Abstract Syntax Tree (AST).  Tokens are
pulled one at a time from any iterable (a token list or a live Lexer), with
a single token of lookahead.

Grammar:
    program    := statement+ EOF
    statement  := procedure | control
    procedure  := (PENUP | PENDOWN)
                | (FORWARD | BACK | LEFT | RIGHT | TURN | SETHEADING
                   | SETX | SETY | SETPENCOLOR) arg
                | MAKE name (arg | condition)
                | ADDASSIGN name arg
    control    := (IF | WHILE) (condition | VARIABLE) '[' statement+ ']'
    condition  := (EQ | NE | LT | GT) arg arg
                | (AND | OR) condition condition
    arg        := ('+' | '-' | '*' | '/') arg arg
                | WORD | VARIABLE | XCOR | YCOR | HEADING | COLOR

A procedure may not be followed by a token that could begin another arg.
"""

import re
from typing import Iterable, Iterator, List, Optional
from .tokens import (
    Token, TokenType, SourceLocation, SourceSpan, describe,
    PEN_PROCEDURES, UNARY_PROCEDURES, BINDING_PROCEDURES, CONTROL_FLOW,
    QUERIES, MATH_OPERATORS, COMPARISON_OPERATORS, LOGICAL_OPERATORS,
    ARG_START, STATEMENT_START,
)
from .ast import (
    # Expressions
    Expression, NumberLiteral, StringLiteral, VariableRef, MathOp, Query, BoolExpr,
    # Conditions
    Condition, Comparison, LogicalOp,
    # Statements
    Statement, PenCommand, TurtleCommand, MakeStatement, AddAssignStatement,
    Block, IfStatement, WhileStatement, Program,
)
from .errors import (
    error_unexpected_token,
    error_unexpected_eof,
    error_unrecognized_input,
    error_malformed_literal,
    error_bad_binding_target,
    error_extra_argument,
    error_empty_block,
)
from .lexer import Lexer

NUMBER_PATTERN = re.compile(r"^-?[0-9]*\.?[0-9]+$")
LETTER_PATTERN = re.compile(r"[A-Za-z]")

CONDITION_START = COMPARISON_OPERATORS | LOGICAL_OPERATORS
GUARD_START = CONDITION_START | {TokenType.VARIABLE}


def expected_one_of(token_types: Iterable[TokenType]) -> str:
    """Describe a set of alternatives, in declaration order."""
    names = [describe(t) for t in sorted(token_types, key=lambda t: t.value)]
    if len(names) == 1:
        return names[0]
    return "one of " + ", ".join(names)


class Parser:
    """
    Recursive descent parser for the turtle language.

    Usage:
        parser = Parser(tokens)
        program = parser.parse_program()

    There is no operator precedence: arithmetic and conditions are prefix
    with fixed arity two, so token order alone fixes the tree.  Parsing is
    not error-recovering; the first mismatch raises ParserError.
    """

    def __init__(self, tokens: Iterable[Token], filename: Optional[str] = None,
                 source: Optional[str] = None):
        self._tokens: Iterator[Token] = iter(tokens)
        self.filename = filename
        self.source = source  # Original source code for diagnostics
        self._lines = source.splitlines() if source is not None else []
        self._previous: Optional[Token] = None
        self._token = self._pull()

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _pull(self) -> Token:
        """Fetch the next token, synthesizing EOF if the stream runs dry."""
        token = next(self._tokens, None)
        if token is not None:
            return token
        if self._previous is not None:
            end = self._previous.span.end
        else:
            end = SourceLocation(1, 1, 0, self.filename)
        return Token(TokenType.EOF, None, "", SourceSpan(end, end))

    def _current(self) -> Token:
        """Get current token."""
        return self._token

    def _is_at_end(self) -> bool:
        """Check if at end of tokens."""
        return self._token.type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._token.type == token_type

    def _check_in(self, token_types) -> bool:
        """Check if current token is in a set of types."""
        return self._token.type in token_types

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._token
        if not self._is_at_end():
            self._previous = token
            self._token = self._pull()
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        self._error(expected)

    def _source_line(self, span: SourceSpan) -> Optional[str]:
        line = span.start.line
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        return None

    def _error(self, expected: str) -> None:
        """Raise a parser error at the current token."""
        token = self._token
        source_line = self._source_line(token.span)
        if token.type == TokenType.EOF:
            raise error_unexpected_eof(expected, token.span, source_line)
        related = []
        if token.type == TokenType.ERROR:
            related.append(error_unrecognized_input(token.lexeme, token.span, source_line).diagnostic)
        raise error_unexpected_token(expected, str(token), token.span, source_line, related)

    def _span_from(self, start: Token) -> SourceSpan:
        """Create a span from start token to the end of the last consumed token."""
        end_token = self._previous if self._previous is not None else start
        return SourceSpan(start.span.start, end_token.span.end)

    def _expect_no_argument(self, procedure: Token) -> None:
        """A procedure must not be followed by something that looks like an arg."""
        if self._check_in(ARG_START):
            token = self._token
            raise error_extra_argument(procedure.lexeme, token.span, self._source_line(token.span))

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_literal(self, token: Token) -> Expression:
        """Classify a quoted literal as a number or a word."""
        text = token.value
        if NUMBER_PATTERN.match(text):
            return NumberLiteral(span=token.span, value=float(text))
        if LETTER_PATTERN.search(text):
            return StringLiteral(span=token.span, value=text)
        raise error_malformed_literal(text, token.span, self._source_line(token.span))

    def _parse_arg(self) -> Expression:
        """Parse an argument: prefix math, literal, variable or query."""
        start = self._current()

        if self._check_in(MATH_OPERATORS):
            operator = self._advance().type
            left = self._parse_arg()
            right = self._parse_arg()
            return MathOp(span=self._span_from(start), operator=operator, left=left, right=right)

        if self._check(TokenType.WORD):
            return self._parse_literal(self._advance())

        if self._check(TokenType.VARIABLE):
            token = self._advance()
            return VariableRef(span=token.span, name=token.value)

        if self._check_in(QUERIES):
            token = self._advance()
            return Query(span=token.span, kind=token.type)

        self._error(expected_one_of(ARG_START))

    def _parse_condition(self) -> Condition:
        """Parse a prefix comparison or logical combination."""
        start = self._current()

        if self._check_in(COMPARISON_OPERATORS):
            operator = self._advance().type
            left = self._parse_arg()
            right = self._parse_arg()
            return Comparison(span=self._span_from(start), operator=operator, left=left, right=right)

        if self._check_in(LOGICAL_OPERATORS):
            operator = self._advance().type
            left = self._parse_condition()
            right = self._parse_condition()
            return LogicalOp(span=self._span_from(start), operator=operator, left=left, right=right)

        self._error(expected_one_of(CONDITION_START))

    def _parse_guard(self) -> Expression:
        """Parse an IF/WHILE guard: a condition or a variable."""
        if self._check(TokenType.VARIABLE):
            token = self._advance()
            return VariableRef(span=token.span, name=token.value)
        if self._check_in(CONDITION_START):
            condition = self._parse_condition()
            return BoolExpr(span=condition.span, condition=condition)
        self._error(expected_one_of(GUARD_START))

    def _parse_name(self, procedure: Token) -> VariableRef:
        """Parse the target of MAKE/ADDASSIGN: a bare word, read as a variable."""
        arg = self._parse_arg()
        if not isinstance(arg, StringLiteral):
            raise error_bad_binding_target(procedure.lexeme, arg.span, self._source_line(arg.span))
        return VariableRef(span=arg.span, name=arg.value)

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self) -> Statement:
        """Parse a single statement."""
        if self._check_in(PEN_PROCEDURES):
            return self._parse_pen_command()
        if self._check_in(UNARY_PROCEDURES):
            return self._parse_turtle_command()
        if self._check(TokenType.MAKE):
            return self._parse_make()
        if self._check(TokenType.ADDASSIGN):
            return self._parse_add_assign()
        if self._check_in(CONTROL_FLOW):
            return self._parse_control()
        self._error(expected_one_of(STATEMENT_START))

    def _parse_pen_command(self) -> PenCommand:
        token = self._advance()
        self._expect_no_argument(token)
        return PenCommand(span=token.span, command=token.type)

    def _parse_turtle_command(self) -> TurtleCommand:
        start = self._advance()
        argument = self._parse_arg()
        self._expect_no_argument(start)
        return TurtleCommand(span=self._span_from(start), command=start.type, argument=argument)

    def _parse_make(self) -> MakeStatement:
        """Parse MAKE name value, where value is an arg or a condition."""
        start = self._advance()
        target = self._parse_name(start)

        if self._check_in(CONDITION_START):
            condition = self._parse_condition()
            value = BoolExpr(span=condition.span, condition=condition)
        elif self._check_in(ARG_START):
            value = self._parse_arg()
        else:
            self._error(expected_one_of(ARG_START | CONDITION_START))

        self._expect_no_argument(start)
        return MakeStatement(span=self._span_from(start), target=target, value=value)

    def _parse_add_assign(self) -> AddAssignStatement:
        start = self._advance()
        target = self._parse_name(start)
        delta = self._parse_arg()
        self._expect_no_argument(start)
        return AddAssignStatement(span=self._span_from(start), target=target, delta=delta)

    def _parse_block(self) -> Block:
        """Parse '[' statement+ ']'."""
        start = self._consume(TokenType.LBRACKET, "'['")

        if self._check(TokenType.RBRACKET):
            token = self._advance()
            span = SourceSpan(start.span.start, token.span.end)
            raise error_empty_block(span, self._source_line(span))

        statements: List[Statement] = []
        while not self._check(TokenType.RBRACKET):
            if not self._check_in(STATEMENT_START):
                self._error(expected_one_of(STATEMENT_START | {TokenType.RBRACKET}))
            statements.append(self._parse_statement())
        self._advance()

        return Block(span=self._span_from(start), statements=statements)

    def _parse_control(self) -> Statement:
        """Parse IF/WHILE guard [ statements ]."""
        start = self._advance()
        guard = self._parse_guard()
        body = self._parse_block()
        if start.type == TokenType.IF:
            return IfStatement(span=self._span_from(start), guard=guard, body=body)
        return WhileStatement(span=self._span_from(start), guard=guard, body=body)

    # =========================================================================
    # Program Parsing
    # =========================================================================

    def parse_program(self) -> Program:
        """Parse a complete program: one or more statements, then EOF."""
        start = self._current()
        if self._is_at_end():
            self._error("a statement")

        statements: List[Statement] = []
        while not self._is_at_end():
            statements.append(self._parse_statement())

        return Program(span=self._span_from(start), statements=statements)


def parse(tokens: Iterable[Token], filename: Optional[str] = None,
          source: Optional[str] = None) -> Program:
    """
    Convenience function to parse tokens into a program.

    Args:
        tokens: Tokens from the lexer (a list, or the Lexer itself)
        filename: Optional filename for error messages
        source: Optional original source code for diagnostics

    Returns:
        Parsed Program AST

    Raises:
        ParserError: If parsing fails
    """
    parser = Parser(tokens, filename, source)
    return parser.parse_program()


def parse_source(source: str, filename: Optional[str] = None) -> Program:
    """Lex and parse source text in a single pass."""
    return parse(Lexer(source, filename), filename, source)
