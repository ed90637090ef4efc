"""
Unit tests for the logoplot turtle-language parser.
"""

import textwrap

import pytest
from logoplot.dsl import (
    tokenize, parse, parse_source, Lexer, TokenType, ParserError,
    NumberLiteral, StringLiteral, VariableRef, MathOp, Query, BoolExpr,
    Comparison, LogicalOp,
    PenCommand, TurtleCommand, MakeStatement, AddAssignStatement,
    IfStatement, WhileStatement, Program, print_ast, AstVisitor,
)


def parse_one(source):
    """Parse a single-statement program and return the statement."""
    program = parse_source(source)
    assert len(program.statements) == 1
    return program.statements[0]


def parse_error(source) -> ParserError:
    with pytest.raises(ParserError) as exc_info:
        parse_source(source)
    return exc_info.value


class TestProcedures:
    """Test procedure parsing."""

    def test_pen_commands(self):
        """PENUP and PENDOWN take no argument."""
        program = parse_source("PENUP PENDOWN")
        assert [type(s) for s in program.statements] == [PenCommand, PenCommand]
        assert program.statements[0].down is False
        assert program.statements[1].down is True

    def test_forward_number(self):
        """Single-operand procedure with a numeric literal."""
        stmt = parse_one('FORWARD "100')
        assert isinstance(stmt, TurtleCommand)
        assert stmt.command == TokenType.FORWARD
        assert isinstance(stmt.argument, NumberLiteral)
        assert stmt.argument.value == 100.0

    def test_every_setter(self):
        """All nine single-operand procedures parse."""
        names = ["FORWARD", "BACK", "LEFT", "RIGHT", "SETPENCOLOR",
                 "TURN", "SETHEADING", "SETX", "SETY"]
        program = parse_source(" ".join(f'{n} "1' for n in names))
        assert [s.command.name for s in program.statements] == names

    def test_variable_argument(self):
        """Variables are arguments."""
        stmt = parse_one("SETX :x")
        assert stmt.argument == VariableRef(span=stmt.argument.span, name="x")

    def test_query_argument(self):
        """Queries are arguments."""
        stmt = parse_one("SETHEADING HEADING")
        assert isinstance(stmt.argument, Query)
        assert stmt.argument.kind == TokenType.HEADING

    def test_statement_span(self):
        """Statement spans cover keyword and argument."""
        stmt = parse_one('FORWARD "100')
        assert stmt.span.start.column == 1
        assert stmt.span.end.column == 13


class TestArguments:
    """Test prefix arithmetic and literal classification."""

    def test_prefix_math(self):
        """Operators take exactly two arguments."""
        stmt = parse_one('FORWARD + "1 * "2 "3')
        arg = stmt.argument
        assert isinstance(arg, MathOp)
        assert arg.operator == TokenType.PLUS
        assert arg.left.value == 1.0
        assert isinstance(arg.right, MathOp)
        assert arg.right.operator == TokenType.STAR

    def test_token_order_decides_nesting(self):
        """Operators nest by position alone."""
        stmt = parse_one('FORWARD - - "10 "2 "3')
        arg = stmt.argument
        assert isinstance(arg.left, MathOp)
        assert arg.right.value == 3.0

    def test_number_forms(self):
        """Integers, decimals and negative numbers are number literals."""
        for text, value in [("10", 10.0), ("-2.5", -2.5), (".5", 0.5), ("007", 7.0)]:
            stmt = parse_one(f'FORWARD "{text}')
            assert isinstance(stmt.argument, NumberLiteral)
            assert stmt.argument.value == value

    def test_string_literal(self):
        """A literal with a letter is a string."""
        stmt = parse_one('SETX "red')
        assert isinstance(stmt.argument, StringLiteral)
        assert stmt.argument.value == "red"

    def test_mixed_literal_is_string(self):
        """Letters anywhere make a string literal."""
        stmt = parse_one('SETX "1e5')
        assert isinstance(stmt.argument, StringLiteral)

    def test_malformed_literal(self):
        """A literal that is neither a number nor a word is rejected."""
        error = parse_error('FORWARD "1.2.3')
        assert error.code == "E103"

    def test_empty_literal_is_malformed(self):
        """A bare quote is not a valid literal."""
        error = parse_error('FORWARD "')
        assert error.code == "E103"


class TestBindings:
    """Test MAKE and ADDASSIGN."""

    def test_make_number(self):
        """MAKE target becomes a variable."""
        stmt = parse_one('MAKE "x "10')
        assert isinstance(stmt, MakeStatement)
        assert isinstance(stmt.target, VariableRef)
        assert stmt.target.name == "x"
        assert stmt.value.value == 10.0

    def test_make_condition(self):
        """MAKE accepts a condition as its value."""
        stmt = parse_one('MAKE "flag EQ :x "1')
        assert isinstance(stmt.value, BoolExpr)
        assert isinstance(stmt.value.condition, Comparison)

    def test_make_math(self):
        """MAKE accepts arithmetic."""
        stmt = parse_one('MAKE "r / "10 "2')
        assert isinstance(stmt.value, MathOp)

    def test_make_alias(self):
        """MAKE accepts a variable as its value."""
        stmt = parse_one('MAKE "y :x')
        assert isinstance(stmt.value, VariableRef)

    def test_addassign(self):
        """ADDASSIGN takes a name and a delta."""
        stmt = parse_one('ADDASSIGN "i "1')
        assert isinstance(stmt, AddAssignStatement)
        assert stmt.target.name == "i"
        assert stmt.delta.value == 1.0

    def test_numeric_target_rejected(self):
        """A number is not a name."""
        error = parse_error('MAKE "10 "1')
        assert error.code == "E104"
        assert "MAKE" in error.diagnostic.message

    def test_variable_target_rejected(self):
        """A variable reference is not a bare name."""
        error = parse_error('ADDASSIGN :i "1')
        assert error.code == "E104"
        assert "ADDASSIGN" in error.diagnostic.message

    def test_missing_value(self):
        """MAKE needs a value."""
        error = parse_error('MAKE "x PENUP')
        assert error.code == "E101"
        assert "EQ" in error.diagnostic.message
        assert "variable" in error.diagnostic.message


class TestConditionsAndControlFlow:
    """Test IF/WHILE and conditions."""

    def test_if(self):
        """IF with a comparison guard."""
        stmt = parse_one('IF EQ "1 "1 [ PENDOWN ]')
        assert isinstance(stmt, IfStatement)
        assert isinstance(stmt.guard, BoolExpr)
        assert stmt.guard.condition.operator == TokenType.EQ
        assert len(stmt.body.statements) == 1

    def test_while_with_variable_guard(self):
        """A variable may be a guard."""
        stmt = parse_one('WHILE :going [ FORWARD "1 ]')
        assert isinstance(stmt, WhileStatement)
        assert isinstance(stmt.guard, VariableRef)

    def test_logical_nesting(self):
        """AND/OR take two conditions."""
        stmt = parse_one('IF AND LT :i "3 OR GT :i "0 NE :i "2 [ PENUP ]')
        cond = stmt.guard.condition
        assert isinstance(cond, LogicalOp)
        assert cond.operator == TokenType.AND
        assert isinstance(cond.right, LogicalOp)
        assert cond.right.operator == TokenType.OR

    def test_nested_blocks(self):
        """Control flow nests."""
        source = textwrap.dedent('''
            WHILE LT :i "3 [
                IF EQ :i "1 [
                    PENDOWN
                    FORWARD "10
                ]
                ADDASSIGN "i "1
            ]
        ''')
        stmt = parse_one(source)
        inner = stmt.body.statements[0]
        assert isinstance(inner, IfStatement)
        assert len(inner.body.statements) == 2
        assert isinstance(stmt.body.statements[1], AddAssignStatement)

    def test_empty_block(self):
        """Blocks need a statement."""
        error = parse_error('IF EQ "1 "1 [ ]')
        assert error.code == "E106"

    def test_unclosed_block(self):
        """End of input inside a block."""
        error = parse_error('WHILE LT :i "3 [ PENDOWN')
        assert error.code == "E102"

    def test_argument_as_guard_rejected(self):
        """A literal is not a guard."""
        error = parse_error('IF "1 [ PENUP ]')
        assert error.code == "E101"

    def test_missing_bracket(self):
        """The block must open with '['."""
        error = parse_error('IF EQ "1 "1 PENDOWN')
        assert error.code == "E101"
        assert "'['" in error.diagnostic.message


class TestLookaheadRule:
    """A procedure may not be followed by something that could be an argument."""

    def test_pen_command_with_operand(self):
        """PENUP does not swallow a following literal."""
        error = parse_error('PENUP "10')
        assert error.code == "E105"
        assert "PENUP" in error.diagnostic.message

    def test_extra_argument(self):
        """FORWARD takes exactly one argument."""
        error = parse_error('FORWARD "10 "20')
        assert error.code == "E105"
        assert error.span.start.column == 13

    def test_query_after_procedure(self):
        """A query cannot follow a complete procedure."""
        error = parse_error('PENDOWN XCOR')
        assert error.code == "E105"

    def test_procedure_before_bracket(self):
        """A procedure may end a block."""
        stmt = parse_one('IF EQ "1 "1 [ PENDOWN ]')
        assert isinstance(stmt.body.statements[0], PenCommand)

    def test_extra_argument_after_make(self):
        """MAKE takes exactly two arguments."""
        error = parse_error('MAKE "x "1 "2')
        assert error.code == "E105"


class TestProgram:
    """Test whole-program parsing."""

    def test_statement_count(self):
        """Top-level node count equals the number of top-level statements."""
        source = textwrap.dedent('''
            PENDOWN
            MAKE "i "0
            WHILE LT :i "4 [ FORWARD "50 TURN "90 ADDASSIGN "i "1 ]
            IF EQ :i "4 [ PENUP ]
            SETX "10 SETY "10
        ''')
        program = parse_source(source)
        assert isinstance(program, Program)
        assert len(program) == 6

    def test_empty_program(self):
        """A program needs at least one statement."""
        error = parse_error("// nothing here\n")
        assert error.code == "E102"

    def test_stray_closing_bracket(self):
        """Trailing tokens are rejected."""
        error = parse_error('PENDOWN ]')
        assert error.code == "E101"
        assert "']'" in error.diagnostic.message

    def test_parse_accepts_token_list(self):
        """parse() accepts a token list."""
        program = parse(tokenize('PENUP'))
        assert len(program) == 1

    def test_parse_accepts_lexer(self):
        """parse() pulls tokens straight from a lexer."""
        program = parse(Lexer('PENUP PENDOWN'))
        assert len(program) == 2

    def test_parse_without_eof(self):
        """A token stream without EOF is closed off."""
        tokens = tokenize('PENUP')[:-1]
        program = parse(tokens)
        assert len(program) == 1


class TestDiagnostics:
    """Test parser error reporting."""

    def test_error_token_has_lexer_diagnostic(self):
        """An ERROR token brings its E001 diagnostic along."""
        error = parse_error('FORWARD 100')
        assert [d.code for d in error.diagnostics] == ["E101", "E001"]
        assert "unrecognized input" in error.diagnostics[0].message
        assert "'1'" in error.diagnostics[1].message

    def test_lowercase_keyword(self):
        """Lower-case keywords are reported as unrecognized."""
        error = parse_error('forward "10')
        assert error.diagnostics[1].code == "E001"
        assert "'forward'" in error.diagnostics[1].message

    def test_expected_lists_alternatives(self):
        """The message names every alternative that was tried."""
        error = parse_error('FORWARD PENUP')
        message = error.diagnostic.message
        for alternative in ("'+'", "'/'", "XCOR", "COLOR", "quoted literal", "variable"):
            assert alternative in message
        assert "found PENUP" in message

    def test_source_line_in_format(self):
        """Formatted errors show the line and a caret."""
        source = 'PENDOWN\nFORWARD "10 "20\n'
        with pytest.raises(ParserError) as exc_info:
            parse_source(source, "demo.lg")
        text = str(exc_info.value)
        assert "demo.lg:2:13" in text
        assert 'FORWARD "10 "20' in text
        assert "^^^" in text

    def test_json_diagnostic(self):
        """Diagnostics serialize for tools."""
        error = parse_error('PENUP "1')
        data = error.diagnostic.to_json()
        assert data["code"] == "E105"
        assert data["range"]["start"]["column"] == 7


class TestPrintAst:
    """Test the debug printer."""

    def test_print_ast(self):
        """print_ast renders node names and fields."""
        lines = []
        print_ast(parse_source('MAKE "x + "1 "2'), out=lines.append)
        text = "\n".join(lines)
        assert "Program" in text
        assert "MakeStatement" in text
        assert "operator: PLUS" in text
        assert "name: 'x'" in text

    def test_accept_dispatches_by_node_type(self):
        """accept() calls visit_<NodeName> and falls back to generic_visit."""

        class CommandNames(AstVisitor):
            def visit_Program(self, node):
                return [stmt.accept(self) for stmt in node.statements]

            def visit_TurtleCommand(self, node):
                return node.command.name

            def generic_visit(self, node):
                return node.__class__.__name__

        program = parse_source('PENDOWN FORWARD "10 TURN "90')
        assert program.accept(CommandNames()) == ["PenCommand", "FORWARD", "TURN"]

    def test_generic_visit_required(self):
        """The base visitor rejects nodes it has no method for."""
        with pytest.raises(NotImplementedError):
            parse_source('PENUP').accept(AstVisitor())
