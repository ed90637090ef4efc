"""
Tree-walking interpreter for turtle programs.

Evaluates AST nodes against an ExecutionContext and drives a Drawable.
Every evaluation failure is raised as an EvaluationError subclass and
turned into a failed ExecutionResult at the top of the run.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Union

from .context import ExecutionContext, TurtleState, create_context

from ..ast import (
    Program, Statement, Block,
    PenCommand, TurtleCommand, MakeStatement, AddAssignStatement,
    IfStatement, WhileStatement,
    Expression, NumberLiteral, StringLiteral, VariableRef, MathOp, Query, BoolExpr,
    Condition, Comparison, LogicalOp,
)
from ..errors import (
    DslError, EvaluationError, ParserError, DiagnosticCollector,
    error_undefined_variable,
    error_coercion,
    error_circular_variable,
    error_division_by_zero,
    error_palette_index,
    error_binding_target,
    error_drawing,
    warning_contained_error,
)
from ..tokens import TokenType
from ...drawable import Drawable, OutOfBoundsError, BadColorError

logger = logging.getLogger(__name__)

NO_VARIABLES: FrozenSet[str] = frozenset()


def format_number(value: float) -> str:
    """Render a number the way a script would write it."""
    return f"{value:g}"


def describe_expression(expr: Expression) -> str:
    """Short human-readable description of an expression for error messages."""
    if isinstance(expr, NumberLiteral):
        return f'number "{format_number(expr.value)}'
    if isinstance(expr, StringLiteral):
        return f'word "{expr.value}'
    if isinstance(expr, VariableRef):
        return f"variable :{expr.name}"
    if isinstance(expr, Query):
        return f"query {expr.kind.name}"
    if isinstance(expr, MathOp):
        return "arithmetic expression"
    if isinstance(expr, BoolExpr):
        return "condition"
    return type(expr).__name__


@dataclass
class ExecutionResult:
    """Result of running a program."""
    success: bool
    error: Optional[DslError] = None
    error_message: Optional[str] = None
    turtle: Optional[TurtleState] = None
    variables: Dict[str, Expression] = field(default_factory=dict)
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)


class Interpreter:
    """
    Tree-walking interpreter for turtle programs.

    Evaluates AST nodes by dispatching to type-specific methods.  Errors
    inside IF blocks halt the run like any other error unless
    ``contain_block_errors`` is set, in which case they are recorded as
    warnings and the block carries on with its next statement.
    """

    def __init__(self, drawable: Drawable, contain_block_errors: bool = False):
        self.drawable = drawable
        self.contain_block_errors = contain_block_errors

    def run(self, program: Program, source: str = "") -> ExecutionResult:
        """
        Execute a program.

        Args:
            program: The parsed program
            source: Original source code for error messages

        Returns:
            ExecutionResult with the final turtle state and bindings
        """
        ctx = create_context(self.drawable.dimensions(), source)
        logger.debug("running %d statement(s)", len(program.statements))

        try:
            self._execute_statements(program.statements, ctx)
        except EvaluationError as e:
            logger.debug("run halted: [%s] %s", e.code, e.diagnostic.message)
            ctx.diagnostics.add_error(e)
            return ExecutionResult(
                success=False,
                error=e,
                error_message=str(e),
                turtle=ctx.turtle,
                variables=ctx.variables,
                diagnostics=ctx.diagnostics,
            )

        if ctx.has_warnings:
            logger.debug("run finished with %d contained error(s)", ctx.diagnostics.warning_count)
        return ExecutionResult(
            success=True,
            turtle=ctx.turtle,
            variables=ctx.variables,
            diagnostics=ctx.diagnostics,
        )

    # =========================================================================
    # Statements
    # =========================================================================

    def _execute_statements(self, statements, ctx: ExecutionContext) -> None:
        for stmt in statements:
            self._execute_statement(stmt, ctx)

    def _execute_statement(self, stmt: Statement, ctx: ExecutionContext) -> None:
        """Execute a statement."""
        logger.debug("%s: %s", stmt.span.start, type(stmt).__name__)
        if isinstance(stmt, PenCommand):
            ctx.turtle.pen_down = stmt.down
        elif isinstance(stmt, TurtleCommand):
            self._execute_turtle_command(stmt, ctx)
        elif isinstance(stmt, MakeStatement):
            self._execute_make(stmt, ctx)
        elif isinstance(stmt, AddAssignStatement):
            self._execute_add_assign(stmt, ctx)
        elif isinstance(stmt, IfStatement):
            self._execute_if_statement(stmt, ctx)
        elif isinstance(stmt, WhileStatement):
            self._execute_while(stmt, ctx)
        elif isinstance(stmt, Block):
            self._execute_statements(stmt.statements, ctx)
        else:
            raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

    def _execute_turtle_command(self, stmt: TurtleCommand, ctx: ExecutionContext) -> None:
        """Execute one of the single-operand procedures."""
        value = self._number(stmt.argument, ctx)
        turtle = ctx.turtle
        command = stmt.command

        if command == TokenType.FORWARD:
            self._move(stmt, ctx, turtle.heading, value)
        elif command == TokenType.BACK:
            self._move(stmt, ctx, turtle.heading, -value)
        elif command == TokenType.LEFT:
            self._move(stmt, ctx, turtle.heading - 90.0, value)
        elif command == TokenType.RIGHT:
            self._move(stmt, ctx, turtle.heading - 90.0, -value)
        elif command == TokenType.TURN:
            turtle.heading += value
        elif command == TokenType.SETHEADING:
            turtle.heading = value
        elif command == TokenType.SETX:
            turtle.x = value
        elif command == TokenType.SETY:
            turtle.y = value
        elif command == TokenType.SETPENCOLOR:
            if not math.isfinite(value):
                raise error_palette_index(
                    format_number(value), len(self.drawable.palette), stmt.argument.span,
                    ctx.source_line(stmt.span))
            index = int(value)  # truncates toward zero
            try:
                turtle.pen_color = self.drawable.color_index(index)
            except BadColorError:
                raise error_palette_index(
                    index, len(self.drawable.palette), stmt.argument.span, ctx.source_line(stmt.span)
                ) from None
        else:
            raise TypeError(f"Unknown turtle command: {command.name}")

    def _move(self, stmt: Statement, ctx: ExecutionContext, heading: float, distance: float) -> None:
        """Move the turtle, drawing from the pre-move position when the pen is down."""
        turtle = ctx.turtle
        x, y = turtle.position
        if turtle.pen_down:
            logger.debug("draw from (%g, %g) heading %g distance %g color %d",
                         x, y, heading, distance, turtle.pen_color)
            try:
                end = self.drawable.draw_line(x, y, heading, distance, turtle.pen_color)
            except OutOfBoundsError as e:
                raise error_drawing(str(e), stmt.span, ctx.source_line(stmt.span)) from e
            except BadColorError:
                raise error_palette_index(
                    turtle.pen_color, len(self.drawable.palette), stmt.span, ctx.source_line(stmt.span)
                ) from None
        else:
            try:
                end = self.drawable.end_coordinates(x, y, heading, distance)
            except OutOfBoundsError as e:
                raise error_drawing(str(e), stmt.span, ctx.source_line(stmt.span)) from e
        turtle.x, turtle.y = end

    def _binding_target(self, stmt: Union[MakeStatement, AddAssignStatement],
                        procedure: str, ctx: ExecutionContext) -> str:
        if not isinstance(stmt.target, VariableRef):
            raise error_binding_target(procedure, stmt.target.span, ctx.source_line(stmt.span))
        return stmt.target.name

    def _execute_make(self, stmt: MakeStatement, ctx: ExecutionContext) -> None:
        """Bind a variable.  Arithmetic is reduced now; anything else is bound as-is."""
        name = self._binding_target(stmt, "MAKE", ctx)
        value = stmt.value
        if isinstance(value, MathOp):
            value = self.reduce_math(value, ctx)
        ctx.set_variable(name, value)

    def _execute_add_assign(self, stmt: AddAssignStatement, ctx: ExecutionContext) -> None:
        """Add a numeric delta to a bound numeric variable."""
        name = self._binding_target(stmt, "ADDASSIGN", ctx)
        current = self._number(stmt.target, ctx)
        delta = self._number(stmt.delta, ctx)
        ctx.set_variable(name, NumberLiteral(span=stmt.span, value=current + delta))

    def _execute_if_statement(self, stmt: IfStatement, ctx: ExecutionContext) -> None:
        """Execute the block once if the guard holds."""
        if not self._boolean(stmt.guard, ctx):
            return
        for body_stmt in stmt.body.statements:
            if not self.contain_block_errors:
                self._execute_statement(body_stmt, ctx)
                continue
            try:
                self._execute_statement(body_stmt, ctx)
            except EvaluationError as e:
                logger.warning("%s: ignored error in IF block: [%s] %s",
                               e.span.start, e.code, e.diagnostic.message)
                ctx.add_warning(warning_contained_error(e))

    def _execute_while(self, stmt: WhileStatement, ctx: ExecutionContext) -> None:
        """Execute the block for as long as the guard holds, re-checking after each pass."""
        while self._boolean(stmt.guard, ctx):
            self._execute_statements(stmt.body.statements, ctx)

    # =========================================================================
    # Coercions
    # =========================================================================

    def _resolve(self, ref: VariableRef, ctx: ExecutionContext,
                 seen: FrozenSet[str]) -> Expression:
        """Look up the expression bound to a variable, refusing binding cycles."""
        if ref.name in seen:
            raise error_circular_variable(ref.name, ref.span, ctx.source_line(ref.span))
        bound = ctx.get_variable(ref.name)
        if bound is None:
            raise error_undefined_variable(ref.name, ref.span, ctx.source_line(ref.span))
        return bound

    def to_float(self, expr: Expression, ctx: ExecutionContext,
                 seen: FrozenSet[str] = NO_VARIABLES) -> Optional[float]:
        """Numeric value of an expression, or None if it has none."""
        if isinstance(expr, NumberLiteral):
            return expr.value
        if isinstance(expr, VariableRef):
            return self.to_float(self._resolve(expr, ctx, seen), ctx, seen | {expr.name})
        if isinstance(expr, MathOp):
            return self.reduce_math(expr, ctx, seen).value
        if isinstance(expr, Query):
            return self._query(expr, ctx)
        return None

    def to_string(self, expr: Expression, ctx: ExecutionContext,
                  seen: FrozenSet[str] = NO_VARIABLES) -> Optional[str]:
        """String value of an expression, or None if it has none."""
        if isinstance(expr, StringLiteral):
            return expr.value
        if isinstance(expr, VariableRef):
            return self.to_string(self._resolve(expr, ctx, seen), ctx, seen | {expr.name})
        return None

    def to_bool(self, expr: Expression, ctx: ExecutionContext,
                seen: FrozenSet[str] = NO_VARIABLES) -> Optional[bool]:
        """Boolean value of an expression, or None if it has none."""
        if isinstance(expr, BoolExpr):
            return self.evaluate_condition(expr.condition, ctx, seen)
        if isinstance(expr, VariableRef):
            return self.to_bool(self._resolve(expr, ctx, seen), ctx, seen | {expr.name})
        return None

    def _number(self, expr: Expression, ctx: ExecutionContext,
                seen: FrozenSet[str] = NO_VARIABLES) -> float:
        value = self.to_float(expr, ctx, seen)
        if value is None:
            raise error_coercion(describe_expression(expr), "number", expr.span, ctx.source_line(expr.span))
        return value

    def _boolean(self, expr: Expression, ctx: ExecutionContext) -> bool:
        value = self.to_bool(expr, ctx)
        if value is None:
            raise error_coercion(describe_expression(expr), "condition", expr.span, ctx.source_line(expr.span))
        return value

    def _query(self, query: Query, ctx: ExecutionContext) -> float:
        turtle = ctx.turtle
        if query.kind == TokenType.XCOR:
            return turtle.x
        if query.kind == TokenType.YCOR:
            return turtle.y
        if query.kind == TokenType.HEADING:
            return turtle.heading
        if query.kind == TokenType.COLOR:
            return float(turtle.pen_color)
        raise TypeError(f"Unknown query: {query.kind.name}")

    def reduce_math(self, op: MathOp, ctx: ExecutionContext,
                    seen: FrozenSet[str] = NO_VARIABLES) -> NumberLiteral:
        """
        Reduce an arithmetic expression to a number literal.

        Raises:
            CoercionError: An operand has no numeric value
            DivisionByZeroError: The divisor is zero
        """
        left = self._number(op.left, ctx, seen)
        right = self._number(op.right, ctx, seen)

        if op.operator == TokenType.PLUS:
            result = left + right
        elif op.operator == TokenType.MINUS:
            result = left - right
        elif op.operator == TokenType.STAR:
            result = left * right
        elif op.operator == TokenType.SLASH:
            if right == 0:
                raise error_division_by_zero(op.span, ctx.source_line(op.span))
            result = left / right
        else:
            raise TypeError(f"Unknown arithmetic operator: {op.operator.name}")

        return NumberLiteral(span=op.span, value=result)

    # =========================================================================
    # Conditions
    # =========================================================================

    def evaluate_condition(self, cond: Condition, ctx: ExecutionContext,
                           seen: FrozenSet[str] = NO_VARIABLES) -> bool:
        """Evaluate a condition.  AND/OR always evaluate both sides."""
        if isinstance(cond, LogicalOp):
            left = self.evaluate_condition(cond.left, ctx, seen)
            right = self.evaluate_condition(cond.right, ctx, seen)
            if cond.operator == TokenType.AND:
                return left and right
            return left or right

        if not isinstance(cond, Comparison):
            raise TypeError(f"Unknown condition type: {type(cond).__name__}")

        if cond.operator in (TokenType.EQ, TokenType.NE):
            # One result per domain (number, boolean, string) admitting both sides
            results = []
            for coerce in (self.to_float, self.to_bool, self.to_string):
                left = coerce(cond.left, ctx, seen)
                right = coerce(cond.right, ctx, seen)
                if left is not None and right is not None:
                    results.append(left == right)
            if cond.operator == TokenType.EQ:
                return any(results)
            return bool(results) and not any(results)

        left = self._number(cond.left, ctx, seen)
        right = self._number(cond.right, ctx, seen)
        if cond.operator == TokenType.LT:
            return left < right
        if cond.operator == TokenType.GT:
            return left > right
        raise TypeError(f"Unknown comparison operator: {cond.operator.name}")


# Convenience function for simple execution
def execute(program: Program, drawable: Drawable, source: str = "",
            contain_block_errors: bool = False) -> ExecutionResult:
    """
    Execute a parsed program on a drawable.

    This is a convenience wrapper around Interpreter.run().
    """
    interpreter = Interpreter(drawable, contain_block_errors)
    return interpreter.run(program, source)


def compile_and_run(source: str, drawable: Drawable, filename: Optional[str] = None,
                    contain_block_errors: bool = False) -> ExecutionResult:
    """
    High-level API to parse and run turtle source in one call.

        from logoplot.drawable import Drawable
        from logoplot.dsl import compile_and_run

        result = compile_and_run('PENDOWN FORWARD "100', Drawable())
        if not result.success:
            print(result.error_message)

    Args:
        source: Turtle source code as a string
        drawable: Canvas to draw on
        filename: Optional filename for error messages
        contain_block_errors: Record errors inside IF blocks as warnings

    Returns:
        ExecutionResult; syntax errors give a failed result, never an exception
    """
    from ..parser import parse_source

    try:
        program = parse_source(source, filename)
    except ParserError as e:
        diagnostics = DiagnosticCollector()
        diagnostics.add_error(e)
        return ExecutionResult(
            success=False,
            error=e,
            error_message=str(e),
            diagnostics=diagnostics,
        )

    return execute(program, drawable, source, contain_block_errors)
