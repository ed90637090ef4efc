"""
Turtle runtime - tree-walking interpreter for turtle programs.

This module provides:
- Interpreter: Executes programs against a Drawable
- ExecutionContext: Turtle state and variable bindings for one run
- ExecutionResult: Outcome of a run, with diagnostics
"""

from .context import (
    TurtleState,
    ExecutionContext,
    create_context,
)

from .interpreter import (
    Interpreter,
    ExecutionResult,
    execute,
    compile_and_run,
    describe_expression,
)

__all__ = [
    # Context
    "TurtleState",
    "ExecutionContext",
    "create_context",
    # Interpreter
    "Interpreter",
    "ExecutionResult",
    "execute",
    "compile_and_run",
    "describe_expression",
]
