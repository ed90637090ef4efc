"""
Execution context for the turtle interpreter.

Holds the turtle state and the flat variable environment for one run, and
collects warnings raised along the way.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..ast import Expression
from ..errors import Diagnostic, DiagnosticCollector
from ..tokens import SourceSpan
from ...drawable import DEFAULT_PEN_COLOR


@dataclass
class TurtleState:
    """
    Position, heading and pen of the turtle.

    Coordinates are canvas coordinates (y grows downward).  Heading is in
    degrees, 0 pointing up the canvas, and is never normalized.
    """
    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0
    pen_down: bool = False
    pen_color: int = DEFAULT_PEN_COLOR

    @classmethod
    def centered(cls, dimensions) -> "TurtleState":
        """Initial state: centre of a canvas of the given (width, height)."""
        width, height = dimensions
        return cls(x=width / 2.0, y=height / 2.0)

    @property
    def position(self):
        return (self.x, self.y)


@dataclass
class ExecutionContext:
    """
    The full execution context for one program run.

    Tracks:
    - Turtle state
    - Variable bindings (one flat namespace, name -> unevaluated Expression)
    - Diagnostics (warnings from contained errors)
    """
    turtle: TurtleState = field(default_factory=TurtleState)
    variables: Dict[str, Expression] = field(default_factory=dict)

    # Diagnostics
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)

    # Source tracking for error messages
    source_lines: List[str] = field(default_factory=list)

    def get_variable(self, name: str) -> Optional[Expression]:
        """Look up a variable binding."""
        return self.variables.get(name)

    def set_variable(self, name: str, value: Expression) -> None:
        """Bind or rebind a variable."""
        self.variables[name] = value

    def add_warning(self, diagnostic: Diagnostic) -> None:
        """Add a warning diagnostic."""
        self.diagnostics.add(diagnostic)

    def source_line(self, span: SourceSpan) -> Optional[str]:
        """Get the source line a span starts on, for error messages."""
        line_num = span.start.line
        if 1 <= line_num <= len(self.source_lines):
            return self.source_lines[line_num - 1]
        return None

    @property
    def has_warnings(self) -> bool:
        """Check if any warnings occurred."""
        return self.diagnostics.has_warnings


def create_context(dimensions, source: str = "") -> ExecutionContext:
    """
    Create a new execution context for a program run.

    Args:
        dimensions: (width, height) of the canvas; the turtle starts at its centre
        source: Original source code for error messages

    Returns:
        Fresh ExecutionContext
    """
    return ExecutionContext(
        turtle=TurtleState.centered(dimensions),
        source_lines=source.splitlines() if source else [],
    )
