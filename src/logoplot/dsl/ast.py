"""
Abstract Syntax Tree (AST) node definitions for the logoplot turtle language.

The AST is a pure data model: an owned tree built once by the parser and
only read by the interpreter.  Every node carries the span of source text
it was parsed from for error reporting.

Node families:
- Expressions: literals, variable references, prefix math, queries, and
  BoolExpr wrapping a Condition
- Conditions: comparisons (EQ/NE/LT/GT) and logical combinations (AND/OR)
- Statements: pen, turtle and binding procedures, IF/WHILE control flow
"""

from dataclasses import dataclass
from typing import List, Union, Any
from abc import ABC
from .tokens import SourceSpan, TokenType


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode(ABC):
    """Base class for all AST nodes."""
    span: SourceSpan  # Source location for error reporting

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class Expression(AstNode):
    """Base class for all value-producing nodes."""
    pass


@dataclass
class NumberLiteral(Expression):
    """A numeric literal (e.g., "100, "-2.5)."""
    value: float


@dataclass
class StringLiteral(Expression):
    """A word literal (e.g., "red)."""
    value: str


@dataclass
class VariableRef(Expression):
    """A variable reference (e.g., :size)."""
    name: str


@dataclass
class MathOp(Expression):
    """A prefix arithmetic operation (e.g., + :x "1)."""
    operator: TokenType  # PLUS, MINUS, STAR, SLASH
    left: Expression
    right: Expression


@dataclass
class Query(Expression):
    """A read of turtle state: XCOR, YCOR, HEADING or COLOR."""
    kind: TokenType


@dataclass
class BoolExpr(Expression):
    """A condition used as a value (IF guard, MAKE value)."""
    condition: "Condition"


# =============================================================================
# Condition Nodes
# =============================================================================

@dataclass
class Condition(AstNode):
    """Base class for boolean-valued nodes."""
    pass


@dataclass
class Comparison(Condition):
    """A relational test (e.g., LT :i "3)."""
    operator: TokenType  # EQ, NE, LT, GT
    left: Expression
    right: Expression


@dataclass
class LogicalOp(Condition):
    """A logical combination of two conditions (e.g., AND EQ .. .. GT .. ..)."""
    operator: TokenType  # AND, OR
    left: Condition
    right: Condition


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class Statement(AstNode):
    """Base class for statements."""
    pass


@dataclass
class PenCommand(Statement):
    """PENUP or PENDOWN."""
    command: TokenType

    @property
    def down(self) -> bool:
        return self.command == TokenType.PENDOWN


@dataclass
class TurtleCommand(Statement):
    """A single-operand procedure (e.g., FORWARD "100, SETX :x)."""
    command: TokenType
    argument: Expression


@dataclass
class MakeStatement(Statement):
    """Variable binding (e.g., MAKE "size "10)."""
    target: VariableRef
    value: Expression


@dataclass
class AddAssignStatement(Statement):
    """Variable increment (e.g., ADDASSIGN "i "1)."""
    target: VariableRef
    delta: Expression


@dataclass
class Block(AstNode):
    """A bracket-delimited, non-empty list of statements."""
    statements: List[Statement]


@dataclass
class IfStatement(Statement):
    """Run the block once when the guard holds.

    Syntax:
        IF condition-or-variable [ statements ]
    """
    guard: Union[BoolExpr, VariableRef]
    body: Block


@dataclass
class WhileStatement(Statement):
    """Run the block for as long as the guard holds."""
    guard: Union[BoolExpr, VariableRef]
    body: Block


@dataclass
class Program(AstNode):
    """A complete script: the ordered top-level statements."""
    statements: List[Statement]

    def __len__(self) -> int:
        return len(self.statements)


# =============================================================================
# Visitor Helpers
# =============================================================================

class PrintVisitor(AstVisitor):
    """Debug visitor that prints the AST structure."""

    def __init__(self, indent: int = 0, out=print):
        self.indent = indent
        self.out = out

    def _print(self, text: str) -> None:
        self.out("  " * self.indent + text)

    def _child(self) -> "PrintVisitor":
        return PrintVisitor(self.indent + 2, self.out)

    def generic_visit(self, node: AstNode) -> None:
        self._print(f"{node.__class__.__name__}")
        for name, value in node.__dict__.items():
            if name == "span":
                continue
            if isinstance(value, AstNode):
                self._print(f"  {name}:")
                value.accept(self._child())
            elif isinstance(value, list):
                self._print(f"  {name}: [")
                for item in value:
                    if isinstance(item, AstNode):
                        item.accept(self._child())
                    else:
                        self._print(f"    {item!r}")
                self._print("  ]")
            elif isinstance(value, TokenType):
                self._print(f"  {name}: {value.name}")
            else:
                self._print(f"  {name}: {value!r}")


def print_ast(node: AstNode, out=print) -> None:
    """Print an AST node for debugging."""
    node.accept(PrintVisitor(out=out))
