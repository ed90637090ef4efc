"""
logoplot turtle language.

This module provides:
- Lexer: Tokenizes turtle source code
- Parser: Builds an AST from tokens
- Interpreter: Runs programs, drawing on a Drawable

Usage:
    from logoplot.dsl import parse_source, Interpreter
    from logoplot.ezdxf_drawable import ezdxfDraw

    program = parse_source('''
    PENDOWN
    MAKE "i "0
    WHILE LT :i "4 [
        FORWARD "100
        TURN "90
        ADDASSIGN "i "1
    ]
    ''')
    canvas = ezdxfDraw(500, 500)
    result = Interpreter(canvas).run(program)
    if result.success:
        canvas.saveas("square")
        canvas.display()
    else:
        print(result.error_message)
"""

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
    parse_source,
)

from .ast import (
    # Base
    AstNode,
    AstVisitor,
    # Expressions
    Expression,
    NumberLiteral,
    StringLiteral,
    VariableRef,
    MathOp,
    Query,
    BoolExpr,
    # Conditions
    Condition,
    Comparison,
    LogicalOp,
    # Statements
    Statement,
    PenCommand,
    TurtleCommand,
    MakeStatement,
    AddAssignStatement,
    Block,
    IfStatement,
    WhileStatement,
    Program,
    # Helpers
    print_ast,
)

from .errors import (
    DslError,
    LexerError,
    ParserError,
    EvaluationError,
    UndefinedVariableError,
    CoercionError,
    DivisionByZeroError,
    PaletteIndexError,
    BindingTargetError,
    DrawingError,
    Diagnostic,
    DiagnosticCollector,
    ErrorSeverity,
)

from .runtime import (
    Interpreter,
    ExecutionContext,
    ExecutionResult,
    TurtleState,
    execute,
    compile_and_run,
)

__all__ = [
    # Tokens
    "Token",
    "TokenType",
    "SourceLocation",
    "SourceSpan",
    "KEYWORDS",
    # Lexer
    "Lexer",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    "parse_source",
    # AST
    "AstNode",
    "AstVisitor",
    "Expression",
    "NumberLiteral",
    "StringLiteral",
    "VariableRef",
    "MathOp",
    "Query",
    "BoolExpr",
    "Condition",
    "Comparison",
    "LogicalOp",
    "Statement",
    "PenCommand",
    "TurtleCommand",
    "MakeStatement",
    "AddAssignStatement",
    "Block",
    "IfStatement",
    "WhileStatement",
    "Program",
    "print_ast",
    # Errors
    "DslError",
    "LexerError",
    "ParserError",
    "EvaluationError",
    "UndefinedVariableError",
    "CoercionError",
    "DivisionByZeroError",
    "PaletteIndexError",
    "BindingTargetError",
    "DrawingError",
    "Diagnostic",
    "DiagnosticCollector",
    "ErrorSeverity",
    # Runtime
    "Interpreter",
    "ExecutionContext",
    "ExecutionResult",
    "TurtleState",
    "execute",
    "compile_and_run",
]
