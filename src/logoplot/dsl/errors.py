"""
Turtle-language exceptions and error handling.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Runtime (evaluation) errors
- W4xx: Runtime warnings
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Sequence
from .tokens import SourceSpan


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: SourceSpan
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        loc = f"{self.span.start}"
        parts.append(f"{loc}: {self.severity.value}[{self.code}]: {self.message}")

        # Source line with caret
        if show_source and self.source_line is not None:
            parts.append(f"  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            end_col = self.span.end.column if self.span.start.line == self.span.end.line else len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "range": {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            },
            "hints": self.hints,
        }


class DslError(Exception):
    """Base exception for turtle-language errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format()

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def span(self) -> SourceSpan:
        return self.diagnostic.span


class LexerError(DslError):
    """Unrecognized input found while lexing strictly (E0xx)."""
    pass


class ParserError(DslError):
    """
    Error during parsing (E1xx).

    The parser stops at the first structural mismatch; ``diagnostics`` holds
    every diagnostic gathered on the way there, primary diagnostic first.
    """

    def __init__(self, diagnostic: Diagnostic, related: Sequence[Diagnostic] = ()):
        super().__init__(diagnostic)
        self.diagnostics: List[Diagnostic] = [diagnostic, *related]

    def __str__(self) -> str:
        return "\n\n".join(d.format() for d in self.diagnostics)


class EvaluationError(DslError):
    """Error while executing a program (E4xx). Halts the run."""
    pass


class UndefinedVariableError(EvaluationError):
    """E401: reference to a variable that was never bound."""
    pass


class CoercionError(EvaluationError):
    """E402: value requested in a domain it cannot satisfy."""
    pass


class DivisionByZeroError(EvaluationError):
    """E403: division by zero."""
    pass


class PaletteIndexError(EvaluationError):
    """E404: pen color index outside the palette."""
    pass


class BindingTargetError(EvaluationError):
    """E405: MAKE/ADDASSIGN target is not a variable."""
    pass


class DrawingError(EvaluationError):
    """E406: the drawing primitive rejected a line segment."""
    pass


def _error(code: str, message: str, span: SourceSpan, source_line: Optional[str] = None,
           hints: Optional[List[str]] = None) -> Diagnostic:
    return Diagnostic(
        code=code,
        message=message,
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=hints or [],
    )


# --- Lexer error codes ---

def error_unrecognized_input(text: str, span: SourceSpan, source_line: str = None) -> LexerError:
    """E001: Input matching no token pattern."""
    return LexerError(_error(
        "E001", f"unrecognized input '{text}'", span, source_line,
        hints=["keywords are upper case; literals start with \" and variables with :"],
    ))


# --- Parser error codes ---

def error_unexpected_token(expected: str, found: str, span: SourceSpan,
                           source_line: str = None,
                           related: Sequence[Diagnostic] = ()) -> ParserError:
    """E101: Unexpected token."""
    return ParserError(
        _error("E101", f"expected {expected}, found {found}", span, source_line),
        related,
    )


def error_unexpected_eof(expected: str, span: SourceSpan, source_line: str = None) -> ParserError:
    """E102: Unexpected end of input."""
    return ParserError(_error("E102", f"unexpected end of input, expected {expected}", span, source_line))


def error_malformed_literal(text: str, span: SourceSpan, source_line: str = None) -> ParserError:
    """E103: Quoted literal that is neither a number nor a word."""
    return ParserError(_error(
        "E103", f"malformed literal '\"{text}'", span, source_line,
        hints=["literals are numbers like \"10 or \"-2.5, or words containing a letter"],
    ))


def error_bad_binding_target(procedure: str, span: SourceSpan, source_line: str = None) -> ParserError:
    """E104: First argument of MAKE/ADDASSIGN is not a bare name."""
    return ParserError(_error(
        "E104", f"first argument of {procedure} should be a variable name", span, source_line,
        hints=[f"write the name as a quoted word, e.g. {procedure} \"size ..."],
    ))


def error_extra_argument(procedure: str, span: SourceSpan, source_line: str = None) -> ParserError:
    """E105: Procedure followed by a further argument."""
    return ParserError(_error(
        "E105", f"too many arguments for {procedure}", span, source_line,
    ))


def error_empty_block(span: SourceSpan, source_line: str = None) -> ParserError:
    """E106: Block without statements."""
    return ParserError(_error("E106", "a block needs at least one statement", span, source_line))


# --- Runtime error codes ---

def error_undefined_variable(name: str, span: SourceSpan, source_line: str = None) -> UndefinedVariableError:
    """E401: Undefined variable."""
    return UndefinedVariableError(_error(
        "E401", f"variable '{name}' is not defined", span, source_line,
        hints=[f"bind it first with MAKE \"{name} ..."],
    ))


def error_coercion(what: str, domain: str, span: SourceSpan, source_line: str = None) -> CoercionError:
    """E402: Value cannot be used in the requested domain."""
    return CoercionError(_error("E402", f"{what} cannot be used as a {domain}", span, source_line))


def error_circular_variable(name: str, span: SourceSpan, source_line: str = None) -> CoercionError:
    """E402: Variable whose binding refers back to itself."""
    return CoercionError(_error("E402", f"variable '{name}' refers to itself", span, source_line))


def error_division_by_zero(span: SourceSpan, source_line: str = None) -> DivisionByZeroError:
    """E403: Division by zero."""
    return DivisionByZeroError(_error("E403", "division by zero", span, source_line))


def error_palette_index(index, size: int, span: SourceSpan, source_line: str = None) -> PaletteIndexError:
    """E404: Pen color index out of range."""
    return PaletteIndexError(_error(
        "E404", f"pen color {index} is out of range", span, source_line,
        hints=[f"valid pen colors are 0 to {size - 1}"],
    ))


def error_binding_target(procedure: str, span: SourceSpan, source_line: str = None) -> BindingTargetError:
    """E405: Binding procedure whose target is not a variable."""
    return BindingTargetError(_error(
        "E405", f"first argument of {procedure} should be a variable", span, source_line,
    ))


def error_drawing(message: str, span: SourceSpan, source_line: str = None) -> DrawingError:
    """E406: Drawing primitive failure."""
    return DrawingError(_error("E406", message, span, source_line))


# --- Warnings ---

def warning_contained_error(error: EvaluationError) -> Diagnostic:
    """W401: Error inside an IF block, contained and skipped."""
    inner = error.diagnostic
    return Diagnostic(
        code="W401",
        message=f"ignored error in IF block: [{inner.code}] {inner.message}",
        severity=ErrorSeverity.WARNING,
        span=inner.span,
        source_line=inner.source_line,
    )


class DiagnosticCollector:
    """Collects diagnostics during a compile or run."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == ErrorSeverity.ERROR:
            self._error_count += 1

    def add_error(self, error: DslError) -> None:
        """Add an error exception as a diagnostic (all of them, for parse errors)."""
        if isinstance(error, ParserError):
            for diagnostic in error.diagnostics:
                self.add(diagnostic)
        else:
            self.add(error.diagnostic)

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == ErrorSeverity.WARNING)

    @property
    def has_errors(self) -> bool:
        return self._error_count > 0

    @property
    def has_warnings(self) -> bool:
        return self.warning_count > 0

    def format_all(self, show_source: bool = True) -> str:
        """Format all diagnostics for display."""
        parts = [d.format(show_source) for d in self.diagnostics]
        if self._error_count > 0:
            parts.append(f"\n{self._error_count} error(s), {self.warning_count} warning(s)")
        elif self.warning_count > 0:
            parts.append(f"\n{self.warning_count} warning(s)")
        return "\n\n".join(parts)

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
            "warning_count": self.warning_count,
        }
