"""
Loa exceptions and diagnostic reporting.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Runtime errors
- W4xx: Runtime warnings
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TextIO


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A single diagnostic message (error or warning)."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    line: Optional[int] = None      # 1-indexed source line, if known
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self) -> str:
        """Format the diagnostic for display."""
        parts = []

        header = f"{self.severity.value}[{self.code}]: {self.message}"
        if self.line is not None:
            header = f"line {self.line}: {header}"
        parts.append(header)

        if self.source_line is not None and self.line is not None:
            parts.append("    |")
            parts.append(f"{self.line:>3} | {self.source_line}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)


class LoaError(Exception):
    """Base exception for Loa errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexerError(LoaError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParserError(LoaError):
    """Error during parsing (E1xx)."""
    pass


class LoaRuntimeError(LoaError):
    """Fatal error during evaluation (E4xx)."""
    pass


# --- Lexer error codes ---

def error_unexpected_character(char: str, line: int, source_line: str = None) -> LexerError:
    """E001: Unexpected character."""
    diag = Diagnostic(
        code="E001",
        message=f"unexpected character {char!r}",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
    )
    return LexerError(diag)


def error_unterminated_string(line: int, source_line: str = None) -> LexerError:
    """E002: Unterminated string literal."""
    diag = Diagnostic(
        code="E002",
        message="unterminated string literal",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
        hints=['string literals must be closed with a matching "'],
    )
    return LexerError(diag)


def error_unterminated_comment(line: int, source_line: str = None) -> LexerError:
    """E004: Unterminated block comment."""
    diag = Diagnostic(
        code="E004",
        message="unterminated block comment (expected closing */)",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
    )
    return LexerError(diag)


def error_null_character(line: int, source_line: str = None) -> LexerError:
    """E009: Null character in source."""
    diag = Diagnostic(
        code="E009",
        message="null character in source",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
    )
    return LexerError(diag)


def error_incomplete_operator(char: str, line: int, source_line: str = None) -> LexerError:
    """E010: Lone '&' or '|'."""
    diag = Diagnostic(
        code="E010",
        message=f"unexpected character {char!r}",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
        hints=[f"did you mean '{char}{char}'?"],
    )
    return LexerError(diag)


# --- Parser error codes ---

def error_unexpected_token(expected: str, found: str, line: int,
                           source_line: str = None) -> ParserError:
    """E101: Unexpected token."""
    diag = Diagnostic(
        code="E101",
        message=f"expected {expected}, found {found}",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
    )
    return ParserError(diag)


def error_unexpected_eof(expected: str, line: int) -> ParserError:
    """E102: Unexpected end of input."""
    diag = Diagnostic(
        code="E102",
        message=f"unexpected end of input, expected {expected}",
        severity=ErrorSeverity.ERROR,
        line=line,
    )
    return ParserError(diag)


def error_invalid_expression(found: str, line: int, source_line: str = None) -> ParserError:
    """E103: Invalid expression."""
    diag = Diagnostic(
        code="E103",
        message=f"invalid expression starting at {found}",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
    )
    return ParserError(diag)


def error_for_unsupported(line: int, source_line: str = None) -> ParserError:
    """E104: for-loops are not supported."""
    diag = Diagnostic(
        code="E104",
        message="'for' loops are not supported",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
        hints=["use 'while (condition):' instead"],
    )
    return ParserError(diag)


def error_duplicate_parameter(name: str, line: int, source_line: str = None) -> ParserError:
    """E105: Duplicate parameter name."""
    diag = Diagnostic(
        code="E105",
        message=f"duplicate parameter '{name}'",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
    )
    return ParserError(diag)


def error_comma_separator(line: int, source_line: str = None) -> ParserError:
    """E106: ',' used between parameters."""
    diag = Diagnostic(
        code="E106",
        message="parameters must be separated by ';'",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
        hints=["use `;` instead of `,`"],
    )
    return ParserError(diag)


def error_invalid_assignment_target(found: str, line: int,
                                    source_line: str = None) -> ParserError:
    """E107: Left side of assignment is not a variable."""
    diag = Diagnostic(
        code="E107",
        message=f"cannot assign to {found}",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
    )
    return ParserError(diag)


def error_invalid_default(name: str, line: int, source_line: str = None) -> ParserError:
    """E108: Parameter default is not a literal."""
    diag = Diagnostic(
        code="E108",
        message=f"default value for parameter '{name}' must be a literal",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
    )
    return ParserError(diag)


def error_nesting_too_deep(line: int, source_line: str = None) -> ParserError:
    """E109: Expression nested beyond the parser's recursion limit."""
    diag = Diagnostic(
        code="E109",
        message="expression nested too deeply",
        severity=ErrorSeverity.ERROR,
        line=line,
        source_line=source_line,
        hints=["split the expression across several assignments"],
    )
    return ParserError(diag)


# --- Runtime error codes ---

def error_division_by_zero(line: Optional[int] = None) -> LoaRuntimeError:
    """E401: Integer division by zero."""
    diag = Diagnostic(
        code="E401",
        message="division by zero",
        severity=ErrorSeverity.ERROR,
        line=line,
    )
    return LoaRuntimeError(diag)


def error_evaluation_too_deep(line: Optional[int] = None) -> LoaRuntimeError:
    """E402: Program nested beyond the interpreter's recursion limit."""
    diag = Diagnostic(
        code="E402",
        message="expression nested too deeply to evaluate",
        severity=ErrorSeverity.ERROR,
        line=line,
    )
    return LoaRuntimeError(diag)


# --- Warnings ---

def warning_unused_else(line: Optional[int] = None) -> Diagnostic:
    """W401: An else block nested in a non-taken else-if was skipped."""
    return Diagnostic(
        code="W401",
        message="Unused else block ignored",
        severity=ErrorSeverity.WARNING,
        line=line,
    )


class DiagnosticCollector:
    """Collects the warnings raised while a program runs."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == ErrorSeverity.WARNING]

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def has_warnings(self) -> bool:
        return self.warning_count > 0


def report(diagnostic: Diagnostic, stream: Optional[TextIO] = None) -> None:
    """Write a formatted diagnostic to stderr (or the given stream)."""
    print(diagnostic.format(), file=stream if stream is not None else sys.stderr)
