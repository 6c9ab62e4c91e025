"""
phpcore exceptions and diagnostics.

Most failures in the core are reported as return values (False, None or an
unsuccessful ExecutionResult). Exceptions are reserved for programming
errors such as touching a released value.

Error code ranges:
- E0xx: Lexer errors (reserved; the lexer never fails)
- E1xx: Value lifetime errors
- E2xx: Engine state and precondition errors
- E3xx: I/O errors
- W4xx / N4xx: Runtime warnings and notices
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .tokens import SourceLocation


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"
    INFO = "info"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E101, W401, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    location: Optional[SourceLocation] = None
    hints: List[str] = field(default_factory=list)

    def format(self) -> str:
        """Format the diagnostic for display."""
        header = f"{self.severity.value}[{self.code}]: {self.message}"
        if self.location is not None:
            header = f"{self.location}: {header}"
        parts = [header]
        for hint in self.hints:
            parts.append(f"    = hint: {hint}")
        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        data = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.location is not None:
            data["location"] = {
                "line": self.location.line,
                "column": self.location.column,
            }
        return data


class PhpCoreError(Exception):
    """Base exception for phpcore errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format()


class ValueReleasedError(PhpCoreError):
    """A value was used or released after its reference count reached zero (E1xx)."""
    pass


class EngineStateError(PhpCoreError):
    """An engine operation was attempted in the wrong state (E2xx)."""
    pass


# --- Value lifetime errors ---

def error_value_released(type_name: str) -> ValueReleasedError:
    """E101: Use of a released value."""
    diag = Diagnostic(
        code="E101",
        message=f"{type_name} value used after release",
        severity=ErrorSeverity.ERROR,
        hints=["call ref() before storing a value in a second place"],
    )
    return ValueReleasedError(diag)


def error_double_release(type_name: str) -> ValueReleasedError:
    """E102: Release of an already released value."""
    diag = Diagnostic(
        code="E102",
        message=f"{type_name} value released more than once",
        severity=ErrorSeverity.ERROR,
    )
    return ValueReleasedError(diag)


# --- Engine errors ---

def error_wrong_state(operation: str, expected: str, found: str) -> EngineStateError:
    """E201: Engine is in the wrong state for an operation."""
    diag = Diagnostic(
        code="E201",
        message=f"cannot {operation}: engine is {found}, expected {expected}",
        severity=ErrorSeverity.ERROR,
    )
    return EngineStateError(diag)


def diagnostic_unbalanced(kind: str, count: int,
                          location: Optional[SourceLocation] = None) -> Diagnostic:
    """E202: Unbalanced braces or parentheses found by the syntax check."""
    return Diagnostic(
        code="E202",
        message=f"unbalanced {kind} (net count {count:+d})",
        severity=ErrorSeverity.ERROR,
        location=location,
    )


# --- I/O errors ---

def diagnostic_open_failed(path: str, reason: str) -> Diagnostic:
    """E301: A source file could not be read."""
    return Diagnostic(
        code="E301",
        message=f"Failed to open file: {path} ({reason})",
        severity=ErrorSeverity.ERROR,
    )


class DiagnosticCollector:
    """Collects diagnostics reported by an engine."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == ErrorSeverity.ERROR:
            self._error_count += 1

    def add_error(self, error: PhpCoreError) -> None:
        """Add an error exception as a diagnostic."""
        self.add(error.diagnostic)

    def clear(self) -> None:
        self.diagnostics.clear()
        self._error_count = 0

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

    def format_all(self) -> str:
        """Format all diagnostics for display."""
        parts = [d.format() for d in self.diagnostics]
        if self._error_count > 0:
            parts.append(f"{self._error_count} error(s), {self.warning_count} warning(s)")
        elif self.warning_count > 0:
            parts.append(f"{self.warning_count} warning(s)")
        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
            "warning_count": self.warning_count,
        }
