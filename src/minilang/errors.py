"""
Minilang Error Hierarchy
========================

This module defines the exception hierarchy for the minilang compiler
and the diagnostic collection used by the parser.

Errors come in two tiers:

1. **Diagnostics** are syntax errors found while parsing. They are plain
   records (line number + message) collected by an ErrorLogger. Parsing
   never stops because of them; they are all reported together at the end
   and their presence suppresses code generation.

2. **Fatal errors** are exceptions. They abort the run immediately and
   indicate either bad input bytes or a broken internal invariant.

Exception Hierarchy
-------------------
MinilangError (base)
├── SourceDecodeError - input is not valid UTF-8
├── InternalCompilerError - internal invariant violated
├── CompilationError - aggregate of collected diagnostics
└── AssemblerError - external assembler failed

Diagnostic Format
-----------------
    Missing ')', line 3
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MinilangError(Exception):
    """
    Base exception for all minilang errors.

    Callers can catch every compiler failure with a single clause:

        try:
            compile_wat(source)
        except MinilangError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Fatal Errors
# =============================================================================

class SourceDecodeError(MinilangError):
    """
    Input bytes are not valid UTF-8.

    Attributes:
        offset: Byte offset of the first offending byte
        reason: Decoder explanation
    """

    def __init__(self, offset: int, reason: str):
        self.offset = offset
        self.reason = reason
        super().__init__(f"invalid UTF-8 at byte {offset}: {reason}")


class InternalCompilerError(MinilangError):
    """
    An internal invariant was violated.

    Raised for caller contract violations such as converting a token that
    is not an operator into an Operator, or asking an end-of-input
    character for its value. These are programming errors, never user
    input errors.
    """
    pass


class CompilationError(MinilangError):
    """
    Aggregate error carrying a formatted diagnostic report.

    The message is already the full report produced by ErrorLogger.report()
    and is passed through as-is.
    """

    def __init__(self, report: str, diagnostics: Optional[List["Diagnostic"]] = None):
        self.report = report
        self.diagnostics = list(diagnostics or [])
        super().__init__(report)


class AssemblerError(MinilangError):
    """
    The external assembler could not turn the text module into a binary.

    Attributes:
        command: The command line that was run
        stdout: Captured standard output (if any)
        stderr: Captured standard error (if any)
        return_code: Process exit status (None if it never ran)
    """

    def __init__(
        self,
        message: str,
        command: str = "",
        stdout: str = "",
        stderr: str = "",
        return_code: Optional[int] = None,
    ):
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
        self.return_code = return_code
        parts = [message]
        if command:
            parts.append(f"command: {command}")
        if stderr:
            parts.append(stderr.rstrip())
        super().__init__("\n".join(parts))


# =============================================================================
# Diagnostics
# =============================================================================

@dataclass(frozen=True)
class Diagnostic:
    """
    A syntax error tied to the source line active when it was detected.

    Attributes:
        line: Line number (1-indexed)
        message: Error description
    """
    line: int
    message: str

    def __str__(self) -> str:
        return f"{self.message}, line {self.line}"


class ErrorLogger:
    """
    Ordered, append-only collection of diagnostics.

    The parser pushes a diagnostic for every syntax error it finds and keeps
    going. Callers inspect the logger afterwards to decide whether code
    generation may run.

    Example:
        logger = ErrorLogger()
        logger.push(3, "Missing ')'")
        if logger.has_errors():
            print(logger.report())
    """

    def __init__(self):
        self._diagnostics: List[Diagnostic] = []

    def push(self, line: int, message: str) -> None:
        """Record a diagnostic."""
        self._diagnostics.append(Diagnostic(line, message))

    def has_errors(self) -> bool:
        """Return True if any diagnostics have been recorded."""
        return len(self._diagnostics) > 0

    def error_count(self) -> int:
        return len(self._diagnostics)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """A copy of the recorded diagnostics, in order."""
        return list(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._diagnostics[index]

    def report(self) -> str:
        """Format every diagnostic followed by a summary line."""
        lines = [str(diagnostic) for diagnostic in self._diagnostics]
        word = "error" if len(self._diagnostics) == 1 else "errors"
        lines.append(f"{len(self._diagnostics)} {word}")
        return "\n".join(lines)

    def raise_if_errors(self) -> None:
        """Raise a CompilationError if any diagnostics were recorded."""
        if self.has_errors():
            raise CompilationError(self.report(), self._diagnostics)

    def clear(self) -> None:
        self._diagnostics.clear()
