"""
Error models.

This module defines the violation record produced by check and the
exceptions raised by the document model and the engine.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Severity(Enum):
    """Violation severity levels."""

    FATAL = "fatal"  # File could not be processed at all
    ERROR = "error"  # Rule violation


class Violation(BaseModel, frozen=True):
    """
    A single rule violation found by check.

    Line and column numbers are 1-based. ``source`` holds the offending
    substring where one exists.
    """

    rule: str = Field(description="Name of the rule that reported this violation")
    message: str = Field(description="Human readable message")
    severity: Severity = Field(default=Severity.ERROR)
    line_number: int | None = Field(default=None, ge=1)
    column_number: int | None = Field(default=None, ge=1)
    source: str | None = Field(default=None, description="Offending substring")
    file_name: str | None = None

    @classmethod
    def fatal(cls, message: str, *, file_name: str | None = None, rule: str = "io") -> Violation:
        """Create a FATAL violation for a file that could not be processed."""
        return cls(rule=rule, message=message, severity=Severity.FATAL, file_name=file_name)

    def for_file(self, file_name: str | None) -> Violation:
        """Return a copy attributed to ``file_name``."""
        if file_name is None or file_name == self.file_name:
            return self
        return self.model_copy(update={"file_name": file_name})

    def __str__(self) -> str:
        """Format violation for display."""
        parts = []
        if self.file_name:
            parts.append(self.file_name)
        if self.line_number is not None:
            parts.append(f"line {self.line_number}")
        if self.column_number is not None:
            parts.append(f"col {self.column_number}")
        location = ", ".join(parts) if parts else "<unknown>"
        return f"{location}: {self.message} [{self.rule}]"


# =============================================================================
# Exceptions
# =============================================================================


class EcLintError(Exception):
    """Base class for ec-lint errors."""


class InvalidBomError(EcLintError):
    """A byte order mark is not one of the supported signatures."""

    def __init__(self, bom: bytes, reason: str = "invalid or unsupported BOM") -> None:
        self.bom = bom
        super().__init__(f"{reason}: {bom.hex(' ') or '<empty>'}")


class InvalidConfigurationError(EcLintError):
    """Settings or command options cannot be used together."""
