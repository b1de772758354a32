"""
Rule engine data models.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class RuleScope(Enum):
    """What a rule runs against."""

    LINE = "line"  # Once per line
    DOCUMENT = "document"  # Once per file


class TallyMode(Enum):
    """How infer aggregates a rule's observations."""

    VOTE = "vote"  # Frequency table, most common value wins
    MAXIMUM = "maximum"  # Running maximum
    NONE = "none"  # Not inferred


class CheckSummary(BaseModel):
    """Summary of a check run."""

    engine_version: str
    files_checked: int = 0
    files_with_violations: int = 0

    # Counts by severity
    fatal_count: int = 0
    error_count: int = 0

    # Top rules
    top_rules: list[tuple[str, int]] = Field(default_factory=list)

    # Timing
    duration_ms: int = 0

    @property
    def total_violations(self) -> int:
        """Total number of violations."""
        return self.fatal_count + self.error_count

    @property
    def has_errors(self) -> bool:
        """Check if there are any fatal or error violations."""
        return self.fatal_count > 0 or self.error_count > 0
