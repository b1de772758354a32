"""
JSON output adapter.

Renders violations as JSON for machine processing.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TextIO

from ec_lint.cli.output.base import OutputAdapter, OutputFormat

if TYPE_CHECKING:
    from ec_lint.core.errors import Violation
    from ec_lint.core.rules import CheckSummary


class JsonOutput(OutputAdapter):
    """JSON output adapter."""

    format = OutputFormat.JSON

    def __init__(self, stream: TextIO | None = None, color: bool = False, indent: int = 2):
        super().__init__(stream=stream, color=False)  # Never colorize JSON
        self.indent = indent

    def render_violations(
        self,
        violations: list[Violation],
        summary: CheckSummary | None = None,
    ) -> str:
        """Render violations as JSON."""
        output: dict[str, Any] = {
            "violations": [self._violation_to_dict(v) for v in violations],
        }

        if summary:
            output["summary"] = self._summary_to_dict(summary)

        return json.dumps(output, indent=self.indent, default=str)

    def _violation_to_dict(self, violation: Violation) -> dict[str, Any]:
        """Convert violation to dictionary."""
        return {
            "rule": violation.rule,
            "severity": violation.severity.value,
            "message": violation.message,
            "file_name": violation.file_name,
            "line_number": violation.line_number,
            "column_number": violation.column_number,
            "source": violation.source,
        }

    def _summary_to_dict(self, summary: CheckSummary) -> dict[str, Any]:
        """Convert summary to dictionary."""
        return {
            "engine_version": summary.engine_version,
            "files_checked": summary.files_checked,
            "files_with_violations": summary.files_with_violations,
            "fatal_count": summary.fatal_count,
            "error_count": summary.error_count,
            "total_violations": summary.total_violations,
            "has_errors": summary.has_errors,
            "top_rules": [{"rule": rule, "count": count} for rule, count in summary.top_rules],
            "duration_ms": summary.duration_ms,
        }
