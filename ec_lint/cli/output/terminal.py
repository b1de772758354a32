"""
Terminal output adapter.

Lists violations under the file they belong to, one line per violation:

    src/main.py
      ✖ L3:C1: invalid indent style: found a leading tab, expected: space [indent_style]

ANSI colors are only used when the stream is a TTY. Symbols fall back to
ASCII when the stream cannot encode them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from ec_lint.cli.output.base import OutputAdapter, OutputFormat

if TYPE_CHECKING:
    from ec_lint.core.errors import Violation
    from ec_lint.core.rules import CheckSummary

# (unicode, ascii) per severity
_MARKS = {
    "fatal": ("✖", "X"),
    "error": ("✖", "X"),
}
_SUCCESS_MARK = ("✓", "OK")

_STYLES = {
    "fatal": "\033[1;31m",
    "error": "\033[31m",
    "success": "\033[32m",
    "file": "\033[1m",
    "rule": "\033[2m",
}
_RESET = "\033[0m"

# Rules named in the summary breakdown
_BREAKDOWN_SIZE = 3


def _can_encode(stream: TextIO, text: str) -> bool:
    try:
        text.encode(getattr(stream, "encoding", None) or "utf-8")
    except (UnicodeEncodeError, LookupError):
        return False
    return True


class TerminalOutput(OutputAdapter):
    """Human readable output, grouped by file."""

    format = OutputFormat.TERMINAL

    def __init__(self, stream: TextIO | None = None, color: bool = True):
        super().__init__(stream=stream, color=color)
        isatty = getattr(self.stream, "isatty", None)
        self._use_color = color and callable(isatty) and isatty()
        self._unicode = _can_encode(self.stream, "✖✓")

    def render_violations(
        self,
        violations: list[Violation],
        summary: CheckSummary | None = None,
    ) -> str:
        """Render violations grouped by file, followed by the summary line."""
        if not violations:
            return self.render_success("No issues found.")

        by_file: dict[str, list[Violation]] = {}
        for violation in violations:
            by_file.setdefault(violation.file_name or "<stdin>", []).append(violation)

        lines: list[str] = []
        for file_name, file_violations in by_file.items():
            lines.append("")
            lines.append(self._paint(file_name, "file"))
            lines.extend(self._format_violation(v) for v in file_violations)

        if summary:
            lines.append("")
            lines.append(self._format_summary(summary))

        return "\n".join(lines)

    def render_success(self, message: str) -> str:
        """Render a success line."""
        return self._paint(f"{self._mark(_SUCCESS_MARK)} {message}", "success")

    def render_failure(self, message: str) -> str:
        """Render a line for a file that could not be processed."""
        mark = self._mark(_MARKS["fatal"])
        return self._paint(f"{mark} {message}", "fatal")

    def _mark(self, pair: tuple[str, str]) -> str:
        return pair[0] if self._unicode else pair[1]

    def _format_violation(self, violation: Violation) -> str:
        severity = violation.severity.value
        mark = self._paint(self._mark(_MARKS.get(severity, ("*", "*"))), severity)
        rule = self._paint(violation.rule, "rule")

        location = ":".join(
            f"{prefix}{value}"
            for prefix, value in (("L", violation.line_number), ("C", violation.column_number))
            if value is not None
        )
        if location:
            return f"  {mark} {location}: {violation.message} [{rule}]"
        return f"  {mark} {violation.message} [{rule}]"

    def _format_summary(self, summary: CheckSummary) -> str:
        """
        One line of counts, e.g.
        ``Found: 3 error(s) in 1/2 file(s) (end_of_line: 2, indent_style: 1)``.
        """
        counts = [
            (summary.fatal_count, "fatal", "fatal"),
            (summary.error_count, "error(s)", "error"),
        ]
        parts = [self._paint(f"{count} {label}", style) for count, label, style in counts if count]
        if not parts:
            return self.render_success("No issues found.")

        line = (
            f"Found: {', '.join(parts)} in "
            f"{summary.files_with_violations}/{summary.files_checked} file(s)"
        )
        if len(summary.top_rules) > 1:
            breakdown = ", ".join(
                f"{rule}: {count}" for rule, count in summary.top_rules[:_BREAKDOWN_SIZE]
            )
            line += f" ({breakdown})"
        return line

    def _paint(self, text: str, style: str) -> str:
        if not self._use_color:
            return text
        return f"{_STYLES[style]}{text}{_RESET}"
