"""
Line content rules: trim_trailing_whitespace, max_line_length.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar

from .base import LineRule
from .models import TallyMode
from .settings import to_bool, to_int

if TYPE_CHECKING:
    from ec_lint.core.document import Line
    from ec_lint.core.errors import Violation

    from .settings import Settings

# Spaces and separators, but not the C0 separators or NEL that \s also matches
_TRAILING_WHITESPACE = re.compile(
    "[ \t\f\v\u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]+\\Z"
)


class TrimTrailingWhitespaceRule(LineRule):
    """Whitespace before the line terminator."""

    name: ClassVar[str] = "trim_trailing_whitespace"
    description: ClassVar[str] = "Trims any trailing whitespace"

    def resolve(self, settings: Settings) -> bool | None:
        return to_bool(settings.get(self.name))

    def check(self, settings: Settings, line: Line) -> list[Violation]:
        if not self.resolve(settings) or not line.text:
            return []
        match = _TRAILING_WHITESPACE.search(line.text)
        if match is None:
            return []
        return [
            self.violation(
                "unexpected trailing whitespace",
                line_number=line.number,
                column_number=match.start() + 1,
                source=match.group(),
            )
        ]

    def fix(self, settings: Settings, line: Line) -> Line:
        if self.resolve(settings) and line.text:
            line.text = _TRAILING_WHITESPACE.sub("", line.text)
        return line

    def infer(self, line: Line) -> bool:
        return not line.text or _TRAILING_WHITESPACE.search(line.text) is None


class MaxLineLengthRule(LineRule):
    """
    Maximum number of characters per line.

    Violations are reported only; lines are never wrapped. Infer keeps the
    longest line seen rather than voting.
    """

    name: ClassVar[str] = "max_line_length"
    description: ClassVar[str] = "Set to a whole number"
    tally: ClassVar[TallyMode] = TallyMode.MAXIMUM

    def resolve(self, settings: Settings) -> int | None:
        return to_int(settings.get(self.name))

    def check(self, settings: Settings, line: Line) -> list[Violation]:
        limit = self.resolve(settings)
        length = self.infer(line)
        if limit is None or length <= limit:
            return []
        return [
            self.violation(
                f"line {line.number}: line length: {length}, exceeds: {limit}",
                line_number=line.number,
                column_number=limit + 1,
                source=(line.text or "")[limit:],
            )
        ]

    def fix(self, settings: Settings, line: Line) -> Line:
        return line

    def infer(self, line: Line) -> int:
        return len(line.text or "")
