"""
Indentation rules: indent_style, indent_size, tab_width.

All three look at the leading run of spaces and tabs. ``indent_size = tab``
means "use tab_width", and tab_width falls back to a numeric indent_size.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar

from .base import LineRule
from .models import TallyMode
from .settings import to_int

if TYPE_CHECKING:
    from ec_lint.core.document import Line
    from ec_lint.core.errors import Violation

    from .settings import Settings

INDENT_STYLES = ("tab", "space")

_LEADING_WHITESPACE = re.compile(r"[ \t]*")
_LEADING_SPACES = re.compile(r" *")


def leading_whitespace(text: str | None) -> str:
    """Leading run of spaces and tabs."""
    if not text:
        return ""
    match = _LEADING_WHITESPACE.match(text)
    return match.group() if match else ""


def resolve_tab_width(settings: Settings) -> int | None:
    """Columns per tab: tab_width, else a numeric indent_size."""
    return to_int(settings.get("tab_width")) or to_int(settings.get("indent_size"))


def resolve_indent_size(settings: Settings) -> int | None:
    """Columns per indent level; ``tab`` resolves through tab_width."""
    value = settings.get("indent_size")
    if isinstance(value, str) and value.strip().lower() == "tab":
        return to_int(settings.get("tab_width"))
    return to_int(value)


class IndentStyleRule(LineRule):
    """Hard tabs or soft tabs."""

    name: ClassVar[str] = "indent_style"
    description: ClassVar[str] = "Set to tab or space"

    def resolve(self, settings: Settings) -> str | None:
        value = settings.get(self.name)
        if isinstance(value, str) and value.strip().lower() in INDENT_STYLES:
            return value.strip().lower()
        return None

    def check(self, settings: Settings, line: Line) -> list[Violation]:
        configured = self.resolve(settings)
        indent = leading_whitespace(line.text)
        if configured is None or not indent:
            return []

        if configured == "space" and "\t" in indent:
            return [
                self.violation(
                    "invalid indent style: found a leading tab, expected: space",
                    line_number=line.number,
                    column_number=indent.index("\t") + 1,
                    source=indent,
                )
            ]
        if configured == "tab" and indent.startswith(" "):
            return [
                self.violation(
                    "invalid indent style: found a leading space, expected: tab",
                    line_number=line.number,
                    column_number=1,
                    source=indent,
                )
            ]
        return []

    def fix(self, settings: Settings, line: Line) -> Line:
        configured = self.resolve(settings)
        indent = leading_whitespace(line.text)
        tab_width = resolve_tab_width(settings) or resolve_indent_size(settings)
        if configured is None or not indent or tab_width is None or line.text is None:
            return line

        if configured == "space" and "\t" in indent:
            replacement = indent.expandtabs(tab_width)
        elif configured == "tab" and indent.startswith(" "):
            # Alignment spaces narrower than a tab stay as spaces
            tabs, spaces = divmod(len(indent.expandtabs(tab_width)), tab_width)
            replacement = "\t" * tabs + " " * spaces
        else:
            return line

        line.text = replacement + line.text[len(indent) :]
        return line

    def infer(self, line: Line) -> str | None:
        if not line.text:
            return None
        if line.text[0] == "\t":
            return "tab"
        if line.text[0] == " ":
            return "space"
        return None


class IndentSizeRule(LineRule):
    """Columns per indentation level for space-indented lines."""

    name: ClassVar[str] = "indent_size"
    description: ClassVar[str] = "Set to a whole number or tab"

    def resolve(self, settings: Settings) -> int | None:
        return resolve_indent_size(settings)

    def check(self, settings: Settings, line: Line) -> list[Violation]:
        size = self.resolve(settings)
        if size is None or IndentStyleRule().resolve(settings) == "tab":
            return []

        indent = leading_whitespace(line.text)
        if not indent or "\t" in indent:
            return []

        width = len(indent)
        if width % size == 0 or self._is_block_comment_continuation(line.text, width, size):
            return []
        return [
            self.violation(
                f"invalid indent size: {width}, expected a multiple of: {size}",
                line_number=line.number,
                column_number=1,
                source=indent,
            )
        ]

    @staticmethod
    def _is_block_comment_continuation(text: str | None, width: int, size: int) -> bool:
        """`` * foo`` lines inside ``/** ... */`` sit one column past the indent."""
        return bool(text) and width % size == 1 and text[width : width + 1] == "*"

    def fix(self, settings: Settings, line: Line) -> Line:
        # Indent width violations are reported, never rewritten
        return line

    def infer(self, line: Line) -> int | None:
        if not line.text:
            return None
        match = _LEADING_SPACES.match(line.text)
        width = len(match.group()) if match else 0
        if width == 0 or line.text[width : width + 1] == "\t":
            return None
        return width


class TabWidthRule(LineRule):
    """
    Columns per tab character.

    A tab has no observable width in the file itself, so this rule never
    reports or rewrites anything. Its value feeds indent_style and
    indent_size.
    """

    name: ClassVar[str] = "tab_width"
    description: ClassVar[str] = "Columns used to represent a tab character"
    tally: ClassVar[TallyMode] = TallyMode.NONE

    def resolve(self, settings: Settings) -> int | None:
        return resolve_tab_width(settings)

    def check(self, settings: Settings, line: Line) -> list[Violation]:
        return []

    def fix(self, settings: Settings, line: Line) -> Line:
        return line

    def infer(self, line: Line) -> None:
        return None
