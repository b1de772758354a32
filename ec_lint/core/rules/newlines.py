"""
Line terminator rules: end_of_line, insert_final_newline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from ec_lint.core.document import Line, Newline

from .base import DocumentRule, LineRule
from .settings import to_bool

if TYPE_CHECKING:
    from ec_lint.core.document import Document
    from ec_lint.core.errors import Violation

    from .settings import Settings


def resolve_end_of_line(settings: Settings) -> Newline | None:
    """Configured terminator (``lf``, ``crlf`` or ``cr``)."""
    return Newline.from_name(settings.get("end_of_line"))


class EndOfLineRule(LineRule):
    """Terminator used for every line that has one."""

    name: ClassVar[str] = "end_of_line"
    description: ClassVar[str] = "Set to lf, cr or crlf"

    def resolve(self, settings: Settings) -> Newline | None:
        return resolve_end_of_line(settings)

    def check(self, settings: Settings, line: Line) -> list[Violation]:
        configured = self.resolve(settings)
        if configured is None or line.ending in (Newline.NONE, configured):
            return []
        return [
            self.violation(
                f"invalid newline: {line.ending.value}, expected: {configured.value}",
                line_number=line.number,
                column_number=len(line.text or "") + 1,
                source=line.ending.literal,
            )
        ]

    def fix(self, settings: Settings, line: Line) -> Line:
        configured = self.resolve(settings)
        if configured is not None and line.ending is not Newline.NONE:
            line.ending = configured
        return line

    def infer(self, line: Line) -> str | None:
        if line.ending is Newline.NONE:
            return None
        return line.ending.value


class InsertFinalNewlineRule(DocumentRule):
    """Whether the last line ends with a terminator."""

    name: ClassVar[str] = "insert_final_newline"
    description: ClassVar[str] = "Ensures files end with a newline"

    def resolve(self, settings: Settings) -> bool | None:
        return to_bool(settings.get(self.name))

    def check(self, settings: Settings, document: Document) -> list[Violation]:
        configured = self.resolve(settings)
        inferred = self.infer(document)
        if configured is None or configured == inferred:
            return []

        last_line = document.last_line
        text = (last_line.text or "") if last_line else ""
        ending = last_line.ending.literal if last_line else ""
        return [
            self.violation(
                "expected final newline" if configured else "unexpected final newline",
                line_number=max(len(document), 1),
                column_number=len(text) + len(ending) or 1,
                source=text + ending,
            )
        ]

    def fix(self, settings: Settings, document: Document) -> Document:
        configured = self.resolve(settings)
        if configured is None:
            return document
        if configured:
            return self._insert(settings, document)
        return self._strip(document)

    def _insert(self, settings: Settings, document: Document) -> Document:
        """Terminate the last line, or add an empty terminated line."""
        if self.infer(document):
            return document
        ending = resolve_end_of_line(settings) or Newline.LF
        last_line = document.last_line
        if last_line is None:
            document.append(Line("", ending))
        else:
            last_line.ending = ending
        return document

    def _strip(self, document: Document) -> Document:
        """
        Drop trailing blank lines, then the final terminator.

        Stops at the first line with text. Line 1 is emptied rather than
        removed so that its BOM survives.
        """
        while document.lines:
            last_line = document.lines[-1]
            if last_line.text:
                last_line.ending = Newline.NONE
                break
            if len(document) == 1:
                last_line.text = None
                last_line.ending = Newline.NONE
                break
            document.pop()
        return document

    def infer(self, document: Document) -> bool:
        last_line = document.last_line
        return last_line is not None and last_line.ending is not Newline.NONE
