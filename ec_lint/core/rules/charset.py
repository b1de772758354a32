"""
charset rule.

Compares the BOM of line 1 with the configured charset. For ``latin1`` the
text itself is scanned for characters outside the Latin-1 range.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from ec_lint.core.document import Charset

from .base import DocumentRule

if TYPE_CHECKING:
    from ec_lint.core.document import Document
    from ec_lint.core.errors import Violation

    from .settings import Settings

# First code point outside 7-bit ASCII; reported for latin1 files
LATIN1_LIMIT = 0x80


class CharsetRule(DocumentRule):
    """Enforce the file charset."""

    name: ClassVar[str] = "charset"
    description: ClassVar[str] = "Set to latin1, utf-8, utf-8-bom, utf-16be, utf-16le, utf-32be or utf-32le"

    def resolve(self, settings: Settings) -> Charset | None:
        return Charset.parse(settings.get(self.name))

    def check(self, settings: Settings, document: Document) -> list[Violation]:
        configured = self.resolve(settings)
        if configured is None:
            return []

        detected = document.charset
        if detected is not None and detected is not configured:
            return [
                self.violation(
                    f"invalid charset: {detected.value}, expected: {configured.value}",
                    line_number=1,
                    column_number=1,
                )
            ]
        if detected is None and configured.bom:
            return [
                self.violation(
                    f"expected charset: {configured.value}",
                    line_number=1,
                    column_number=1,
                )
            ]
        if configured is Charset.LATIN1:
            return self._check_latin1_range(document)
        return []

    def _check_latin1_range(self, document: Document) -> list[Violation]:
        """Report every character at or above 0x80."""
        violations: list[Violation] = []
        for line in document:
            for column, char in enumerate(line.text or "", start=1):
                if ord(char) >= LATIN1_LIMIT:
                    violations.append(
                        self.violation(
                            f"character out of latin1 range: {char!r}",
                            line_number=line.number,
                            column_number=column,
                            source=char,
                        )
                    )
        return violations

    def fix(self, settings: Settings, document: Document) -> Document:
        configured = self.resolve(settings)
        if configured is not None:
            document.charset = configured
        return document

    def infer(self, document: Document) -> Charset | None:
        return document.charset
