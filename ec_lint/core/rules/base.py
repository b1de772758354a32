"""
Rule base classes.

Every rule implements the same contract - resolve, check, fix, infer - in
one of two shapes:
- LineRule: check/fix/infer run once per line
- DocumentRule: check/fix/infer run once per document

The engine dispatches on ``Rule.scope``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from ec_lint.core.errors import Violation

from .models import RuleScope, TallyMode

if TYPE_CHECKING:
    from ec_lint.core.document import Document, Line

    from .settings import Settings


class Rule(ABC):
    """Base class for all rules."""

    name: ClassVar[str]
    scope: ClassVar[RuleScope]
    description: ClassVar[str] = ""
    tally: ClassVar[TallyMode] = TallyMode.VOTE

    @abstractmethod
    def resolve(self, settings: Settings) -> Any:
        """
        Read and normalize this rule's setting.

        Returns:
            The configured value, or None when unset or invalid
        """
        ...

    def violation(
        self,
        message: str,
        *,
        line_number: int | None = None,
        column_number: int | None = None,
        source: str | None = None,
    ) -> Violation:
        """Create a violation reported by this rule."""
        return Violation(
            rule=self.name,
            message=message,
            line_number=line_number,
            column_number=column_number,
            source=source,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} ({self.scope.value})>"


class LineRule(Rule):
    """Rule evaluated once per line."""

    scope: ClassVar[RuleScope] = RuleScope.LINE

    @abstractmethod
    def check(self, settings: Settings, line: Line) -> list[Violation]:
        """Report violations on one line."""
        ...

    @abstractmethod
    def fix(self, settings: Settings, line: Line) -> Line:
        """Rewrite the line in place to conform; returns the same line."""
        ...

    @abstractmethod
    def infer(self, line: Line) -> Any:
        """Observed value for this line, or None when nothing is observable."""
        ...


class DocumentRule(Rule):
    """Rule evaluated once per document."""

    scope: ClassVar[RuleScope] = RuleScope.DOCUMENT

    @abstractmethod
    def check(self, settings: Settings, document: Document) -> list[Violation]:
        """Report violations in the document."""
        ...

    @abstractmethod
    def fix(self, settings: Settings, document: Document) -> Document:
        """Rewrite the document in place to conform; returns the same document."""
        ...

    @abstractmethod
    def infer(self, document: Document) -> Any:
        """Observed value for this document, or None when nothing is observable."""
        ...
