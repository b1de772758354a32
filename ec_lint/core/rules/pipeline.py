"""
Execution Pipeline.

Dispatches check, fix and infer over a Document in rule-table order.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import TYPE_CHECKING

import ec_lint
from ec_lint.core.document import Document, InvalidBomError, build_document
from ec_lint.core.errors import Severity, Violation

from .infer import InferenceTally
from .models import CheckSummary, RuleScope, TallyMode
from .registry import RuleRegistry, build_registry
from .settings import normalize_settings

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from typing import Any

    from .base import Rule

logger = logging.getLogger(__name__)


class CheckResult:
    """Result of checking one file."""

    def __init__(
        self,
        violations: list[Violation],
        file_name: str | None = None,
        stats: dict[str, int] | None = None,
    ) -> None:
        self.violations = violations
        self.file_name = file_name
        self.stats = stats or {}

    @property
    def has_fatal(self) -> bool:
        """Check if the file could not be processed."""
        return any(v.severity == Severity.FATAL for v in self.violations)

    @property
    def has_errors(self) -> bool:
        """Check if any error or fatal violations."""
        return any(v.severity in (Severity.FATAL, Severity.ERROR) for v in self.violations)

    def get_summary(self) -> CheckSummary:
        """Create a summary for this file alone."""
        return summarize([self], duration_ms=self.stats.get("duration_ms", 0))


class FixResult:
    """Result of fixing one file."""

    def __init__(
        self,
        original: bytes,
        fixed: bytes | None,
        file_name: str | None = None,
        violations: list[Violation] | None = None,
    ) -> None:
        self.original = original
        self.fixed = fixed
        self.file_name = file_name
        self.violations = violations or []

    @property
    def has_fatal(self) -> bool:
        return self.fixed is None

    @property
    def changed(self) -> bool:
        """Check if fixing changed any bytes."""
        return self.fixed is not None and self.fixed != self.original


def summarize(results: Iterable[CheckResult], duration_ms: int = 0) -> CheckSummary:
    """Aggregate check results of one run."""
    severity_counts: Counter[Severity] = Counter()
    rule_counts: Counter[str] = Counter()
    files_checked = 0
    files_with_violations = 0

    for result in results:
        files_checked += 1
        if result.violations:
            files_with_violations += 1
        severity_counts.update(v.severity for v in result.violations)
        rule_counts.update(v.rule for v in result.violations)

    return CheckSummary(
        engine_version=ec_lint.__version__,
        files_checked=files_checked,
        files_with_violations=files_with_violations,
        fatal_count=severity_counts.get(Severity.FATAL, 0),
        error_count=severity_counts.get(Severity.ERROR, 0),
        top_rules=rule_counts.most_common(10),
        duration_ms=duration_ms,
    )


class ExecutionPipeline:
    """
    Runs the rule table against Documents.

    Only rules whose setting is present take part in check and fix; infer
    observes every rule. Line rules run once per line, document rules once
    per document. Later rules see the fixes of earlier ones.
    """

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self.registry = registry or build_registry()

    # -------------------------------------------------------------------------
    # Document level
    # -------------------------------------------------------------------------

    def check(
        self,
        settings: Mapping[str, Any],
        document: Document,
        file_name: str | None = None,
    ) -> CheckResult:
        """Collect violations, ordered by rule then line."""
        start_time = time.perf_counter()
        resolved = normalize_settings(settings)
        violations: list[Violation] = []

        for rule in self.registry.configured(resolved):
            logger.debug("check %s on %s", rule.name, file_name or "<document>")
            if rule.scope is RuleScope.DOCUMENT:
                violations.extend(rule.check(resolved, document))
                continue
            for line in document:
                violations.extend(rule.check(resolved, line))

        if file_name is not None:
            violations = [v.for_file(file_name) for v in violations]

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        return CheckResult(
            violations=violations,
            file_name=file_name,
            stats={"duration_ms": duration_ms},
        )

    def fix(self, settings: Mapping[str, Any], document: Document) -> Document:
        """Rewrite the document in place; returns the same document."""
        resolved = normalize_settings(settings)

        for rule in self.registry.configured(resolved):
            logger.debug("fix %s", rule.name)
            if rule.scope is RuleScope.DOCUMENT:
                rule.fix(resolved, document)
                continue
            for line in list(document):
                rule.fix(resolved, line)

        return document

    def new_tally(self) -> InferenceTally:
        """Create an empty tally for one infer run."""
        return InferenceTally(rule.name for rule in self.registry if rule.tally is TallyMode.VOTE)

    def infer(self, document: Document, tally: InferenceTally | None = None) -> InferenceTally:
        """Add the document's observations to ``tally``."""
        tally = tally if tally is not None else self.new_tally()

        for rule in self.registry:
            if rule.tally is TallyMode.NONE:
                continue
            if rule.scope is RuleScope.DOCUMENT:
                self._observe(tally, rule, rule.infer(document))
                continue
            for line in document:
                self._observe(tally, rule, rule.infer(line))

        tally.documents += 1
        return tally

    @staticmethod
    def _observe(tally: InferenceTally, rule: Rule, value: Any) -> None:
        if rule.tally is TallyMode.MAXIMUM:
            tally.add_line_length(value or 0)
        else:
            tally.add(rule.name, value)

    # -------------------------------------------------------------------------
    # Byte level
    # -------------------------------------------------------------------------

    def _build(self, settings: Mapping[str, Any], data: bytes) -> Document:
        return build_document(data, normalize_settings(settings).get("charset"))

    def check_bytes(
        self,
        settings: Mapping[str, Any],
        data: bytes,
        file_name: str | None = None,
    ) -> CheckResult:
        """Build a Document from ``data`` and check it."""
        try:
            document = self._build(settings, data)
        except InvalidBomError as e:
            return _create_error_result(e, file_name)
        return self.check(settings, document, file_name)

    def fix_bytes(
        self,
        settings: Mapping[str, Any],
        data: bytes,
        file_name: str | None = None,
    ) -> FixResult:
        """Build a Document from ``data``, fix it and serialize it back."""
        try:
            document = self._build(settings, data)
        except InvalidBomError as e:
            return FixResult(data, None, file_name, _create_error_result(e, file_name).violations)
        fixed = self.fix(settings, document)
        content = fixed.to_bytes()
        charset = fixed.charset
        if content != data and charset is not None and fixed.bom_mismatch:
            message = f"content does not decode as {charset.value}; not rewritten"
            violation = Violation.fatal(message, file_name=file_name, rule="charset")
            return FixResult(data, None, file_name, [violation])
        return FixResult(data, content, file_name)

    def infer_bytes(
        self,
        data: bytes,
        tally: InferenceTally,
        file_name: str | None = None,
    ) -> list[Violation]:
        """
        Add the observations of ``data`` to ``tally``.

        Returns:
            A fatal violation when the buffer could not be read, else nothing
        """
        try:
            document = build_document(data)
        except InvalidBomError as e:
            return _create_error_result(e, file_name).violations
        self.infer(document, tally)
        return []


def _create_error_result(error: InvalidBomError, file_name: str | None) -> CheckResult:
    """Create a fatal result for a buffer that could not be built."""
    return CheckResult(
        violations=[Violation.fatal(str(error), file_name=file_name, rule="charset")],
        file_name=file_name,
    )
