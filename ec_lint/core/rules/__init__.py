"""
EditorConfig Rule Engine.

Checks, fixes and infers EditorConfig settings on raw file content.

Usage:
    from ec_lint.core.rules import check, fix

    result = check({"end_of_line": "lf"}, b"foo\\r\\nbar\\n", file_name="a.txt")
    for violation in result.violations:
        print(violation)

    fixed = fix({"insert_final_newline": True}, b"foo")  # b"foo\\n"
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import DocumentRule, LineRule, Rule
from .charset import CharsetRule
from .indentation import IndentSizeRule, IndentStyleRule, TabWidthRule
from .infer import InferenceTally, InferOptions, render_ini, render_inferred
from .loader import SettingsFile, SettingsSection, load_settings_file, parse_settings
from .models import CheckSummary, RuleScope, TallyMode
from .newlines import EndOfLineRule, InsertFinalNewlineRule
from .pipeline import CheckResult, ExecutionPipeline, FixResult, summarize
from .registry import RuleRegistry, build_registry
from .settings import RULE_NAMES, Settings, merge_settings, normalize_settings, normalize_value
from .whitespace import MaxLineLengthRule, TrimTrailingWhitespaceRule

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from typing import Any


def check(
    settings: Mapping[str, Any],
    data: bytes,
    file_name: str | None = None,
    registry: RuleRegistry | None = None,
) -> CheckResult:
    """
    Check raw file content against settings.

    Args:
        settings: Resolved settings for the file
        data: Raw file content
        file_name: Attributed to every violation
        registry: Rule table, or None for the built-in rules

    Returns:
        CheckResult with violations ordered by rule then line
    """
    return ExecutionPipeline(registry).check_bytes(settings, data, file_name)


def fix(
    settings: Mapping[str, Any],
    data: bytes,
    registry: RuleRegistry | None = None,
) -> bytes:
    """
    Fix raw file content; returns the corrected bytes.

    Content that cannot be read (invalid BOM) or that does not decode with
    its BOM's codec is returned unchanged.
    """
    result = ExecutionPipeline(registry).fix_bytes(settings, data)
    return data if result.fixed is None else result.fixed


def infer(
    buffers: Iterable[bytes],
    registry: RuleRegistry | None = None,
) -> dict[str, Any]:
    """Infer settings from the content of several files."""
    pipeline = ExecutionPipeline(registry)
    tally = pipeline.new_tally()
    for data in buffers:
        pipeline.infer_bytes(data, tally)
    return tally.resolve()


__all__ = [
    "RULE_NAMES",
    "CharsetRule",
    "CheckResult",
    "CheckSummary",
    "DocumentRule",
    "EndOfLineRule",
    "ExecutionPipeline",
    "FixResult",
    "IndentSizeRule",
    "IndentStyleRule",
    "InferOptions",
    "InferenceTally",
    "InsertFinalNewlineRule",
    "LineRule",
    "MaxLineLengthRule",
    "Rule",
    "RuleRegistry",
    "RuleScope",
    "Settings",
    "SettingsFile",
    "SettingsSection",
    "TabWidthRule",
    "TallyMode",
    "TrimTrailingWhitespaceRule",
    "build_registry",
    "check",
    "fix",
    "infer",
    "load_settings_file",
    "merge_settings",
    "normalize_settings",
    "normalize_value",
    "parse_settings",
    "render_ini",
    "render_inferred",
    "summarize",
]
