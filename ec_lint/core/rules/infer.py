"""
Settings inference.

Tallies the value each rule observes across every line and document of one
infer run, then resolves each setting to its most frequent value. Ties go
to the value seen first. max_line_length keeps the running maximum and is
rounded up to the next multiple of 10.

The tally is plain shared state: callers that analyse files in parallel
must serialize calls to ``add``.
"""

from __future__ import annotations

import json
import math
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from ec_lint.core.errors import InvalidConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable

EDITORCONFIG_HEADER = "# EditorConfig is awesome: https://EditorConfig.org"


class InferOptions(BaseModel, frozen=True):
    """Output options for infer."""

    score: bool = False  # Raw tally instead of resolved settings
    ini: bool = False  # .editorconfig text instead of JSON
    root: bool = False  # Add root = true to the .editorconfig text

    @classmethod
    def create(cls, *, score: bool = False, ini: bool = False, root: bool = False) -> InferOptions:
        """
        Validate and create options.

        Raises:
            InvalidConfigurationError: If score and ini are both requested
        """
        if score and ini:
            raise InvalidConfigurationError("Cannot generate tallied scores as ini file format")
        return cls(score=score, ini=ini, root=root)


def _tally_key(value: Any) -> Any:
    """Hashable, JSON-friendly key for an observed value."""
    if isinstance(value, Enum):
        return value.value
    return value


class InferenceTally:
    """Per-setting frequency tables plus the longest line seen."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self.scores: dict[str, dict[Any, int]] = {name: {} for name in names}
        self.max_line_length = 0
        self.documents = 0

    def add(self, name: str, value: Any) -> None:
        """Count one observation. None is not counted."""
        if value is None:
            return
        key = _tally_key(value)
        counts = self.scores.setdefault(name, {})
        counts[key] = counts.get(key, 0) + 1

    def add_line_length(self, length: int) -> None:
        """Track the longest line."""
        if length > self.max_line_length:
            self.max_line_length = length

    def resolve(self) -> dict[str, Any]:
        """Most frequent value per setting; first seen wins ties."""
        resolved: dict[str, Any] = {}
        for name, counts in self.scores.items():
            best_value: Any = None
            best_count = 0
            for value, count in counts.items():
                if count > best_count:
                    best_value, best_count = value, count
            if best_count:
                resolved[name] = best_value
        if self.max_line_length:
            resolved["max_line_length"] = math.ceil(self.max_line_length / 10) * 10
        return resolved

    def to_scores(self) -> dict[str, Any]:
        """Raw tally: value counts per setting and the longest line."""
        scores: dict[str, Any] = {name: dict(counts) for name, counts in self.scores.items()}
        scores["max_line_length"] = self.max_line_length
        return scores


def _format_ini_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_ini(settings: dict[str, Any], *, root: bool = False) -> str:
    """Render resolved settings as an .editorconfig file with a ``[*]`` section."""
    lines = [EDITORCONFIG_HEADER, ""]
    if root:
        lines.extend(["# top-most EditorConfig file", "root = true", ""])
    lines.append("[*]")
    lines.extend(f"{key} = {_format_ini_value(value)}" for key, value in settings.items())
    return "\n".join(lines) + "\n"


def render_inferred(tally: InferenceTally, options: InferOptions) -> str:
    """Render an infer run according to ``options``."""
    if options.score:
        return json.dumps(tally.to_scores())
    resolved = tally.resolve()
    if options.ini:
        return render_ini(resolved, root=options.root)
    return json.dumps(resolved)
