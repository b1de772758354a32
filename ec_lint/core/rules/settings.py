"""
Settings values.

Settings arrive as a flat mapping of rule name to value. Values read from
INI or YAML files and from the command line are often strings, so rules
coerce what they read through these helpers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

Settings = Mapping[str, Any]

# Recognized keys, in rule-table order
RULE_NAMES: tuple[str, ...] = (
    "charset",
    "indent_style",
    "indent_size",
    "tab_width",
    "trim_trailing_whitespace",
    "end_of_line",
    "insert_final_newline",
    "max_line_length",
)


def to_int(value: object) -> int | None:
    """Coerce a positive integer setting; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
        return number if number > 0 else None
    return None


def to_bool(value: object) -> bool | None:
    """Coerce a boolean setting; None for anything else."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def normalize_value(value: Any) -> Any:
    """
    Normalize one raw setting value.

    Strings are lower-cased; ``true``/``false`` become booleans and digit
    strings become integers.
    """
    if isinstance(value, str):
        lowered = value.strip().lower()
        as_bool = to_bool(lowered)
        if as_bool is not None:
            return as_bool
        if lowered.isdigit():
            return int(lowered)
        return lowered
    return value


def normalize_settings(raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize a raw settings mapping.

    Keys are lower-cased; ``None`` values and the EditorConfig ``unset``
    value drop the key.
    """
    settings: dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            continue
        normalized = normalize_value(value)
        if normalized == "unset":
            continue
        settings[str(key).strip().lower()] = normalized
    return settings


def merge_settings(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge settings layers; later layers win. ``unset`` removes a key."""
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip().lower() == "unset":
                merged.pop(key, None)
                continue
            merged[key] = value
    return merged
