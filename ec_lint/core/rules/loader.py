"""
Settings file loader.

Loads settings from a YAML file. Two shapes are accepted.

Flat, applied to every file:
```yaml
indent_style: space
indent_size: 4
end_of_line: lf
```

Sectioned by glob pattern, merged in file order for each matching file:
```yaml
"*":
  end_of_line: lf
  insert_final_newline: true
"*.py":
  indent_size: 4
Makefile:
  indent_style: tab
```
"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from ec_lint.core.errors import InvalidConfigurationError

from .settings import merge_settings, normalize_value

if TYPE_CHECKING:
    from pathlib import Path

SettingValue = bool | int | str


class SettingsSection(BaseModel, frozen=True):
    """Settings applied to file names matching ``pattern``."""

    pattern: str
    settings: dict[str, SettingValue] = Field(default_factory=dict)

    def matches(self, file_name: str) -> bool:
        """Match the base name, or the whole path for patterns containing a slash."""
        path = PurePath(file_name)
        if "/" in self.pattern:
            posix = path.as_posix()
            return fnmatch(posix, self.pattern) or fnmatch(posix, f"*/{self.pattern}")
        return fnmatch(path.name, self.pattern)


class SettingsFile(BaseModel, frozen=True):
    """A loaded settings file."""

    path: str | None = None
    sections: list[SettingsSection] = Field(default_factory=list)

    def settings_for(self, file_name: str) -> dict[str, Any]:
        """Merged settings of every section matching ``file_name``."""
        return merge_settings(
            *(section.settings for section in self.sections if section.matches(file_name))
        )


def _is_flat(data: dict[Any, Any]) -> bool:
    return all(not isinstance(value, dict) for value in data.values())


def _section(pattern: str, raw: Any, source: str) -> SettingsSection:
    if not isinstance(raw, dict):
        raise InvalidConfigurationError(f"{source}: section {pattern!r} must be a mapping")

    # "unset" survives until merge time so it can remove keys set by earlier sections
    settings = {
        str(key).strip().lower(): normalize_value(value)
        for key, value in raw.items()
        if value is not None
    }
    try:
        return SettingsSection(pattern=pattern, settings=settings)
    except ValidationError as e:
        raise InvalidConfigurationError(f"{source}: section {pattern!r}: {e}") from e


def parse_settings(data: Any, path: Path | None = None) -> SettingsFile:
    """
    Parse loaded YAML data into a SettingsFile.

    Raises:
        InvalidConfigurationError: If the data is not a mapping of settings
    """
    source = str(path) if path else "<settings>"
    if data is None:
        return SettingsFile(path=str(path) if path else None)
    if not isinstance(data, dict):
        raise InvalidConfigurationError(f"{source}: expected a mapping")

    if _is_flat(data):
        sections = [_section("*", data, source)]
    else:
        sections = [_section(str(pattern), raw, source) for pattern, raw in data.items()]
    return SettingsFile(path=str(path) if path else None, sections=sections)


def load_settings_file(path: Path) -> SettingsFile:
    """
    Load a YAML settings file.

    Raises:
        InvalidConfigurationError: If the file is missing or not valid YAML
    """
    if not path.exists():
        raise InvalidConfigurationError(f"Settings file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(f"{path}: invalid YAML: {e}") from e

    return parse_settings(data, path)
