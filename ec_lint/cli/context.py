"""
CLI context and configuration.

Manages CLI state, exit codes, and the settings resolved for each file.
"""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ec_lint.core.rules import SettingsFile, merge_settings, normalize_value


class ExitCode(IntEnum):
    """CLI exit codes following Unix conventions."""

    SUCCESS = 0  # No issues found
    ERROR = 1  # Violations found
    FATAL = 2  # A file could not be processed
    USAGE = 64  # Command line usage error
    CONFIG = 78  # Configuration error


class CliContext(BaseModel):
    """Shared context for CLI commands."""

    # Output settings
    format: str = Field(default="terminal")
    output_file: Path | None = Field(default=None)
    color: bool = Field(default=True)
    quiet: bool = Field(default=False)
    fail_on: str = Field(default="error")  # error, fatal

    # Rule settings
    settings: dict[str, Any] = Field(default_factory=dict)  # From command-line options
    settings_file: SettingsFile | None = Field(default=None)

    # Input limits
    max_bytes: int | None = Field(default=None)

    # Fix settings
    dry_run: bool = Field(default=False)
    dest: Path | None = Field(default=None)

    # Runtime
    engine_version: str = Field(default="0.1.0")

    model_config = {"frozen": False}

    def settings_for(self, file_name: str) -> dict[str, Any]:
        """Settings for one file: the settings file, overridden by command-line options."""
        from_file = self.settings_file.settings_for(file_name) if self.settings_file else {}
        from_options = {
            key: normalize_value(value) for key, value in self.settings.items() if value is not None
        }
        return merge_settings(from_file, from_options)


def get_exit_code(has_fatal: bool, has_error: bool, fail_on: str) -> ExitCode:
    """Determine exit code based on violations and fail_on setting."""
    if has_fatal:
        return ExitCode.FATAL

    if has_error and fail_on.lower() == "error":
        return ExitCode.ERROR

    return ExitCode.SUCCESS
