"""
Output adapters for CLI.

Provides different output formats: terminal, JSON.
"""

from ec_lint.cli.output.base import OutputAdapter, OutputFormat, get_output_adapter
from ec_lint.cli.output.json import JsonOutput
from ec_lint.cli.output.terminal import TerminalOutput

__all__ = [
    "JsonOutput",
    "OutputAdapter",
    "OutputFormat",
    "TerminalOutput",
    "get_output_adapter",
]
