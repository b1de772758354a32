"""
Pytest configuration and fixtures for ec-lint tests.

Provides fixtures for:
- The rule engine
- Sample file content with BOMs and mixed line endings
- Writing sample files into a temporary tree
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from ec_lint.core.rules import ExecutionPipeline, build_registry

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def pipeline() -> ExecutionPipeline:
    """Pipeline over the built-in rule table."""
    return ExecutionPipeline(build_registry())


# =============================================================================
# Sample Content
# =============================================================================


@pytest.fixture
def mixed_endings() -> bytes:
    """Three lines: LF, CRLF, CR, then an unterminated line."""
    return b"one\ntwo\r\nthree\rfour"


@pytest.fixture
def messy_source() -> bytes:
    """Tab indentation, trailing whitespace, CRLF and no final newline."""
    return b"def f():\r\n\treturn 1  \r\n\r\n\t\tpass\t\r\nend"


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[[str, bytes], Path]:
    """Write ``content`` to ``name`` below tmp_path and return its path."""

    def _make(name: str, content: bytes) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _make
