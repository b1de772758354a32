"""
File selection for the CLI.

Walks the given paths, skips VCS and dependency directories, and reads
input files with a size limit.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from ec_lint.core.document import DETECTION_SAMPLE_SIZE, Charset, sniff_bom
from ec_lint.core.errors import Violation

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

IGNORED_NAMES = frozenset(
    {
        ".git",
        ".svn",
        ".hg",
        "node_modules",
        "bower_components",
        ".DS_Store",
    }
)

# Encodings whose text legitimately contains NUL bytes
_WIDE_CHARSETS = frozenset(
    {Charset.UTF_16BE, Charset.UTF_16LE, Charset.UTF_32BE, Charset.UTF_32LE}
)


def walk(root: Path) -> Iterator[Path]:
    """Yield the files below ``root`` (or ``root`` itself), sorted, skipping ignored names."""
    if root.is_file():
        yield root
        return

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_NAMES)
        for filename in sorted(filenames):
            if filename not in IGNORED_NAMES:
                yield Path(dirpath) / filename


def iter_files(paths: Iterable[Path]) -> Iterator[tuple[Path, Path]]:
    """
    Yield ``(file, base)`` pairs for every input file.

    ``base`` is the directory a file was found under, or the parent of a
    file given directly.
    """
    for path in paths:
        base = path if path.is_dir() else path.parent
        for file in walk(path):
            yield file, base


def is_binary(data: bytes) -> bool:
    """NUL byte in the first 8 KiB, unless a UTF-16/32 BOM explains it."""
    sample = data[:DETECTION_SAMPLE_SIZE]
    if b"\x00" not in sample:
        return False
    sniffed = sniff_bom(sample)
    return sniffed is None or sniffed[1] not in _WIDE_CHARSETS


def read_input(path: Path, max_bytes: int | None = None) -> bytes | Violation:
    """
    Read an input file.

    Returns:
        The file content, or a fatal Violation when it cannot be read or
        exceeds ``max_bytes``
    """
    file_name = str(path)
    try:
        if max_bytes is not None:
            size = path.stat().st_size
            if size > max_bytes:
                return Violation.fatal(
                    f"File too large: {size} bytes (limit {max_bytes})",
                    file_name=file_name,
                )
        return path.read_bytes()
    except OSError as e:
        logger.debug("cannot read %s: %s", path, e)
        return Violation.fatal(f"Cannot read file: {e.strerror or e}", file_name=file_name)
