"""
File writer for fix.

Writes fixed content with an atomic temp-file-and-rename.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import os
import shutil
import tempfile
import time
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class WriteResult(BaseModel, frozen=True):
    """Result of a write operation."""

    success: bool = Field(description="Whether write succeeded")
    output_path: str = Field(description="Path to written file")

    old_checksum: str = Field(default="", description="Checksum of the original content")
    new_checksum: str = Field(default="", description="Checksum of the written content")

    bytes_written: int = Field(default=0)
    duration_ms: int = Field(default=0)

    error: str | None = Field(default=None, description="Error message if failed")


def compute_bytes_checksum(data: bytes) -> str:
    """Compute SHA-256 checksum of bytes."""
    return hashlib.sha256(data).hexdigest()


def destination_for(source: Path, dest: Path | None, base: Path | None = None) -> Path:
    """
    Where the fixed copy of ``source`` goes.

    In place when ``dest`` is None. Otherwise under ``dest``, keeping the
    path relative to ``base`` when ``source`` lies below it.
    """
    if dest is None:
        return source
    if base is not None:
        with contextlib.suppress(ValueError):
            return dest / source.resolve().relative_to(base.resolve())
    return dest / source.name


def write_file(
    content: bytes,
    output_path: Path,
    *,
    original: bytes | None = None,
    atomic: bool = True,
) -> WriteResult:
    """
    Write fixed content.

    Args:
        content: Bytes to write
        output_path: Target path; parent directories are created
        original: Content before fixing, for the checksum record
        atomic: Use atomic write (temp file + rename)

    Returns:
        WriteResult with status and checksums
    """
    start_time = time.time()
    old_checksum = compute_bytes_checksum(original) if original is not None else ""
    new_checksum = compute_bytes_checksum(content)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if atomic:
            fd, temp_path = tempfile.mkstemp(
                dir=output_path.parent,
                prefix=".ec_lint_",
                suffix=".tmp",
            )
            try:
                os.write(fd, content)
                os.close(fd)
                if output_path.exists():
                    shutil.copymode(output_path, temp_path)
                os.replace(temp_path, output_path)
            except Exception:
                with contextlib.suppress(OSError):
                    os.close(fd)
                with contextlib.suppress(OSError):
                    os.unlink(temp_path)
                raise
        else:
            output_path.write_bytes(content)
    except OSError as e:
        logger.debug("write failed for %s: %s", output_path, e)
        return WriteResult(
            success=False,
            output_path=str(output_path),
            old_checksum=old_checksum,
            new_checksum=new_checksum,
            error=str(e),
        )

    logger.debug("wrote %d bytes to %s", len(content), output_path)
    return WriteResult(
        success=True,
        output_path=str(output_path),
        old_checksum=old_checksum,
        new_checksum=new_checksum,
        bytes_written=len(content),
        duration_ms=int((time.time() - start_time) * 1000),
    )
