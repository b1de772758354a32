"""
Document model.

Public API for turning raw bytes into lines and back.

Usage:
    from ec_lint.core.document import build_document

    document = build_document(Path("main.py").read_bytes())
    for line in document:
        print(line.number, line.ending.name, line.text)

    assert document.to_bytes() == Path("main.py").read_bytes()

API Functions:
    build_document(data, charset=None) -> Document
    detect_newline(text, offset) -> (Newline, int)
    sniff_bom(data) -> (bytes, Charset) | None
"""

from __future__ import annotations

from ec_lint.core.errors import InvalidBomError

from .builder import build_document, split_lines
from .charset import (
    BOM_TABLE,
    DETECTION_SAMPLE_SIZE,
    Charset,
    charset_for_bom,
    decode_body,
    decode_with_bom,
    encode_text,
    sniff_bom,
)
from .models import Document, Line
from .newline import Newline, detect_newline

__all__ = [
    "BOM_TABLE",
    "DETECTION_SAMPLE_SIZE",
    "Charset",
    "Document",
    "InvalidBomError",
    "Line",
    "Newline",
    "build_document",
    "charset_for_bom",
    "decode_body",
    "decode_with_bom",
    "detect_newline",
    "encode_text",
    "sniff_bom",
    "split_lines",
]
