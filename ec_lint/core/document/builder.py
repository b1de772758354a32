"""
Document builder.

Turns a raw byte buffer into a Document:
1. Sniff the BOM at offset 0 (longest signature first)
2. Decode the remaining bytes
3. Split the text at CR, LF and CRLF terminators

A BOM-like sequence anywhere but offset 0 is ordinary text.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .charset import Charset, charset_for_bom, decode_body, decode_with_bom, sniff_bom
from .models import Document, Line
from .newline import Newline, detect_newline

if TYPE_CHECKING:
    from collections.abc import Iterator

_TERMINATOR_START = re.compile(r"[\r\n]")


def split_lines(text: str) -> Iterator[tuple[str | None, Newline]]:
    """
    Split decoded text into (text, ending) pairs.

    A bare terminator yields ``None`` text. Empty input yields a single
    ``(None, Newline.NONE)``. A trailing terminator does not produce an
    extra empty line.
    """
    if not text:
        yield None, Newline.NONE
        return

    start = 0
    for match in _TERMINATOR_START.finditer(text):
        offset = match.start()
        if offset < start:
            # Second half of a CRLF already consumed
            continue
        ending, length = detect_newline(text, offset)
        yield text[start:offset] or None, ending
        start = offset + length

    if start < len(text):
        yield text[start:], Newline.NONE


def build_document(
    data: bytes,
    charset: Charset | str | None = None,
    *,
    bom: bytes | None = None,
) -> Document:
    """
    Build a Document from raw bytes.

    Content after a BOM that does not decode with the BOM's codec is decoded
    like BOM-less content. The BOM still sets the document charset, and the
    document reports ``bom_mismatch``.

    Args:
        data: Raw file content
        charset: Configured charset. ``latin1`` makes BOM-less content decode
            as Latin-1 and marks line 1 as latin1. Other values and unknown
            names have no effect.
        bom: Force this BOM instead of sniffing; ``data`` is then the content
            after the BOM

    Returns:
        Document whose ``to_bytes()`` reproduces ``data`` (plus ``bom``)

    Raises:
        InvalidBomError: If ``bom`` is not a supported signature
    """
    configured = Charset.parse(charset)

    detected: Charset | None
    if bom is not None:
        detected = charset_for_bom(bom)
        body = data
    else:
        sniffed = sniff_bom(data)
        if sniffed is not None:
            found, detected = sniffed
            body = data[len(found) :]
        else:
            detected = Charset.LATIN1 if configured is Charset.LATIN1 else None
            body = data

    if detected is not None and detected.bom:
        text = decode_with_bom(body, detected)
        encoding = detected.codec
        if text is None:
            text, encoding = decode_body(body)
    else:
        text, encoding = decode_body(body, detected)

    document = Document(encoding=encoding)
    for line_text, ending in split_lines(text):
        document.append(Line(line_text, ending, number=len(document) + 1))
    document.lines[0].charset = detected
    return document
