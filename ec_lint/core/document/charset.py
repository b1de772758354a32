"""
Charset and byte order mark handling.

EditorConfig charsets:
- latin1 (no BOM)
- utf-8 (no BOM)
- utf-8-bom, utf-16be, utf-16le, utf-32be, utf-32le (identified by BOM)

BOM sniffing is a longest-prefix match: the utf-32le signature FF FE 00 00
starts with the utf-16le signature FF FE, so longer signatures are tested
first.

Content after a BOM is decoded with the BOM's codec. Text without a BOM is
decoded as UTF-8 when possible, otherwise with an ASCII compatible encoding
detected by charset-normalizer, falling back to Windows-1252 and Latin-1.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from charset_normalizer import from_bytes

from ec_lint.core.errors import InvalidBomError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

# Size of data to use for encoding detection (8KB is usually sufficient)
DETECTION_SAMPLE_SIZE = 8192

_ASCII_BYTES = bytes(range(0x80))
_ASCII_TEXT = _ASCII_BYTES.decode("ascii")


class Charset(Enum):
    """EditorConfig charset. The value is the EditorConfig spelling."""

    LATIN1 = "latin1"
    UTF_8 = "utf-8"
    UTF_8_BOM = "utf-8-bom"
    UTF_16BE = "utf-16be"
    UTF_16LE = "utf-16le"
    UTF_32BE = "utf-32be"
    UTF_32LE = "utf-32le"

    @property
    def bom(self) -> bytes:
        """BOM bytes written for this charset (empty for latin1 and utf-8)."""
        return _BOMS.get(self, b"")

    @property
    def codec(self) -> str:
        """Python codec used for text in this charset."""
        return _CODECS[self]

    @classmethod
    def parse(cls, value: object) -> Charset | None:
        """
        Parse a charset setting.

        Accepts ``utf-8-bom`` as well as ``utf_8_bom``; returns None for
        anything unrecognized.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower().replace("_", "-"))
        except ValueError:
            return None


_BOMS: dict[Charset, bytes] = {
    Charset.UTF_8_BOM: b"\xef\xbb\xbf",
    Charset.UTF_16BE: b"\xfe\xff",
    Charset.UTF_16LE: b"\xff\xfe",
    Charset.UTF_32BE: b"\x00\x00\xfe\xff",
    Charset.UTF_32LE: b"\xff\xfe\x00\x00",
}

_CODECS: dict[Charset, str] = {
    Charset.LATIN1: "latin-1",
    Charset.UTF_8: "utf-8",
    Charset.UTF_8_BOM: "utf-8",
    Charset.UTF_16BE: "utf-16-be",
    Charset.UTF_16LE: "utf-16-le",
    Charset.UTF_32BE: "utf-32-be",
    Charset.UTF_32LE: "utf-32-le",
}

# Sniffing order: first match wins, so longer signatures come first.
BOM_TABLE: tuple[tuple[bytes, Charset], ...] = tuple(
    sorted(((bom, charset) for charset, bom in _BOMS.items()), key=lambda item: -len(item[0]))
)


def sniff_bom(data: bytes) -> tuple[bytes, Charset] | None:
    """
    Detect a BOM at the start of ``data``.

    Never fails: returns None when no known signature is present.
    """
    for bom, charset in BOM_TABLE:
        if data.startswith(bom):
            return bom, charset
    return None


def charset_for_bom(bom: bytes) -> Charset:
    """
    Look up the charset of an explicitly supplied BOM.

    Raises:
        InvalidBomError: If ``bom`` is not exactly one of the known signatures
    """
    for known, charset in BOM_TABLE:
        if bom == known:
            return charset
    raise InvalidBomError(bom)


def _is_ascii_compatible(encoding: str) -> bool:
    """Whether ``encoding`` maps every 7-bit byte to the same ASCII character."""
    try:
        return _ASCII_BYTES.decode(encoding) == _ASCII_TEXT
    except (UnicodeError, LookupError):
        return False


def _decode_exact(body: bytes, encoding: str) -> str | None:
    """Decode ``body``, or None unless the text encodes back to the same bytes."""
    try:
        text = body.decode(encoding)
        return text if text.encode(encoding) == body else None
    except (UnicodeError, LookupError):
        return None


def _candidate_encodings(body: bytes, charset: Charset | None) -> Iterator[str]:
    if charset is not None:
        yield charset.codec
    yield "utf-8"
    # Only detections that keep CR and LF intact can be split into lines
    for match in from_bytes(body[:DETECTION_SAMPLE_SIZE]):
        if _is_ascii_compatible(match.encoding):
            yield match.encoding
    yield "cp1252"


def decode_with_bom(body: bytes, charset: Charset) -> str | None:
    """Decode the content after a BOM with the BOM's codec; None if it does not decode."""
    try:
        return body.decode(charset.codec)
    except UnicodeDecodeError:
        logger.debug("content does not decode as %s", charset.value)
        return None


def decode_body(body: bytes, charset: Charset | None = None) -> tuple[str, str]:
    """
    Decode file content that has no BOM.

    Decoding priority:
    1. Codec of ``charset`` (latin1 when configured)
    2. UTF-8
    3. charset-normalizer detections that are ASCII compatible and
       re-encode byte-exactly
    4. Windows-1252
    5. Latin-1 (always succeeds)

    Args:
        body: Raw file content
        charset: Charset the content is expected to be in

    Returns:
        (text, codec) - the codec is used again when serializing
    """
    for encoding in _candidate_encodings(body, charset):
        text = _decode_exact(body, encoding)
        if text is not None:
            logger.debug("decoded content as %s", encoding)
            return text, encoding

    logger.debug("falling back to latin-1")
    return body.decode("latin-1"), "latin-1"


def encode_text(text: str, codec: str) -> bytes:
    """Encode text for output; characters the codec cannot represent are replaced."""
    return text.encode(codec, errors="replace")
