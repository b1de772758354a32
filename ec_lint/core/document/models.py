"""
Line and document models.

CRITICAL DESIGN DECISIONS:
- Only line 1 may carry a BOM; the document charset lives on line 1
- ``Line.text is None`` means "no text" (a bare terminator), which is not
  the same as ``""``
- Documents are mutable and owned by the single operation that built them
- Serialization is lossless: an untouched document writes back the exact
  bytes it was built from
"""

from __future__ import annotations

import codecs
from typing import TYPE_CHECKING

from ec_lint.core.errors import InvalidBomError

from .charset import Charset, charset_for_bom, encode_text
from .newline import Newline

if TYPE_CHECKING:
    from collections.abc import Iterator


class Line:
    """
    One line of a document.

    The serialized form is always ``bom + text + ending.literal``.
    """

    def __init__(
        self,
        text: str | None = None,
        ending: Newline = Newline.NONE,
        *,
        number: int = 1,
        bom: bytes | None = None,
        charset: Charset | None = None,
    ) -> None:
        """
        Create a line.

        Args:
            text: Content without BOM and terminator
            ending: Line terminator
            number: 1-based line number
            bom: Explicit BOM bytes (line 1 only)
            charset: Charset marker (line 1 only); ignored when ``bom`` is given

        Raises:
            InvalidBomError: If ``bom`` is not a supported signature, or a
                BOM is given for a line other than line 1
        """
        if bom is not None:
            charset = charset_for_bom(bom)
        if charset is not None and charset.bom and number != 1:
            raise InvalidBomError(charset.bom, f"BOM not allowed on line {number}")
        self.number = number
        self.text = text
        self.ending = ending
        self._charset = charset

    @property
    def charset(self) -> Charset | None:
        """Charset marker; only line 1 carries one."""
        return self._charset

    @charset.setter
    def charset(self, value: Charset | None) -> None:
        self._charset = value

    @property
    def bom(self) -> bytes | None:
        """BOM bytes, or None when the line has no BOM."""
        if self._charset is None or self.number != 1:
            return None
        return self._charset.bom or None

    @property
    def content(self) -> str:
        """Text followed by the terminator, without the BOM."""
        return (self.text or "") + self.ending.literal

    def to_bytes(self, encoding: str = "utf-8") -> bytes:
        """Serialize the line: BOM, text, terminator."""
        return (self.bom or b"") + encode_text(self.content, encoding)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return (
            self.number == other.number
            and self.text == other.text
            and self.ending is other.ending
            and self.bom == other.bom
        )

    def __repr__(self) -> str:
        return f"Line(number={self.number}, text={self.text!r}, ending={self.ending.name}, bom={self.bom!r})"


class Document:
    """
    Ordered sequence of lines.

    Line numbers stay contiguous from 1 across ``append``, ``pop`` and
    ``insert``; the BOM always stays with whichever line is first.
    """

    def __init__(self, lines: list[Line] | None = None, *, encoding: str = "utf-8") -> None:
        self.lines: list[Line] = []
        self.encoding = encoding
        for line in lines or []:
            self.lines.append(line)
        self._renumber(self.lines[0].charset if self.lines else None)

    # -------------------------------------------------------------------------
    # Charset
    # -------------------------------------------------------------------------

    @property
    def charset(self) -> Charset | None:
        """Document charset, taken from line 1."""
        return self.lines[0].charset if self.lines else None

    @charset.setter
    def charset(self, value: Charset | None) -> None:
        """
        Change the charset.

        The old BOM is dropped, the new one (if any) is written on output and
        the text is re-encoded with the new charset's codec.
        """
        if value == self.charset:
            return
        if not self.lines:
            self.lines.append(Line())
        self.lines[0].charset = value
        if value is not None:
            self.encoding = value.codec

    @property
    def bom_mismatch(self) -> bool:
        """Whether the content was decoded with a codec other than its BOM's."""
        charset = self.charset
        if charset is None or not charset.bom:
            return False
        return codecs.lookup(charset.codec).name != codecs.lookup(self.encoding).name

    # -------------------------------------------------------------------------
    # Sequence operations
    # -------------------------------------------------------------------------

    def append(self, line: Line) -> None:
        """Add a line at the end."""
        self.insert(len(self.lines), line)

    def insert(self, index: int, line: Line) -> None:
        """Insert a line before ``index`` and renumber."""
        charset = self.charset
        self.lines.insert(index, line)
        self._renumber(charset)

    def pop(self, index: int = -1) -> Line:
        """Remove and return a line, renumbering the rest."""
        charset = self.charset
        line = self.lines.pop(index)
        self._renumber(charset)
        return line

    @property
    def last_line(self) -> Line | None:
        """The final line, or None for a document with no lines."""
        return self.lines[-1] if self.lines else None

    def _renumber(self, charset: Charset | None) -> None:
        """Restore contiguous numbering and keep the charset on line 1."""
        for number, line in enumerate(self.lines, start=1):
            line.number = number
            if number != 1:
                line.charset = None
        if self.lines and charset is not None:
            self.lines[0].charset = charset

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> Line:
        return self.lines[index]

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_text(self) -> str:
        """Document content as text, without the BOM."""
        return "".join(line.content for line in self.lines)

    def to_bytes(self) -> bytes:
        """
        Serialize the document.

        Writes line 1's BOM followed by all line content encoded with the
        document's codec.
        """
        bom = self.lines[0].bom if self.lines else None
        return (bom or b"") + encode_text(self.to_text(), self.encoding)

    def __repr__(self) -> str:
        charset = self.charset.value if self.charset else None
        return f"Document(lines={len(self.lines)}, charset={charset!r}, encoding={self.encoding!r})"
