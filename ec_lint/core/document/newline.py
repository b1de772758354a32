"""
Line terminator model.

A line ends in LF, CRLF, CR, or nothing at all (the last line of a file
without a final newline).
"""

from __future__ import annotations

from enum import Enum


class Newline(Enum):
    """Line terminator variant. The value is the EditorConfig name."""

    LF = "lf"
    CRLF = "crlf"
    CR = "cr"
    NONE = "none"

    @property
    def literal(self) -> str:
        """The terminator's character sequence."""
        return _LITERALS[self]

    @classmethod
    def from_name(cls, name: object) -> Newline | None:
        """Look up a terminator by its EditorConfig name (``lf``, ``crlf``, ``cr``)."""
        if isinstance(name, cls):
            return None if name is cls.NONE else name
        if not isinstance(name, str):
            return None
        try:
            newline = cls(name.strip().lower())
        except ValueError:
            return None
        return None if newline is cls.NONE else newline


_LITERALS: dict[Newline, str] = {
    Newline.LF: "\n",
    Newline.CRLF: "\r\n",
    Newline.CR: "\r",
    Newline.NONE: "",
}


def detect_newline(text: str, offset: int) -> tuple[Newline, int]:
    """
    Detect the terminator starting at ``offset``.

    Args:
        text: Decoded text
        offset: Position to look at

    Returns:
        (newline, length) - ``(Newline.NONE, 0)`` when no terminator starts here
    """
    char = text[offset : offset + 1]
    if char == "\r":
        if text[offset + 1 : offset + 2] == "\n":
            return Newline.CRLF, 2
        return Newline.CR, 1
    if char == "\n":
        return Newline.LF, 1
    return Newline.NONE, 0
