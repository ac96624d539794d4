"""Speculative tag reading with rollback.

A tag is ``<`` or ``</``, an alphanumeric name, anything up to ``>`` (attributes
and other tag-interior text are discarded) and the ``>`` itself. A read that
hits end of input before ``>`` restores the cursor and reports no tag.
"""

from dataclasses import dataclass
from typing import Optional

from .scanner import Scanner

TAG_OPEN = "<"
TAG_CLOSE = ">"
END_TAG_MARKER = "/"


def is_name_char(char: str) -> bool:
    """Check whether ``char`` belongs to a tag name (ASCII letters and digits)."""
    return char.isascii() and char.isalnum()


@dataclass(frozen=True)
class TagRead:
    """A successfully consumed tag.

    Attributes:
        name: Tag name, possibly empty
        closing: True when the tag was written as ``</name>``
        start: Offset of the ``<``
        end: Offset just past the ``>``
    """

    name: str
    closing: bool
    start: int
    end: int


class TagReader:
    """Reads tag names from a shared scanner."""

    __slots__ = ("scanner",)

    def __init__(self, scanner: Scanner) -> None:
        self.scanner = scanner

    def read_tag(self) -> Optional[TagRead]:
        """Consume one opening or closing tag at the cursor.

        Returns:
            TagRead on success, None when the cursor is not at ``<`` or the
            tag has no ``>`` before end of input (cursor left unchanged)
        """
        scanner = self.scanner
        if scanner.peek() != TAG_OPEN:
            return None

        start = scanner.checkpoint()
        scanner.advance()

        closing = scanner.peek() == END_TAG_MARKER
        if closing:
            scanner.advance()

        name = self._read_name()

        scanner.read_until(TAG_CLOSE)
        if scanner.at_end:
            scanner.restore(start)
            return None

        scanner.advance()
        return TagRead(name=name, closing=closing, start=start, end=scanner.position)

    def read_tag_name(self) -> Optional[str]:
        """Consume one tag and return only its name.

        Empty names (``<>``, ``</>``) are successful reads returning ``""``.
        """
        tag = self.read_tag()
        return tag.name if tag is not None else None

    def match_tag_name(self, name: str) -> bool:
        """Check, without moving the cursor, for ``</`` followed by exactly ``name``."""
        scanner = self.scanner
        if scanner.peek_ahead(0) != TAG_OPEN or scanner.peek_ahead(1) != END_TAG_MARKER:
            return False

        offset = 2
        while is_name_char(scanner.peek_ahead(offset)):
            offset += 1
        start = scanner.position + 2
        return scanner.text[start:scanner.position + offset] == name

    def _read_name(self) -> str:
        scanner = self.scanner
        start = scanner.position
        while is_name_char(scanner.peek()):
            scanner.advance()
        return scanner.text[start:scanner.position]
