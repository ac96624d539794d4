"""Character-level cursor over a fully materialized input string.

The scanner is the only owner of the read position. Every other component
moves through the text by calling these primitives, and speculative reads use
``checkpoint``/``restore`` to roll the cursor back.
"""

# End-of-input sentinel returned by peek operations
END_OF_INPUT = ""


class Scanner:
    """Read cursor over an immutable input text.

    Attributes:
        text: Input text being scanned
        position: Current read offset, always within ``0..len(text)``
    """

    __slots__ = ("text", "position", "_length")

    def __init__(self, text: str) -> None:
        self.text = text
        self.position = 0
        self._length = len(text)

    @property
    def at_end(self) -> bool:
        """Check whether the cursor has consumed the whole input."""
        return self.position >= self._length

    @property
    def remaining(self) -> int:
        """Number of characters not yet consumed."""
        return self._length - self.position

    def peek(self) -> str:
        """Return the character under the cursor, or END_OF_INPUT."""
        return self.peek_ahead(0)

    def peek_ahead(self, offset: int) -> str:
        """Return the character ``offset`` places past the cursor, or END_OF_INPUT."""
        index = self.position + offset
        if 0 <= index < self._length:
            return self.text[index]
        return END_OF_INPUT

    def read_until(self, delimiter: str) -> str:
        """Consume and return text up to the next ``delimiter`` or end of input.

        The delimiter itself is not consumed.
        """
        start = self.position
        end = self.text.find(delimiter, start)
        if end == -1:
            end = self._length
        self.position = end
        return self.text[start:end]

    def skip_whitespace(self) -> None:
        """Advance past a run of whitespace characters.

        Whitespace is whatever ``str.isspace`` accepts, the same set
        ``str.strip`` removes when node content is trimmed.
        """
        while self.position < self._length and self.text[self.position].isspace():
            self.position += 1

    def advance(self, count: int = 1) -> None:
        """Move the cursor forward, stopping at end of input."""
        self.position = min(self.position + count, self._length)

    def checkpoint(self) -> int:
        """Snapshot the cursor for a later ``restore``."""
        return self.position

    def restore(self, checkpoint: int) -> None:
        """Return the cursor to a snapshot taken with ``checkpoint``."""
        if not 0 <= checkpoint <= self._length:
            raise ValueError(f"Checkpoint {checkpoint} is outside the input")
        self.position = checkpoint

    def __repr__(self) -> str:
        return f"Scanner(position={self.position}, length={self._length})"
