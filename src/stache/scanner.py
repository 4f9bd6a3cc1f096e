"""Scanner - walks raw template text one delimiter at a time."""

from __future__ import annotations


class Scanner:
    """Reads template text up to caller-chosen markers, counting lines."""

    def __init__(self, data: str, line: int = 1):
        self.data = data
        self.pos = 0
        self.line = line

    def read_until(self, marker: str) -> tuple[str, bool]:
        """Return the text before the next ``marker`` and step past it.

        Args:
            marker: The substring to look for, usually a delimiter.

        Returns:
            ``(text, found)``. When the marker never occurs, ``text`` is the
            rest of the input and ``found`` is False.
        """
        idx = self.data.find(marker, self.pos)
        if idx < 0:
            text = self.data[self.pos :]
            self.pos = len(self.data)
            self.line += text.count("\n")
            return text, False

        text = self.data[self.pos : idx]
        self.pos = idx + len(marker)
        self.line += text.count("\n") + marker.count("\n")
        return text, True

    def peek(self) -> str:
        """Next character, or an empty string at end of input."""
        return self.data[self.pos : self.pos + 1]

    def skip_newline(self) -> bool:
        """Consume a single ``\\n`` or ``\\r\\n`` at the read position."""
        if self.data.startswith("\n", self.pos):
            self.pos += 1
        elif self.data.startswith("\r\n", self.pos):
            self.pos += 2
        else:
            return False
        self.line += 1
        return True
