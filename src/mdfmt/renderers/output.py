#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Line-oriented output buffer with blank-line bookkeeping."""

from __future__ import annotations

from typing import Iterable


class OutputBuffer:
    """Append-only buffer of physical output lines.

    The buffer remembers whether its tail is a separator blank line, so
    that repeated requests for a blank line never produce two in a row.
    A blank line inside a blockquote carries the bare quote marker and
    still counts as blank.
    """

    def __init__(self) -> None:
        """Initialize an empty buffer."""
        self._lines: list[str] = []
        self._blank_tail = False

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        """True when nothing has been written yet."""
        return not self._lines

    def write_line(self, line: str) -> None:
        """Append one physical line."""
        self._lines.append(line)
        self._blank_tail = False

    def write_lines(self, lines: Iterable[str]) -> None:
        """Append several physical lines."""
        for line in lines:
            self.write_line(line)

    def ensure_blank_line(self, prefix: str = "") -> bool:
        """Append a separator blank line unless one is already there.

        Parameters
        ----------
        prefix : str, default = ""
            Container prefix for the blank line; trailing whitespace is
            removed, so a quote prefix becomes ``>``

        Returns
        -------
        bool
            True when a line was appended

        """
        if self.is_empty or self._blank_tail:
            return False
        self._lines.append(prefix.rstrip())
        self._blank_tail = True
        return True

    def getvalue(self) -> str:
        """Return the buffered text with exactly one trailing newline.

        Trailing whitespace of the document is trimmed; an empty document
        yields an empty string.
        """
        text = "\n".join(self._lines).rstrip()
        if not text:
            return ""
        return text + "\n"
