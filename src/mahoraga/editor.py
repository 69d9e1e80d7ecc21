"""Editable text buffer with a cursor.

Used for the multi-line prompt and for single-line settings fields. The
cursor is a character offset and always stays within ``[0, len(text)]``;
operations at a boundary are no-ops.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TextBuffer:
    text: str = ""
    cursor: int = 0

    def __len__(self) -> int:
        return len(self.text)

    def starts_with(self, prefix: str) -> bool:
        return self.text.startswith(prefix)

    def set(self, text: str) -> None:
        """Replace the contents and move the cursor to the end."""
        self.text = text
        self.cursor = len(text)

    def clear(self) -> None:
        self.text = ""
        self.cursor = 0

    def insert(self, chars: str) -> None:
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def backspace(self) -> bool:
        """Remove the character before the cursor. Returns True if anything changed."""
        if self.cursor == 0:
            return False
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1
        return True

    def delete(self) -> bool:
        """Remove the character at the cursor. Returns True if anything changed."""
        if self.cursor >= len(self.text):
            return False
        self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]
        return True

    def move_left(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_right(self) -> None:
        if self.cursor < len(self.text):
            self.cursor += 1

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.text)

    def kill_to_line_start(self) -> bool:
        """Delete from the start of the current line up to the cursor (Ctrl+U).

        The line start is just after the last newline before the cursor, or
        the start of the buffer. Returns True if anything was removed.
        """
        if self.cursor == 0:
            return False
        line_start = self.text.rfind("\n", 0, self.cursor) + 1
        if line_start == self.cursor:
            return False
        self.text = self.text[:line_start] + self.text[self.cursor :]
        self.cursor = line_start
        return True
