"""Key input vocabulary understood by the controller.

Key names follow Textual's naming (``enter``, ``escape``, ``ctrl+u`` ...) so
the terminal front end can pass them through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass

ENTER = "enter"
ESCAPE = "escape"
TAB = "tab"
BACKSPACE = "backspace"
DELETE = "delete"
LEFT = "left"
RIGHT = "right"
UP = "up"
DOWN = "down"
HOME = "home"
END = "end"
CTRL_C = "ctrl+c"
CTRL_U = "ctrl+u"
# Keys that insert a newline into the (multi-line) prompt.
NEWLINE_KEYS = frozenset({"shift+enter", "ctrl+j"})


@dataclass(frozen=True)
class KeyPress:
    """A single key event."""

    key: str
    character: str | None = None

    @property
    def is_printable(self) -> bool:
        return self.character is not None and len(self.character) == 1 and self.character.isprintable()

    @classmethod
    def char(cls, character: str) -> KeyPress:
        """Build a printable key press for a single character."""
        return cls(key=character, character=character)


def keys_for_text(text: str) -> list[KeyPress]:
    """Expand a string into one printable KeyPress per character."""
    return [KeyPress.char(c) for c in text]
