"""Slash command registry and the command palette filter.

The registry is fixed at import time. The palette narrows it down as the user
types a ``/``-prefixed prompt and tracks which row is selected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CommandEffect(Enum):
    OPEN_SETTINGS = "open_settings"
    CYCLE_PROVIDER = "cycle_provider"
    CLEAR = "clear"
    RESET_DEFAULTS = "reset_defaults"
    EXIT = "exit"


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    effect: CommandEffect


COMMANDS: tuple[Command, ...] = (
    Command("/settings", "Configure API settings", CommandEffect.OPEN_SETTINGS),
    Command("/provider", "Switch active provider", CommandEffect.CYCLE_PROVIDER),
    Command("/clear", "Clear current prompt", CommandEffect.CLEAR),
    Command("/default", "Reset to default settings", CommandEffect.RESET_DEFAULTS),
    Command("/exit", "Exit the application", CommandEffect.EXIT),
)


def filter_commands(filter_text: str) -> list[Command]:
    """Return commands whose name or description contains the filter text.

    Matching is a case-insensitive substring search. An empty filter or a bare
    "/" returns every command. Registry order is preserved.
    """
    needle = filter_text.lower()
    if not needle or needle == "/":
        return list(COMMANDS)
    return [cmd for cmd in COMMANDS if needle in cmd.name.lower() or needle in cmd.description.lower()]


def find_command(name: str) -> Command | None:
    """Exact name lookup across the whole registry."""
    for cmd in COMMANDS:
        if cmd.name == name:
            return cmd
    return None


@dataclass
class CommandPalette:
    """Filter text plus the selected row among the matching commands."""

    filter_text: str = ""
    selected: int = 0

    @property
    def matches(self) -> list[Command]:
        return filter_commands(self.filter_text)

    def update_filter(self, text: str) -> bool:
        """Set the filter text, resetting the selection when it changes.

        Returns True when at least one command matches.
        """
        if text != self.filter_text:
            self.filter_text = text
            self.selected = 0
        return bool(self.matches)

    def reset(self) -> None:
        self.filter_text = ""
        self.selected = 0

    def move_up(self) -> None:
        if self.selected > 0:
            self.selected -= 1

    def move_down(self) -> None:
        last = len(self.matches) - 1
        if self.selected < last:
            self.selected += 1

    def current(self) -> Command | None:
        matches = self.matches
        if 0 <= self.selected < len(matches):
            return matches[self.selected]
        return None
