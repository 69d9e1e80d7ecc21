"""Settings sub-state machine.

The settings screen edits a working copy of the configuration. It has two
mutually exclusive modes: navigation (move between fields, cycle the
backend, press Save/Cancel) and field editing (a single-line editor seeded
with the field's value). Committing the working copy is the controller's
job; this module only reports that the user asked for it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from mahoraga import keys
from mahoraga.config import Config
from mahoraga.editor import TextBuffer
from mahoraga.keys import KeyPress
from mahoraga.models import ProviderType

logger = logging.getLogger(__name__)


class SettingsField(Enum):
    """A row on the settings screen: (label, config section, attribute, masked)."""

    PROVIDER = ("Provider", None, None, False)
    AZURE_URL = ("Azure URL", "azure", "url", False)
    AZURE_API_KEY = ("API Key", "azure", "api_key", True)
    AZURE_DEPLOYMENT = ("Deployment", "azure", "deployment", False)
    AZURE_API_VERSION = ("API Version", "azure", "api_version", False)
    OPENAI_API_KEY = ("API Key", "openai", "api_key", True)
    OPENAI_MODEL = ("Model", "openai", "model", False)
    ANTHROPIC_API_KEY = ("API Key", "anthropic", "api_key", True)
    ANTHROPIC_MODEL = ("Model", "anthropic", "model", False)
    SAVE = ("Save", None, None, False)
    CANCEL = ("Cancel", None, None, False)

    def __init__(self, label: str, section: str | None, attr: str | None, masked: bool) -> None:
        self.label = label
        self.section = section
        self.attr = attr
        self.is_password = masked

    @property
    def is_button(self) -> bool:
        return self in (SettingsField.SAVE, SettingsField.CANCEL)

    @property
    def is_provider_selector(self) -> bool:
        return self is SettingsField.PROVIDER

    @property
    def is_text(self) -> bool:
        return self.section is not None

    def get(self, config: Config) -> str:
        """Current value of this field in ``config`` (empty for non-text rows)."""
        if self.is_provider_selector:
            return config.provider.active.display_name
        if not self.is_text:
            return ""
        return getattr(getattr(config, self.section), self.attr)

    def set(self, config: Config, value: str) -> None:
        if self.is_text:
            setattr(getattr(config, self.section), self.attr, value)


PROVIDER_FIELDS: dict[ProviderType, list[SettingsField]] = {
    ProviderType.AZURE: [
        SettingsField.AZURE_URL,
        SettingsField.AZURE_API_KEY,
        SettingsField.AZURE_DEPLOYMENT,
        SettingsField.AZURE_API_VERSION,
    ],
    ProviderType.OPENAI: [SettingsField.OPENAI_API_KEY, SettingsField.OPENAI_MODEL],
    ProviderType.ANTHROPIC: [SettingsField.ANTHROPIC_API_KEY, SettingsField.ANTHROPIC_MODEL],
}


def fields_for_provider(provider: ProviderType) -> list[SettingsField]:
    """Selector first, then the backend's own fields, then Save and Cancel."""
    return [SettingsField.PROVIDER, *PROVIDER_FIELDS[provider], SettingsField.SAVE, SettingsField.CANCEL]


class SettingsRequest(Enum):
    """What the settings screen asks the controller to do after a key."""

    SAVE = "save"
    CLOSE = "close"


@dataclass
class SettingsState:
    """Working copy plus the field cursor and edit overlay."""

    working: Config = field(default_factory=Config)
    selected: int = 0
    editing: bool = False
    edit: TextBuffer = field(default_factory=TextBuffer)
    message: str | None = None
    is_error: bool = False

    @property
    def fields(self) -> list[SettingsField]:
        return fields_for_provider(self.working.provider.active)

    @property
    def selected_field(self) -> SettingsField:
        return self.fields[self.selected]

    def open(self, config: Config) -> None:
        """Snapshot ``config`` into a fresh working copy and reset the cursor."""
        self.working = config.copy()
        self.selected = 0
        self.editing = False
        self.edit.clear()
        self.message = None
        self.is_error = False

    def show_message(self, text: str, *, error: bool) -> None:
        self.message = text
        self.is_error = error

    def handle_key(self, key: KeyPress) -> SettingsRequest | None:
        if self.editing:
            self.handle_edit_key(key)
            return None
        return self.handle_nav_key(key)

    # -- Navigation ---------------------------------------------------------

    def handle_nav_key(self, key: KeyPress) -> SettingsRequest | None:
        name = key.key
        if name == keys.ESCAPE:
            return SettingsRequest.CLOSE
        if name == keys.UP:
            if self.selected > 0:
                self.selected -= 1
                self.message = None
        elif name in (keys.DOWN, keys.TAB):
            if self.selected < len(self.fields) - 1:
                self.selected += 1
                self.message = None
        elif name in (keys.LEFT, keys.RIGHT):
            if self.selected_field.is_provider_selector:
                current = self.working.provider.active
                self.working.provider.active = current.next() if name == keys.RIGHT else current.previous()
                # The field list changes shape per backend
                self.selected = 0
                self.editing = False
                logger.debug("Settings backend -> %s", self.working.provider.active.value)
        elif name == keys.ENTER:
            selected = self.selected_field
            if selected is SettingsField.SAVE:
                return SettingsRequest.SAVE
            if selected is SettingsField.CANCEL:
                return SettingsRequest.CLOSE
            if selected.is_text:
                self.editing = True
                self.edit.set(selected.get(self.working))
        return None

    # -- Field editing --------------------------------------------------------

    def handle_edit_key(self, key: KeyPress) -> None:
        name = key.key
        if name == keys.ESCAPE:
            self.editing = False
            self.edit.clear()
        elif name == keys.ENTER:
            self.selected_field.set(self.working, self.edit.text)
            self.editing = False
            self.edit.clear()
        elif name == keys.BACKSPACE:
            self.edit.backspace()
        elif name == keys.DELETE:
            self.edit.delete()
        elif name == keys.LEFT:
            self.edit.move_left()
        elif name == keys.RIGHT:
            self.edit.move_right()
        elif name == keys.HOME:
            self.edit.home()
        elif name == keys.END:
            self.edit.end()
        elif key.is_printable:
            self.edit.insert(key.character)

    def paste(self, text: str) -> None:
        """Paste into the field being edited. Field values are single-line."""
        if self.editing:
            self.edit.insert(text.replace("\r", "").replace("\n", ""))
