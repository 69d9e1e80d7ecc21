"""Widgets for the Mahoraga TUI.

PromptBox: the prompt editor, with the analyzing animation in its title.
CommandMenu: slash commands matching the typed prefix.
ScoreDisplay: score, label and a proportional bar.
FeedbackView: improvement and unclear-part bullets.
ErrorBar: one-line error message.
SettingsPanel: settings form, drawn over the frozen main view.
StatusBar: key hints at the bottom.

Each widget takes the controller (or part of it) and redraws itself through
the pure helpers in ``render``.
"""

from __future__ import annotations

from textual.widgets import Static

from mahoraga.commands import CommandPalette
from mahoraga.controller import Controller
from mahoraga.models import AnalysisResult
from mahoraga.settings import SettingsState

from . import render


class ToggleMixin:
    """Show/hide via a ``visible`` CSS class (hidden by default in DEFAULT_CSS)."""

    def set_visible(self, visible: bool) -> None:
        if visible:
            self.add_class("visible")
        else:
            self.remove_class("visible")


class HeaderBar(Static):
    DEFAULT_CSS = """
    HeaderBar {
        height: auto;
        margin: 0 1;
    }
    """

    def show(self, terminal_height: int) -> None:
        self.update(render.render_header(terminal_height))


class ProviderLine(Static):
    DEFAULT_CSS = """
    ProviderLine {
        height: 1;
        margin: 0 1;
    }
    """


class PromptBox(Static):
    DEFAULT_CSS = """
    PromptBox {
        height: auto;
        min-height: 3;
        margin: 0 1;
        padding: 0 1;
        border: round #d4af37;
    }
    PromptBox.unfocused {
        border: round #404040;
    }
    """

    def show(self, controller: Controller) -> None:
        focused = not controller.menu_visible
        self.set_class(not focused, "unfocused")
        self.border_title = render.prompt_title(controller)
        self.update(render.render_prompt(controller))


class CommandMenu(ToggleMixin, Static):
    DEFAULT_CSS = """
    CommandMenu {
        height: auto;
        width: 50;
        margin: 0 2;
        border: round #d4af37;
        display: none;
    }
    CommandMenu.visible {
        display: block;
    }
    """

    def on_mount(self) -> None:
        self.border_title = "Commands"

    def show(self, palette: CommandPalette, visible: bool) -> None:
        self.set_visible(visible)
        if visible:
            self.update(render.render_command_menu(palette))


class ScoreDisplay(ToggleMixin, Static):
    DEFAULT_CSS = """
    ScoreDisplay {
        height: 4;
        margin: 0 1;
        padding: 0 1;
        border: round #404040;
        display: none;
    }
    ScoreDisplay.visible {
        display: block;
    }
    """

    def on_mount(self) -> None:
        self.border_title = "Quality Score"

    def show(self, result: AnalysisResult | None) -> None:
        self.set_visible(result is not None)
        if result is not None:
            width = max(self.content_size.width, 10)
            self.update(render.render_score(result.score, width))


class FeedbackView(ToggleMixin, Static):
    DEFAULT_CSS = """
    FeedbackView {
        height: auto;
        min-height: 4;
        margin: 0 1;
        padding: 1 2;
        border: round #404040;
        display: none;
    }
    FeedbackView.visible {
        display: block;
    }
    """

    def on_mount(self) -> None:
        self.border_title = "Feedback"

    def show(self, result: AnalysisResult | None) -> None:
        self.set_visible(result is not None)
        if result is not None:
            self.update(render.render_feedback(result))


class ErrorBar(ToggleMixin, Static):
    DEFAULT_CSS = """
    ErrorBar {
        height: auto;
        margin: 0 1;
        display: none;
    }
    ErrorBar.visible {
        display: block;
    }
    """

    def show(self, error: str | None) -> None:
        self.set_visible(bool(error))
        if error:
            self.update(render.render_error(error))


class SettingsPanel(ToggleMixin, Static):
    """Settings form on the overlay layer, covering the main view while open."""

    DEFAULT_CSS = """
    SettingsPanel {
        layer: overlay;
        width: 100%;
        height: 1fr;
        margin-bottom: 1;
        padding: 1 2;
        background: #111111;
        border: round #d4af37;
        display: none;
    }
    SettingsPanel.visible {
        display: block;
    }
    """

    def on_mount(self) -> None:
        self.border_title = "Settings"

    def show(self, settings: SettingsState, visible: bool) -> None:
        self.set_visible(visible)
        if visible:
            self.update(render.render_settings(settings))


class StatusBar(Static):
    """Keybinding hints at the bottom."""

    DEFAULT_CSS = """
    StatusBar {
        dock: bottom;
        height: 1;
        padding: 0 1;
    }
    """
