"""MahoragaApp: Textual application around the controller.

Textual owns the terminal and the event loop. The app only translates key
events into ``KeyPress`` values, drives ``Scheduler.tick`` from a timer, and
redraws every widget from controller state after each change.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.containers import Vertical

from mahoraga import keys
from mahoraga.controller import Controller
from mahoraga.keys import KeyPress
from mahoraga.loop import Scheduler
from mahoraga.models import Screen

from . import render
from .widgets import (
    CommandMenu,
    ErrorBar,
    FeedbackView,
    HeaderBar,
    PromptBox,
    ProviderLine,
    ScoreDisplay,
    SettingsPanel,
    StatusBar,
)

logger = logging.getLogger(__name__)

# Keys Textual would otherwise consume for focus movement or its own bindings
FORWARDED_KEYS = (keys.TAB, keys.ENTER, keys.ESCAPE, keys.UP, keys.DOWN)


def key_press_from_event(event: events.Key) -> KeyPress:
    character = event.character if event.is_printable else None
    return KeyPress(event.key, character)


class MahoragaApp(App):
    """Prompt analyzer TUI."""

    TITLE = "mahoraga"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layout: vertical;
        layers: base overlay;
        background: #111111;
    }
    #main-view {
        layer: base;
        height: 1fr;
    }
    #status {
        layer: base;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("ctrl+c", "forward_key('ctrl+c')", "Quit", show=False, priority=True),
        *[Binding(name, f"forward_key('{name}')", show=False, priority=True) for name in FORWARDED_KEYS],
    ]

    def __init__(self, scheduler: Scheduler) -> None:
        super().__init__()
        self.scheduler = scheduler

    @property
    def controller(self) -> Controller:
        return self.scheduler.controller

    def compose(self) -> ComposeResult:
        with Vertical(id="main-view"):
            yield HeaderBar(id="header")
            yield ProviderLine(id="provider")
            yield PromptBox(id="prompt")
            yield CommandMenu(id="command-menu")
            yield ErrorBar(id="error")
            yield ScoreDisplay(id="score")
            yield FeedbackView(id="feedback")
        yield SettingsPanel(id="settings")
        yield StatusBar(id="status")

    def on_mount(self) -> None:
        self.set_interval(self.scheduler.poll_interval, self.on_tick)
        self.refresh_view()

    def on_tick(self) -> None:
        """Timer callback: merge a pending completion and advance the animation."""
        self.scheduler.tick()
        self.refresh_view()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.dispatch_key(key_press_from_event(event))

    def on_paste(self, event: events.Paste) -> None:
        """Bracketed paste arrives as one event rather than as key presses."""
        event.stop()
        self.controller.paste(event.text)
        self.refresh_view()

    def action_forward_key(self, name: str) -> None:
        self.dispatch_key(KeyPress(name))

    def dispatch_key(self, key: KeyPress) -> None:
        self.scheduler.handle_key(key)
        if self.scheduler.should_quit:
            logger.debug("Quit requested")
            self.exit()
            return
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw from controller state. The main view is left as-is under the settings overlay."""
        controller = self.controller
        in_settings = controller.screen is Screen.SETTINGS

        self.query_one("#settings", SettingsPanel).show(controller.settings, in_settings)
        status = self.query_one("#status", StatusBar)
        if in_settings:
            status.update(render.settings_status(controller.settings))
            return

        self.query_one("#header", HeaderBar).show(self.size.height)
        self.query_one("#provider", ProviderLine).update(render.render_provider_line(controller.config.provider.active))
        self.query_one("#prompt", PromptBox).show(controller)
        self.query_one("#command-menu", CommandMenu).show(controller.palette, controller.menu_visible)
        self.query_one("#error", ErrorBar).show(controller.error)
        self.query_one("#score", ScoreDisplay).show(controller.result)
        self.query_one("#feedback", FeedbackView).show(controller.result)
        status.update(render.main_status(controller))
