"""Application controller: the single owner of all UI state.

The controller interprets key presses for the active screen, executes slash
commands, starts analyses and merges their completions. It never draws
anything; the terminal front end renders whatever state it holds.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from mahoraga import keys
from mahoraga.commands import Command, CommandEffect, CommandPalette, find_command
from mahoraga.config import Config, ConfigError, ConfigStore
from mahoraga.dispatch import AnalysisComplete, AnalysisDispatcher
from mahoraga.editor import TextBuffer
from mahoraga.keys import KeyPress
from mahoraga.models import AnalysisResult, AppState, Screen
from mahoraga.settings import SettingsRequest, SettingsState

logger = logging.getLogger(__name__)

ANALYZING_WORDS: list[str] = [
    "Scrutinizing",
    "Dissecting",
    "Examining",
    "Evaluating",
    "Deconstructing",
    "Appraising",
    "Assessing",
    "Investigating",
    "Elucidating",
    "Interrogating",
]
DEFAULT_ANALYZING_WORD = "Analyzing"
ANIMATION_FRAMES = 3


@dataclass
class Animation:
    """Dot animation shown while analyzing. Advanced by loop ticks, not wall-clock time."""

    frame: int = 0
    ticks: int = 0

    def reset(self) -> None:
        self.frame = 0
        self.ticks = 0

    def advance(self, ticks_per_frame: int) -> None:
        self.ticks += 1
        if self.ticks >= ticks_per_frame:
            self.ticks = 0
            self.frame = (self.frame + 1) % ANIMATION_FRAMES


@dataclass
class Controller:
    """All mutable UI state plus the handlers that change it.

    Attributes:
        config: The live configuration (what analyses and the header use).
        store: Persistence for ``config``.
        dispatcher: Runs analyses in the background.
        screen: Active screen.
        mode: Mode of the Main screen.
        prompt: Prompt text and cursor.
        palette: Command menu filter and selection.
        result: Last analysis result (mutually exclusive with ``error``).
        error: One-line error message.
        settings: Settings working copy and field cursor.
        generation: Incremented for every new analysis and every cancel;
            completions tagged with an older value are discarded.
    """

    config: Config
    store: ConfigStore
    dispatcher: AnalysisDispatcher = field(default_factory=AnalysisDispatcher)
    rng: random.Random = field(default_factory=random.Random)
    screen: Screen = Screen.MAIN
    mode: AppState = AppState.IDLE
    prompt: TextBuffer = field(default_factory=TextBuffer)
    palette: CommandPalette = field(default_factory=CommandPalette)
    result: AnalysisResult | None = None
    error: str | None = None
    should_quit: bool = False
    settings: SettingsState = field(default_factory=SettingsState)
    animation: Animation = field(default_factory=Animation)
    analyzing_word: str = ""
    generation: int = 0

    def __post_init__(self) -> None:
        self.settings.working = self.config.copy()

    @classmethod
    def create(cls, store: ConfigStore, **kwargs) -> Controller:
        """Load the configuration through ``store`` and build a controller.

        Raises:
            ConfigError: If the file exists but is malformed.
        """
        return cls(config=store.load(), store=store, **kwargs)

    @property
    def menu_visible(self) -> bool:
        return self.screen is Screen.MAIN and self.mode is AppState.COMMAND_MENU

    # -- Key routing ----------------------------------------------------------

    def handle_key(self, key: KeyPress) -> None:
        """Route a key press. Ctrl+C quits from anywhere."""
        if key.key == keys.CTRL_C:
            self.should_quit = True
            return
        if self.screen is Screen.SETTINGS:
            self.handle_settings_key(key)
        elif self.mode is AppState.ANALYZING:
            if key.key == keys.ESCAPE:
                self.cancel_analysis()
        else:
            self.handle_prompt_key(key)

    def handle_prompt_key(self, key: KeyPress) -> None:
        """Prompt editor for every Main-screen mode except Analyzing."""
        name = key.key
        if name == keys.ESCAPE:
            if self.mode is AppState.COMMAND_MENU:
                self.close_menu()
            elif self.mode is AppState.SHOWING_RESULTS:
                self.mode = AppState.IDLE
        elif name == keys.ENTER:
            self.submit()
        elif name == keys.TAB:
            if self.mode is AppState.COMMAND_MENU:
                cmd = self.palette.current()
                if cmd is not None:
                    self.prompt.set(cmd.name)
                self.close_menu()
        elif name == keys.UP:
            if self.mode is AppState.COMMAND_MENU:
                self.palette.move_up()
        elif name == keys.DOWN:
            if self.mode is AppState.COMMAND_MENU:
                self.palette.move_down()
        elif name == keys.BACKSPACE:
            if self.prompt.backspace():
                self.after_edit(deletion=True)
        elif name == keys.DELETE:
            if self.prompt.delete():
                self.after_edit(deletion=True)
        elif name == keys.CTRL_U:
            if self.prompt.kill_to_line_start():
                self.after_edit(deletion=True)
        elif name == keys.LEFT:
            self.prompt.move_left()
        elif name == keys.RIGHT:
            self.prompt.move_right()
        elif name == keys.HOME:
            self.prompt.home()
        elif name == keys.END:
            self.prompt.end()
        elif name in keys.NEWLINE_KEYS:
            self.prompt.insert("\n")
            self.after_edit()
        elif key.is_printable:
            self.prompt.insert(key.character)
            self.after_edit()

    def after_edit(self, *, deletion: bool = False) -> None:
        """Clear the error and re-evaluate command menu visibility after a text change.

        A deletion outside the command menu also drops ShowingResults back to Idle.
        """
        self.error = None
        if self.prompt.starts_with("/") and self.palette.update_filter(self.prompt.text):
            self.mode = AppState.COMMAND_MENU
        elif deletion or self.mode is AppState.COMMAND_MENU or self.prompt.starts_with("/"):
            self.close_menu()

    def paste(self, text: str) -> None:
        """Insert pasted text at the cursor of whichever buffer is being edited.

        Ignored while Analyzing and while the settings list is being navigated.
        """
        if not text:
            return
        if self.screen is Screen.SETTINGS:
            self.settings.paste(text)
        elif self.mode is not AppState.ANALYZING:
            self.prompt.insert(text.replace("\r\n", "\n").replace("\r", "\n"))
            self.after_edit()

    def close_menu(self) -> None:
        self.mode = AppState.IDLE
        self.palette.reset()

    def submit(self) -> None:
        """Enter on the Main screen: run a command or start an analysis."""
        if self.mode is AppState.COMMAND_MENU:
            cmd = self.palette.current()
            if cmd is not None:
                self.run_command(cmd)
            self.close_menu()
            return

        if self.prompt.starts_with("/"):
            cmd = find_command(self.prompt.text)
            if cmd is not None:
                self.run_command(cmd)
                self.close_menu()
            return

        if self.prompt.text and self.mode is not AppState.ANALYZING:
            self.start_analysis()

    # -- Commands -------------------------------------------------------------

    def run_command(self, cmd: Command) -> None:
        """Execute ``cmd`` and clear the prompt it was typed into."""
        logger.debug("Running command %s", cmd.name)
        self.prompt.clear()
        match cmd.effect:
            case CommandEffect.OPEN_SETTINGS:
                self.open_settings()
            case CommandEffect.CLEAR:
                self.clear()
            case CommandEffect.EXIT:
                self.should_quit = True
            case CommandEffect.CYCLE_PROVIDER:
                self.cycle_provider()
            case CommandEffect.RESET_DEFAULTS:
                self.reset_defaults()

    def open_settings(self) -> None:
        self.settings.open(self.config)
        self.screen = Screen.SETTINGS

    def clear(self) -> None:
        self.prompt.clear()
        self.palette.reset()
        self.result = None
        self.error = None
        self.mode = AppState.IDLE

    def cycle_provider(self) -> None:
        """Advance the active backend and persist. A failed save keeps the new selection."""
        self.config.provider.active = self.config.provider.active.next()
        try:
            self.store.save(self.config)
        except ConfigError as exc:
            self.error = f"Failed to save config: {exc}"

    def reset_defaults(self) -> None:
        try:
            self.config = self.store.reset()
        except ConfigError as exc:
            self.error = f"Failed to reset config: {exc}"
        else:
            self.error = None

    # -- Analysis -------------------------------------------------------------

    def start_analysis(self) -> None:
        self.mode = AppState.ANALYZING
        self.result = None
        self.error = None
        self.analyzing_word = self.rng.choice(ANALYZING_WORDS) if ANALYZING_WORDS else DEFAULT_ANALYZING_WORD
        self.animation.reset()
        self.generation += 1
        self.dispatcher.start(self.config, self.prompt.text, self.generation)

    def cancel_analysis(self) -> None:
        """Esc while analyzing: back to Idle. The request keeps running but its outcome is ignored."""
        self.mode = AppState.IDLE
        self.generation += 1
        logger.debug("Analysis cancelled; now at generation %d", self.generation)

    def drain_completion(self) -> bool:
        """Merge at most one pending completion. Returns True if state changed."""
        message = self.dispatcher.poll()
        if message is None:
            return False
        return self.apply_completion(message)

    def apply_completion(self, message: AnalysisComplete) -> bool:
        if message.generation != self.generation or self.mode is not AppState.ANALYZING:
            logger.debug("Discarding stale analysis (gen %d != %d)", message.generation, self.generation)
            return False
        if message.ok:
            self.result = message.result
            self.error = None
            self.mode = AppState.SHOWING_RESULTS
        else:
            self.result = None
            self.error = message.error
            self.mode = AppState.IDLE
        return True

    # -- Settings -------------------------------------------------------------

    def handle_settings_key(self, key: KeyPress) -> None:
        request = self.settings.handle_key(key)
        if request is SettingsRequest.CLOSE:
            self.screen = Screen.MAIN
        elif request is SettingsRequest.SAVE:
            self.save_settings()

    def save_settings(self) -> None:
        """Commit the working copy. On failure the live configuration is untouched."""
        candidate = self.settings.working.copy()
        try:
            self.store.save(candidate)
        except ConfigError as exc:
            self.settings.show_message(f"Error: {exc}", error=True)
            return
        self.config = candidate
        self.settings.show_message("Settings saved!", error=False)
        self.screen = Screen.MAIN
