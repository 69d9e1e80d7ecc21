"""Pure rendering helpers: controller state in, Rich renderables out.

Nothing here mutates state. Widgets call these on every refresh.
"""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.text import Text

from mahoraga import __version__
from mahoraga.commands import CommandPalette
from mahoraga.controller import Controller
from mahoraga.editor import TextBuffer
from mahoraga.models import AnalysisResult, AppState, ProviderType, score_color, score_label
from mahoraga.settings import SettingsState

PRIMARY = "#d4af37"
SECONDARY = "#b0b0b0"
MUTED = "#666666"
SUCCESS = "#22c55e"
ERROR = "#ef4444"
WARNING = "#eab308"
BACKGROUND = "#111111"

CURSOR_STYLE = f"bold {BACKGROUND} on {PRIMARY}"
SELECTED_STYLE = f"bold {BACKGROUND} on {PRIMARY}"

LOGO = """\
 ██   ██  ██████  ██  ██  ██████  ████    ██████  ██████  ██████
 ███ ███  ██  ██  ██  ██  ██  ██  ██ ██   ██  ██  ██      ██  ██
 ██ █ ██  ██████  ██████  ██  ██  ████    ██████  ██ ███  ██████
 ██   ██  ██  ██  ██  ██  ██████  ██ ██   ██  ██  ██████  ██  ██"""

LOGO_MIN_HEIGHT = 25
PLACEHOLDER = "With this treasure, I summon Eight-Handled Sword Divergent Sila Divine General Mahoraga"
IDLE_PLACEHOLDER = "Enter your prompt (Enter to analyze)"
MAX_MASK = 20
MENU_NAME_WIDTH = 12


def render_header(height: int) -> Text:
    """Large logo on tall terminals, a compact title line otherwise."""
    if height >= LOGO_MIN_HEIGHT:
        text = Text(LOGO, style=PRIMARY)
        text.append(f"\n v{__version__}", style=SECONDARY)
        return text
    return Text(f"MAHORAGA v{__version__}", style=PRIMARY)


def render_provider_line(provider: ProviderType) -> Text:
    text = Text("Provider: ", style=MUTED)
    text.append(provider.display_name, style=PRIMARY)
    return text


def render_buffer(buffer: TextBuffer, *, show_cursor: bool, style: str = SECONDARY) -> Text:
    """Render buffer text, highlighting the character under the cursor."""
    text = Text(style=style)
    if not show_cursor:
        text.append(buffer.text)
        return text
    before = buffer.text[: buffer.cursor]
    at = buffer.text[buffer.cursor : buffer.cursor + 1]
    after = buffer.text[buffer.cursor + 1 :]
    text.append(before)
    if not at or at == "\n":
        # Cursor past the end of a line: draw a block, keep the newline
        text.append(" ", style=CURSOR_STYLE)
        text.append(at)
    else:
        text.append(at, style=CURSOR_STYLE)
    text.append(after)
    return text


def render_prompt(controller: Controller) -> Text:
    focused = controller.mode is not AppState.COMMAND_MENU
    analyzing = controller.mode is AppState.ANALYZING
    if not controller.prompt.text:
        if focused and not analyzing:
            text = Text(" ", style=CURSOR_STYLE)
            text.append(PLACEHOLDER, style=MUTED)
            return text
        return Text(IDLE_PLACEHOLDER, style=MUTED)
    return render_buffer(controller.prompt, show_cursor=focused and not analyzing)


def prompt_title(controller: Controller) -> str:
    """Border title for the prompt box: the animated status while analyzing."""
    if controller.mode is not AppState.ANALYZING:
        return ""
    dots = "." * (controller.animation.frame + 1)
    return f" {controller.analyzing_word}{dots} "


def render_score(score: int, width: int) -> Text:
    """Score line plus a proportional bar ``width`` cells wide."""
    color = score_color(score)
    text = Text(str(score), style=color)
    text.append("/100 - ", style=MUTED)
    text.append(score_label(score), style=color)
    width = max(width, 0)
    filled = score * width // 100
    text.append("\n")
    text.append("█" * filled, style=color)
    text.append("░" * (width - filled), style=MUTED)
    return text


def render_bullets(items: list[str], bullet_style: str) -> Text:
    text = Text()
    for i, item in enumerate(items):
        if i:
            text.append("\n")
        text.append("• ", style=bullet_style)
        text.append(item, style=SECONDARY)
    return text


def render_feedback(result: AnalysisResult) -> RenderableType:
    parts: list[RenderableType] = []
    if result.improvements:
        parts.append(Text("Improvements", style=f"bold {SUCCESS}"))
        parts.append(render_bullets(result.improvements, SUCCESS))
    if result.unclear_parts:
        if parts:
            parts.append(Text())
        parts.append(Text("Unclear Parts", style=f"bold {WARNING}"))
        parts.append(render_bullets(result.unclear_parts, WARNING))
    if not parts:
        return Text("No feedback available.", style=MUTED)
    return Group(*parts)


def render_error(error: str) -> Text:
    return Text(f"Error: {error}", style=ERROR)


def render_command_menu(palette: CommandPalette) -> Text:
    matches = palette.matches
    if not matches:
        return Text("No matching commands", style=MUTED)
    text = Text()
    for idx, cmd in enumerate(matches):
        if idx:
            text.append("\n")
        if idx == palette.selected:
            text.append(f"{cmd.name:<{MENU_NAME_WIDTH}}", style=SELECTED_STYLE)
            text.append(f" {cmd.description}", style=f"{BACKGROUND} on {PRIMARY}")
        else:
            text.append(f"{cmd.name:<{MENU_NAME_WIDTH}}", style=PRIMARY)
            text.append(f" {cmd.description}", style=MUTED)
    return text


def mask(value: str, limit: int | None = MAX_MASK) -> str:
    """Replace a secret with bullets (capped at ``limit`` characters)."""
    length = len(value) if limit is None else min(len(value), limit)
    return "•" * length


def render_settings(settings: SettingsState) -> Text:
    """The field list of the settings overlay."""
    text = Text()
    for idx, fld in enumerate(settings.fields):
        selected = idx == settings.selected
        label_style = PRIMARY if selected else SECONDARY
        if idx:
            text.append("\n")

        if fld.is_button:
            style = SELECTED_STYLE if selected else SECONDARY
            text.append(f"[ {fld.label} ]", style=style)
            continue

        if fld.is_provider_selector:
            text.append(f"{fld.label}: ", style=label_style)
            text.append(settings.working.provider.active.display_name, style=PRIMARY)
            if selected:
                text.append(" (← →)", style=MUTED)
            text.append("\n")
            continue

        text.append(f"{fld.label}:\n", style=label_style)
        text.append("  ")
        if settings.editing and selected:
            if fld.is_password:
                text.append(mask(settings.edit.text, None), style=f"underline {PRIMARY}")
            else:
                text.append_text(render_buffer(settings.edit, show_cursor=True, style=f"underline {PRIMARY}"))
            continue

        value = fld.get(settings.working)
        if not value:
            text.append("(empty)", style=MUTED)
        else:
            text.append(mask(value) if fld.is_password else value, style=SECONDARY)
        if selected:
            text.append(" (Enter to edit)", style=MUTED)
    return text


def settings_status(settings: SettingsState) -> Text:
    if settings.message:
        return Text(settings.message, style=ERROR if settings.is_error else SUCCESS)
    if settings.editing:
        return Text("Enter to save | Esc to cancel", style=MUTED)
    return Text("↑↓ Navigate | Enter to edit | Tab to next | Esc to close", style=MUTED)


def main_status(controller: Controller) -> Text:
    """Key hints for the Main screen's current mode."""
    hints = {
        AppState.IDLE: "Enter: analyze · /: commands · Ctrl+U: clear line · Ctrl+C: quit",
        AppState.ANALYZING: "Esc: cancel · Ctrl+C: quit",
        AppState.SHOWING_RESULTS: "Enter: re-analyze · Esc: dismiss · /clear: reset · Ctrl+C: quit",
        AppState.COMMAND_MENU: "↑↓: select · Enter: run · Tab: complete · Esc: close",
    }
    return Text(hints[controller.mode], style=MUTED)
