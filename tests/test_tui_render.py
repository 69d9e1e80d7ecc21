"""Tests for the pure rendering helpers."""

from pathlib import Path

from rich.console import Group

from mahoraga.config import Config, ConfigStore
from mahoraga.controller import Controller
from mahoraga.editor import TextBuffer
from mahoraga.keys import keys_for_text
from mahoraga.models import AnalysisResult, AppState
from mahoraga.settings import SettingsState
from mahoraga.tui import render


def controller(tmp_path: Path) -> Controller:
    return Controller(config=Config(), store=ConfigStore(tmp_path / "c.json"))


class TestHeader:
    def test_logo_on_tall_terminal(self) -> None:
        assert "██" in render.render_header(30).plain

    def test_compact_on_short_terminal(self) -> None:
        assert render.render_header(24).plain == "MAHORAGA v0.1.0"


class TestPrompt:
    def test_placeholder_when_empty(self, tmp_path: Path) -> None:
        assert render.PLACEHOLDER in render.render_prompt(controller(tmp_path)).plain

    def test_cursor_highlight(self) -> None:
        text = render.render_buffer(TextBuffer("abc", 1), show_cursor=True)
        assert text.plain == "abc"
        spans = [(s.start, s.end) for s in text.spans if s.style == render.CURSOR_STYLE]
        assert spans == [(1, 2)]

    def test_cursor_at_end_adds_block(self) -> None:
        buf = TextBuffer()
        buf.set("ab")
        assert render.render_buffer(buf, show_cursor=True).plain == "ab "

    def test_title_only_while_analyzing(self, tmp_path: Path) -> None:
        ctl = controller(tmp_path)
        assert render.prompt_title(ctl) == ""
        ctl.mode = AppState.ANALYZING
        ctl.analyzing_word = "Dissecting"
        ctl.animation.frame = 2
        assert render.prompt_title(ctl) == " Dissecting... "


class TestScore:
    def test_score_line_and_bar(self) -> None:
        lines = render.render_score(72, 10).plain.split("\n")
        assert lines[0] == "72/100 - Good"
        assert lines[1] == "███████░░░"

    def test_zero_width(self) -> None:
        assert render.render_score(100, 0).plain == "100/100 - Excellent\n"


class TestFeedback:
    def test_both_sections(self) -> None:
        group = render.render_feedback(AnalysisResult(score=1, improvements=["a"], unclear_parts=["b"]))
        assert isinstance(group, Group)
        plain = [getattr(r, "plain", "") for r in group.renderables]
        assert plain == ["Improvements", "• a", "", "Unclear Parts", "• b"]

    def test_empty(self) -> None:
        assert render.render_feedback(AnalysisResult(score=1)).plain == "No feedback available."


class TestCommandMenu:
    def test_rows_padded(self, tmp_path: Path) -> None:
        ctl = controller(tmp_path)
        for key in keys_for_text("/"):
            ctl.handle_key(key)
        rows = render.render_command_menu(ctl.palette).plain.split("\n")
        assert rows[0] == "/settings    Configure API settings"
        assert len(rows) == 5

    def test_no_matches(self, tmp_path: Path) -> None:
        ctl = controller(tmp_path)
        ctl.palette.update_filter("/zzz")
        assert render.render_command_menu(ctl.palette).plain == "No matching commands"


class TestSettings:
    def test_mask_capped(self) -> None:
        assert render.mask("abc") == "•••"
        assert render.mask("x" * 50) == "•" * 20
        assert render.mask("x" * 50, None) == "•" * 50

    def test_rows(self) -> None:
        cfg = Config()
        cfg.azure.api_key = "secret-key"
        state = SettingsState()
        state.open(cfg)
        plain = render.render_settings(state).plain
        assert "Provider: Azure OpenAI (← →)" in plain
        assert "(empty)" in plain
        assert "••••••••••" in plain
        assert "secret-key" not in plain
        assert "[ Save ]" in plain

    def test_status_message(self) -> None:
        state = SettingsState()
        state.show_message("Settings saved!", error=False)
        assert render.settings_status(state).plain == "Settings saved!"
