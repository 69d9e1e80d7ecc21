"""Tests for the main loop scheduler."""

import threading
from dataclasses import dataclass, field
from pathlib import Path

from mahoraga import keys
from mahoraga.config import Config, ConfigStore
from mahoraga.controller import Controller
from mahoraga.dispatch import AnalysisDispatcher
from mahoraga.keys import KeyPress, keys_for_text
from mahoraga.loop import POLL_INTERVAL, TICKS_PER_FRAME, Scheduler
from mahoraga.models import AnalysisResult, AppState


@dataclass
class ScriptedKeys:
    """KeySource that replays a fixed list of key presses, then reports no input."""

    script: list[KeyPress]
    timeouts: list[float] = field(default_factory=list)

    def poll(self, timeout: float) -> KeyPress | None:
        self.timeouts.append(timeout)
        if self.script:
            return self.script.pop(0)
        return None


def blocked_scheduler(tmp_path: Path) -> tuple[Scheduler, threading.Event]:
    """A scheduler whose controller is stuck in Analyzing until the event is set."""
    release = threading.Event()
    dispatcher = AnalysisDispatcher(analyze=lambda c, p: release.wait(5) and AnalysisResult(score=50))
    controller = Controller(config=Config(), store=ConfigStore(tmp_path / "c.json"), dispatcher=dispatcher)
    controller.prompt.set("prompt")
    controller.start_analysis()
    return Scheduler(controller), release


class TestScheduler:
    def test_defaults(self, tmp_path: Path) -> None:
        scheduler = Scheduler(Controller(config=Config(), store=ConfigStore(tmp_path / "c.json")))
        assert scheduler.poll_interval == POLL_INTERVAL == 0.05
        assert scheduler.ticks_per_frame == TICKS_PER_FRAME == 5

    def test_animation_advances_every_five_ticks(self, tmp_path: Path) -> None:
        scheduler, release = blocked_scheduler(tmp_path)
        animation = scheduler.controller.animation
        for _ in range(4):
            scheduler.tick()
        assert animation.frame == 0
        scheduler.tick()
        assert animation.frame == 1
        for _ in range(10):
            scheduler.tick()
        assert animation.frame == 0  # wraps after three frames
        release.set()

    def test_animation_frozen_when_idle(self, tmp_path: Path) -> None:
        scheduler = Scheduler(Controller(config=Config(), store=ConfigStore(tmp_path / "c.json")))
        for _ in range(20):
            scheduler.tick()
        assert scheduler.controller.animation.frame == 0

    def test_tick_merges_completion(self, tmp_path: Path) -> None:
        scheduler, release = blocked_scheduler(tmp_path)
        release.set()
        scheduler.controller.dispatcher.join(timeout=5)
        assert scheduler.tick() is True
        assert scheduler.controller.mode is AppState.SHOWING_RESULTS
        assert scheduler.tick() is False

    def test_run_renders_before_each_key(self, tmp_path: Path) -> None:
        controller = Controller(config=Config(), store=ConfigStore(tmp_path / "c.json"))
        scheduler = Scheduler(controller, poll_interval=0.01)
        source = ScriptedKeys([*keys_for_text("hi"), KeyPress(keys.CTRL_C)])
        frames: list[str] = []

        scheduler.run(source, lambda c: frames.append(c.prompt.text))

        assert frames == ["", "h", "hi"]
        assert source.timeouts == [0.01, 0.01, 0.01]
        assert scheduler.should_quit

    def test_run_once_without_input(self, tmp_path: Path) -> None:
        controller = Controller(config=Config(), store=ConfigStore(tmp_path / "c.json"))
        scheduler = Scheduler(controller)
        assert scheduler.run_once(ScriptedKeys([]), lambda c: None) is True
        assert scheduler.run_once(ScriptedKeys([KeyPress(keys.CTRL_C)]), lambda c: None) is False
