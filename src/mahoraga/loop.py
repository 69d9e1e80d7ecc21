"""Main loop / scheduler.

One iteration, in fixed order:

1. render the current state (pure, no mutation)
2. drain at most one analysis completion
3. advance the analyzing animation
4. wait up to ``poll_interval`` for a key and handle it
5. stop once the quit flag is set

The Textual front end drives the same steps from its own event loop:
``tick()`` on a timer for steps 2-3 and ``handle_key()`` for step 4.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from mahoraga.controller import Controller
from mahoraga.keys import KeyPress
from mahoraga.models import AppState

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05  # seconds
TICKS_PER_FRAME = 5  # ~250ms per animation frame at the default poll interval


class KeySource(Protocol):
    def poll(self, timeout: float) -> KeyPress | None:
        """Return the next key press, or None if none arrived within ``timeout`` seconds."""
        ...


Renderer = Callable[[Controller], object]


@dataclass
class Scheduler:
    controller: Controller
    poll_interval: float = POLL_INTERVAL
    ticks_per_frame: int = TICKS_PER_FRAME

    @property
    def should_quit(self) -> bool:
        return self.controller.should_quit

    def tick(self) -> bool:
        """Drain one completion, then advance the animation. Returns True if a completion was merged."""
        changed = self.controller.drain_completion()
        if self.controller.mode is AppState.ANALYZING:
            self.controller.animation.advance(self.ticks_per_frame)
        return changed

    def handle_key(self, key: KeyPress) -> None:
        self.controller.handle_key(key)

    def run_once(self, source: KeySource, render: Renderer) -> bool:
        """Run one loop iteration. Returns False once the app should exit."""
        render(self.controller)
        self.tick()
        key = source.poll(self.poll_interval)
        if key is not None:
            self.handle_key(key)
        return not self.should_quit

    def run(self, source: KeySource, render: Renderer) -> None:
        logger.debug("Main loop started (poll interval %.3fs)", self.poll_interval)
        while self.run_once(source, render):
            pass
        logger.debug("Main loop finished")
