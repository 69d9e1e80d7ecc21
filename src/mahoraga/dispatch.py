"""Background analysis dispatch.

Each analysis runs on its own daemon thread with an owned snapshot of the
configuration and prompt. The outcome comes back through a single-slot
completion queue that the main loop drains without blocking, once per tick.

Completions carry the generation number they were started with so the
controller can discard results the user has already walked away from.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass

import requests

from mahoraga.config import Config, ConfigError
from mahoraga.models import AnalysisResult
from mahoraga.providers import ProviderError, create_provider

logger = logging.getLogger(__name__)


@dataclass
class AnalysisComplete:
    """Outcome of one background analysis: exactly one of result/error is set."""

    generation: int
    result: AnalysisResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_analysis(config: Config, prompt: str) -> AnalysisResult:
    """Build the configured backend client and analyze ``prompt`` (blocking)."""
    provider = create_provider(config)
    return provider.analyze(prompt)


class AnalysisDispatcher:
    """Launches analyses off the UI thread and hands back their outcomes.

    The dispatcher does not guard against overlap; callers only start an
    analysis when none is being shown as in flight.
    """

    def __init__(self, analyze: Callable[[Config, str], AnalysisResult] = run_analysis) -> None:
        self.analyze = analyze
        self.completions: queue.Queue[AnalysisComplete] = queue.Queue(maxsize=1)
        self.threads: list[threading.Thread] = []

    def start(self, config: Config, prompt: str, generation: int) -> threading.Thread:
        """Run an analysis on a snapshot of ``config`` and ``prompt`` in a new thread."""
        snapshot = config.copy()
        thread = threading.Thread(
            target=self.worker,
            args=(snapshot, prompt, generation),
            name=f"analysis-{generation}",
            daemon=True,
        )
        self.threads = [t for t in self.threads if t.is_alive()]
        self.threads.append(thread)
        logger.debug("Starting analysis generation %d (%s)", generation, snapshot.provider.active.value)
        thread.start()
        return thread

    def worker(self, config: Config, prompt: str, generation: int) -> None:
        try:
            result = self.analyze(config, prompt)
            message = AnalysisComplete(generation=generation, result=result)
        except (ProviderError, ConfigError, requests.RequestException, OSError, ValueError) as exc:
            logger.debug("Analysis generation %d failed: %s", generation, exc)
            message = AnalysisComplete(generation=generation, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected failure in analysis generation %d", generation)
            message = AnalysisComplete(generation=generation, error=f"Unexpected error: {exc}")
        # Blocks while a previous outcome is still waiting to be drained
        self.completions.put(message)

    def poll(self) -> AnalysisComplete | None:
        """Non-blocking receive of the next completion, if any."""
        try:
            return self.completions.get_nowait()
        except queue.Empty:
            return None

    def join(self, timeout: float | None = None) -> None:
        """Wait for in-flight analyses (used by tests and shutdown)."""
        for thread in self.threads:
            thread.join(timeout)
