"""Shared data types for Mahoraga.

Screens, application modes, backend identifiers and the analysis result
returned by every backend.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Screen(Enum):
    """Top-level screen. Settings renders on top of a frozen Main view."""

    MAIN = "main"
    SETTINGS = "settings"


class AppState(Enum):
    """Mutually exclusive mode of the Main screen."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    SHOWING_RESULTS = "showing_results"
    COMMAND_MENU = "command_menu"


class ProviderType(Enum):
    """The active analysis backend."""

    AZURE = "azure"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"

    @property
    def display_name(self) -> str:
        return PROVIDER_DISPLAY_NAMES[self]

    def next(self) -> ProviderType:
        """Return the next backend in the fixed cycle Azure -> OpenAI -> Anthropic -> Azure."""
        order = list(ProviderType)
        return order[(order.index(self) + 1) % len(order)]

    def previous(self) -> ProviderType:
        order = list(ProviderType)
        return order[(order.index(self) - 1) % len(order)]


PROVIDER_DISPLAY_NAMES: dict[ProviderType, str] = {
    ProviderType.AZURE: "Azure OpenAI",
    ProviderType.OPENAI: "OpenAI",
    ProviderType.ANTHROPIC: "Anthropic",
}


@dataclass
class AnalysisResult:
    """Structured quality assessment of a prompt."""

    score: int
    improvements: list[str] = field(default_factory=list)
    unclear_parts: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> AnalysisResult:
        """Validate a decoded JSON payload and build an AnalysisResult.

        The score is clamped to 0..100. Missing lists default to empty.

        Raises:
            ValueError: If the payload is not an object, the score is not an
                integer, or a list contains non-string items.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Analysis must be a JSON object, got {type(data).__name__}")

        score = data.get("score")
        if isinstance(score, float) and score.is_integer():
            score = int(score)
        if isinstance(score, bool) or not isinstance(score, int):
            raise ValueError(f"score must be an integer, got {type(score).__name__}")

        lists: dict[str, list[str]] = {}
        for key in ("improvements", "unclear_parts"):
            items = data.get(key, [])
            if items is None:
                items = []
            if not isinstance(items, list):
                raise ValueError(f"{key} must be a list, got {type(items).__name__}")
            for i, item in enumerate(items):
                if not isinstance(item, str):
                    raise ValueError(f"{key}[{i}] must be a string, got {type(item).__name__}")
            lists[key] = list(items)

        return cls(
            score=max(0, min(100, score)),
            improvements=lists["improvements"],
            unclear_parts=lists["unclear_parts"],
        )


# Score bands, highest first: (lower bound, label, color).
SCORE_BANDS: list[tuple[int, str, str]] = [
    (90, "Excellent", "#22c55e"),
    (70, "Good", "#22c55e"),
    (50, "Fair", "#eab308"),
    (30, "Poor", "#f97316"),
    (0, "Very Poor", "#ef4444"),
]


def score_label(score: int) -> str:
    """Return the quality label for a 0..100 score."""
    for lower, label, _color in SCORE_BANDS:
        if score >= lower:
            return label
    return SCORE_BANDS[-1][1]


def score_color(score: int) -> str:
    """Return the display color for a 0..100 score."""
    for lower, _label, color in SCORE_BANDS:
        if score >= lower:
            return color
    return SCORE_BANDS[-1][2]
