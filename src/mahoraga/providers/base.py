"""Shared pieces for analysis backends."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import requests

from mahoraga.models import AnalysisResult, ProviderType

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a prompt quality analyzer. Analyze the given prompt and provide:
1. A quality score from 0-100
2. A list of specific improvements
3. A list of unclear or ambiguous parts

Respond in JSON format only:
{
  "score": <number 0-100>,
  "improvements": ["improvement 1", "improvement 2", ...],
  "unclear_parts": ["unclear part 1", "unclear part 2", ...]
}

Scoring guidelines:
- 90-100: Excellent - clear, specific, well-structured
- 70-89: Good - mostly clear with minor improvements needed
- 50-69: Fair - needs clarification or more specificity
- 30-49: Poor - significant ambiguity or missing context
- 0-29: Very poor - vague or incomprehensible

Be constructive and specific in your feedback."""

MAX_TOKENS = 1000
TEMPERATURE = 0.3


class ProviderError(Exception):
    """Raised when a backend cannot produce an analysis."""


class Provider(Protocol):
    """Capability shared by every backend client."""

    provider_type: ProviderType

    def analyze(self, prompt: str) -> AnalysisResult: ...


def user_message(prompt: str) -> str:
    return f"Analyze this prompt:\n\n{prompt}"


def post_json(name: str, url: str, headers: dict[str, str], body: dict[str, Any]) -> dict[str, Any]:
    """POST a JSON body and return the decoded JSON response.

    No timeout is applied; a hung backend keeps the caller waiting.

    Raises:
        ProviderError: On transport failure, non-2xx status or a non-JSON body.
    """
    logger.debug("POST %s (%s)", url, name)
    try:
        response = requests.post(url, headers={**headers, "Content-Type": "application/json"}, json=body)
    except requests.RequestException as exc:
        raise ProviderError(f"Failed to send request to {name}: {exc}") from exc

    if not response.ok:
        raise ProviderError(f"{name} API error ({response.status_code}): {response.text}")

    try:
        data = response.json()
    except ValueError as exc:
        raise ProviderError(f"Failed to parse {name} response: {exc}") from exc
    if not isinstance(data, dict):
        raise ProviderError(f"Failed to parse {name} response: expected a JSON object")
    return data


def parse_analysis_response(text: str) -> AnalysisResult:
    """Parse the model's reply into an AnalysisResult.

    Models sometimes wrap the JSON in prose or code fences, so only the span
    from the first ``{`` to the last ``}`` is decoded.
    """
    start = text.find("{")
    end = text.rfind("}")
    candidate = text[start : end + 1] if start != -1 and end > start else text

    try:
        return AnalysisResult.from_dict(json.loads(candidate))
    except ValueError as exc:
        # json.JSONDecodeError is a ValueError too
        raise ProviderError(f"Failed to parse LLM response as JSON: {exc}") from exc


def chat_completion_content(name: str, data: dict[str, Any]) -> str:
    """Extract ``choices[0].message.content`` from an OpenAI-style response."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None
    if not isinstance(content, str):
        raise ProviderError(f"No content in {name} response")
    return content
