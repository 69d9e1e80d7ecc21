"""Anthropic Messages API backend."""

from __future__ import annotations

from dataclasses import dataclass, field

from mahoraga.config import AnthropicConfig
from mahoraga.models import AnalysisResult, ProviderType

from .base import MAX_TOKENS, SYSTEM_PROMPT, ProviderError, parse_analysis_response, post_json, user_message

ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_API_VERSION = "2023-06-01"


@dataclass
class AnthropicProvider:
    config: AnthropicConfig
    provider_type: ProviderType = field(default=ProviderType.ANTHROPIC, init=False)

    def analyze(self, prompt: str) -> AnalysisResult:
        if not self.config.api_key:
            raise ProviderError("Anthropic API key is not configured")

        body = {
            "model": self.config.model,
            "max_tokens": MAX_TOKENS,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": user_message(prompt)}],
        }
        headers = {"x-api-key": self.config.api_key, "anthropic-version": ANTHROPIC_API_VERSION}
        data = post_json("Anthropic", ANTHROPIC_API_URL, headers, body)

        # Messages API returns a list of content blocks, not OpenAI-style choices
        try:
            content = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str):
            raise ProviderError("No content in Anthropic response")
        return parse_analysis_response(content)
