"""OpenAI backend."""

from __future__ import annotations

from dataclasses import dataclass, field

from mahoraga.config import OpenAIConfig
from mahoraga.models import AnalysisResult, ProviderType

from .base import (
    MAX_TOKENS,
    SYSTEM_PROMPT,
    TEMPERATURE,
    ProviderError,
    chat_completion_content,
    parse_analysis_response,
    post_json,
    user_message,
)

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"


@dataclass
class OpenAIProvider:
    config: OpenAIConfig
    provider_type: ProviderType = field(default=ProviderType.OPENAI, init=False)

    def analyze(self, prompt: str) -> AnalysisResult:
        if not self.config.api_key:
            raise ProviderError("OpenAI API key is not configured")

        body = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_message(prompt)},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }
        headers = {"Authorization": f"Bearer {self.config.api_key}"}
        data = post_json("OpenAI", OPENAI_API_URL, headers, body)
        return parse_analysis_response(chat_completion_content("OpenAI", data))
