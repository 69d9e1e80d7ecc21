"""Azure OpenAI backend."""

from __future__ import annotations

from dataclasses import dataclass, field

from mahoraga.config import AzureConfig
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


@dataclass
class AzureProvider:
    """Analyzes prompts through an Azure OpenAI chat deployment."""

    config: AzureConfig
    provider_type: ProviderType = field(default=ProviderType.AZURE, init=False)

    def build_url(self) -> str:
        base_url = self.config.url.rstrip("/")
        return (
            f"{base_url}/openai/deployments/{self.config.deployment}"
            f"/chat/completions?api-version={self.config.api_version}"
        )

    def analyze(self, prompt: str) -> AnalysisResult:
        if not self.config.url:
            raise ProviderError("Azure URL is not configured")
        if not self.config.api_key:
            raise ProviderError("Azure API key is not configured")
        if not self.config.deployment:
            raise ProviderError("Azure deployment is not configured")

        body = {
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_message(prompt)},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }
        data = post_json("Azure OpenAI", self.build_url(), {"api-key": self.config.api_key}, body)
        return parse_analysis_response(chat_completion_content("Azure OpenAI", data))
