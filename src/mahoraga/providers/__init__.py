"""Analysis backends: one client per supported provider."""

from __future__ import annotations

from mahoraga.config import Config
from mahoraga.models import ProviderType

from .anthropic import AnthropicProvider
from .azure import AzureProvider
from .base import SYSTEM_PROMPT, Provider, ProviderError, parse_analysis_response
from .openai import OpenAIProvider

AnyProvider = AzureProvider | OpenAIProvider | AnthropicProvider


def create_provider(config: Config) -> AnyProvider:
    """Build the client for the configured active backend from its config section."""
    match config.provider.active:
        case ProviderType.AZURE:
            return AzureProvider(config.azure)
        case ProviderType.OPENAI:
            return OpenAIProvider(config.openai)
        case ProviderType.ANTHROPIC:
            return AnthropicProvider(config.anthropic)
    raise ValueError(f"Unknown provider: {config.provider.active!r}")


__all__ = [
    "SYSTEM_PROMPT",
    "AnthropicProvider",
    "AnyProvider",
    "AzureProvider",
    "OpenAIProvider",
    "Provider",
    "ProviderError",
    "create_provider",
    "parse_analysis_response",
]
