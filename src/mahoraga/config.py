"""Configuration system for Mahoraga.

Loads backend credentials and the active backend selection from
``~/.config/mahoraga/config.json``. All fields are optional; defaults are
provided so the app starts without any file on disk.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from mahoraga.models import ProviderType

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the configuration file cannot be read, parsed or written."""


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

DEFAULT_AZURE_API_VERSION = "2024-02-15-preview"
DEFAULT_OPENAI_MODEL = "gpt-4"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"


@dataclass
class AzureConfig:
    """Azure OpenAI deployment settings."""

    url: str = ""
    api_key: str = ""
    deployment: str = ""
    api_version: str = DEFAULT_AZURE_API_VERSION


@dataclass
class OpenAIConfig:
    api_key: str = ""
    model: str = DEFAULT_OPENAI_MODEL


@dataclass
class AnthropicConfig:
    api_key: str = ""
    model: str = DEFAULT_ANTHROPIC_MODEL


@dataclass
class ProviderSelection:
    active: ProviderType = ProviderType.AZURE


@dataclass
class Config:
    """Top-level configuration, loaded from config.json."""

    provider: ProviderSelection = field(default_factory=ProviderSelection)
    azure: AzureConfig = field(default_factory=AzureConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    anthropic: AnthropicConfig = field(default_factory=AnthropicConfig)

    def copy(self) -> Config:
        """Return an independent deep copy (used for settings working copies and snapshots)."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["provider"]["active"] = self.provider.active.value
        return data


def default_config() -> Config:
    """Return the built-in default configuration."""
    return Config()


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def config_dir() -> Path:
    """Directory holding config.json, honoring XDG_CONFIG_HOME."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    root = Path(xdg) if xdg else Path.home() / ".config"
    return root / "mahoraga"


def config_path() -> Path:
    """Resolved config file path. ``MAHORAGA_CONFIG`` overrides the default location."""
    override = os.environ.get("MAHORAGA_CONFIG")
    if override:
        return Path(override).expanduser()
    return config_dir() / "config.json"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

VALID_TOP_KEYS = {"provider", "azure", "openai", "anthropic"}
VALID_PROVIDER_KEYS = {"active"}
VALID_AZURE_KEYS = {"url", "api_key", "deployment", "api_version"}
VALID_OPENAI_KEYS = {"api_key", "model"}
VALID_ANTHROPIC_KEYS = {"api_key", "model"}


def check_unknown_keys(data: dict, valid: set[str], context: str) -> None:
    """Raise ConfigError if data contains keys not in valid set."""
    unknown = set(data) - valid
    if unknown:
        raise ConfigError(f"Unknown keys in {context}: {', '.join(sorted(unknown))}")


def section(data: dict, key: str) -> dict:
    """Return the sub-object at ``key`` (empty if absent), rejecting non-objects."""
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be an object, got {type(value).__name__}")
    return value


def string_fields(data: dict, valid: set[str], context: str, defaults: Any) -> dict[str, str]:
    """Validate that every present key in ``data`` is a string, filling defaults for the rest."""
    check_unknown_keys(data, valid, context)
    values: dict[str, str] = {}
    for key in sorted(valid):
        val = data.get(key, getattr(defaults, key))
        if not isinstance(val, str):
            raise ConfigError(f"{context}.{key} must be a string, got {type(val).__name__}")
        values[key] = val
    return values


def validate_provider(data: dict) -> ProviderSelection:
    """Validate and construct a ProviderSelection from a raw dict."""
    check_unknown_keys(data, VALID_PROVIDER_KEYS, "provider")
    active = data.get("active", ProviderType.AZURE.value)
    if not isinstance(active, str):
        raise ConfigError(f"provider.active must be a string, got {type(active).__name__}")
    try:
        return ProviderSelection(active=ProviderType(active.lower()))
    except ValueError:
        valid = ", ".join(p.value for p in ProviderType)
        raise ConfigError(f"provider.active must be one of: {valid}. Got '{active}'") from None


def validate_config(data: dict) -> Config:
    """Validate a raw dict and construct a Config.

    Missing sections and keys take their defaults.

    Raises:
        ConfigError: On unknown keys, non-object sections, non-string values or
            an unknown provider name.
    """
    check_unknown_keys(data, VALID_TOP_KEYS, "config")
    return Config(
        provider=validate_provider(section(data, "provider")),
        azure=AzureConfig(**string_fields(section(data, "azure"), VALID_AZURE_KEYS, "azure", AzureConfig())),
        openai=OpenAIConfig(**string_fields(section(data, "openai"), VALID_OPENAI_KEYS, "openai", OpenAIConfig())),
        anthropic=AnthropicConfig(
            **string_fields(section(data, "anthropic"), VALID_ANTHROPIC_KEYS, "anthropic", AnthropicConfig())
        ),
    )


# ---------------------------------------------------------------------------
# Loading and saving
# ---------------------------------------------------------------------------


def load_config(path: Path | None = None) -> Config:
    """Load configuration from disk, falling back to defaults.

    Returns default_config() if the file doesn't exist or is empty.

    Raises:
        ConfigError: If the file exists but cannot be read, contains invalid
            JSON or fails validation.
    """
    path = path or config_path()
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return default_config()

    try:
        text = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    if not text or text == "{}":
        return default_config()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a JSON object, got {type(data).__name__}")

    return validate_config(data)


def write_json(path: Path, data: dict[str, Any]) -> None:
    """Atomically write *data* as JSON to *path*.

    Writes to a temporary file in the same directory, then renames into place
    so readers never see a partial write.
    """
    serialized = json.dumps(data, indent=2, sort_keys=True)
    tmp = path.with_suffix(f".{os.getpid()}.tmp")
    try:
        tmp.write_text(f"{serialized}\n", encoding="utf-8")
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()


def save_config(config: Config, path: Path | None = None) -> None:
    """Persist the whole configuration, replacing the file atomically.

    Raises:
        ConfigError: If the directory or file cannot be written.
    """
    path = path or config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        write_json(path, config.to_dict())
    except OSError as exc:
        raise ConfigError(f"Failed to write config file {path}: {exc}") from exc
    logger.debug("Saved config to %s (active provider: %s)", path, config.provider.active.value)


def reset_config(path: Path | None = None) -> Config:
    """Write the default configuration and return it."""
    config = default_config()
    save_config(config, path)
    return config


@dataclass
class ConfigStore:
    """Load/save/reset bound to one config file path."""

    path: Path = field(default_factory=config_path)

    def load(self) -> Config:
        return load_config(self.path)

    def save(self, config: Config) -> None:
        save_config(config, self.path)

    def reset(self) -> Config:
        return reset_config(self.path)
