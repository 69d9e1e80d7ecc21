"""Tests for configuration loading, validation and persistence."""

import json
from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mahoraga.config import (
    Config,
    ConfigError,
    ConfigStore,
    config_path,
    default_config,
    load_config,
    reset_config,
    save_config,
    validate_config,
)
from mahoraga.models import ProviderType


class TestDefaultConfig:
    def test_active_provider_is_azure(self) -> None:
        assert default_config().provider.active is ProviderType.AZURE

    def test_backend_defaults(self) -> None:
        cfg = default_config()
        assert cfg.azure.url == ""
        assert cfg.azure.api_version == "2024-02-15-preview"
        assert cfg.openai.model == "gpt-4"
        assert cfg.anthropic.model == "claude-sonnet-4-20250514"

    def test_copy_is_independent(self) -> None:
        cfg = default_config()
        clone = cfg.copy()
        clone.openai.api_key = "sk-x"
        clone.provider.active = ProviderType.OPENAI
        assert cfg.openai.api_key == ""
        assert cfg.provider.active is ProviderType.AZURE


class TestConfigPath:
    def test_xdg_config_home(self, isolated_config_home: Path) -> None:
        assert config_path() == isolated_config_home / "mahoraga" / "config.json"

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "custom.json"
        monkeypatch.setenv("MAHORAGA_CONFIG", str(target))
        assert config_path() == target

    def test_home_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert config_path() == tmp_path / ".config" / "mahoraga" / "config.json"


class TestValidateConfig:
    def test_empty_dict_returns_defaults(self) -> None:
        assert validate_config({}) == default_config()

    def test_partial_sections_keep_defaults(self) -> None:
        cfg = validate_config({"provider": {"active": "anthropic"}, "anthropic": {"api_key": "k"}})
        assert cfg.provider.active is ProviderType.ANTHROPIC
        assert cfg.anthropic.api_key == "k"
        assert cfg.anthropic.model == "claude-sonnet-4-20250514"

    def test_provider_name_case_insensitive(self) -> None:
        assert validate_config({"provider": {"active": "OpenAI"}}).provider.active is ProviderType.OPENAI

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigError, match="provider.active must be one of"):
            validate_config({"provider": {"active": "gemini"}})

    def test_unknown_top_level_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown keys in config: extra"):
            validate_config({"extra": 1})

    def test_unknown_section_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown keys in openai: temperature"):
            validate_config({"openai": {"temperature": 0.5}})

    def test_non_string_value(self) -> None:
        with pytest.raises(ConfigError, match="azure.url must be a string"):
            validate_config({"azure": {"url": 42}})

    def test_section_must_be_object(self) -> None:
        with pytest.raises(ConfigError, match="anthropic must be an object"):
            validate_config({"anthropic": "key"})


class TestLoadConfig:
    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "nope.json") == default_config()

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("  \n", encoding="utf-8")
        assert load_config(path) == default_config()

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(path)

    def test_non_object_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError, match="must be a JSON object"):
            load_config(path)

    def test_reads_default_location(self, isolated_config_home: Path) -> None:
        path = isolated_config_home / "mahoraga" / "config.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"openai": {"api_key": "sk-1"}}), encoding="utf-8")
        assert load_config().openai.api_key == "sk-1"


class TestSaveConfig:
    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.json"
        cfg = Config()
        cfg.provider.active = ProviderType.OPENAI
        cfg.openai.api_key = "sk-test"
        cfg.azure.url = "https://example.openai.azure.com"
        save_config(cfg, path)
        assert load_config(path) == cfg

    @given(
        active=st.sampled_from(ProviderType),
        azure=st.tuples(st.text(), st.text(), st.text(), st.text()),
        openai=st.tuples(st.text(), st.text()),
        anthropic=st.tuples(st.text(), st.text()),
    )
    def test_round_trip_any_strings(
        self,
        tmp_path: Path,
        active: ProviderType,
        azure: tuple[str, str, str, str],
        openai: tuple[str, str],
        anthropic: tuple[str, str],
    ) -> None:
        path = tmp_path / "config.json"
        cfg = Config()
        cfg.provider.active = active
        cfg.azure.url, cfg.azure.api_key, cfg.azure.deployment, cfg.azure.api_version = azure
        cfg.openai.api_key, cfg.openai.model = openai
        cfg.anthropic.api_key, cfg.anthropic.model = anthropic
        save_config(cfg, path)
        assert load_config(path) == cfg

    def test_round_trip_awkward_strings(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        cfg = Config()
        cfg.azure.url = ""
        cfg.azure.api_key = 'say "hi"\\'
        cfg.openai.model = "line one\nline two"
        cfg.anthropic.api_key = "cl\u00e9-\u5bc6\u94a5-\U0001f511"
        save_config(cfg, path)
        assert load_config(path) == cfg

    def test_writes_lowercase_provider(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        cfg = Config()
        cfg.provider.active = ProviderType.ANTHROPIC
        save_config(cfg, path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["provider"] == {"active": "anthropic"}
        assert set(data) == {"provider", "azure", "openai", "anthropic"}

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        save_config(Config(), tmp_path / "config.json")
        assert [p.name for p in tmp_path.iterdir()] == ["config.json"]

    def test_unwritable_location(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to write config file"):
            save_config(Config(), blocker / "config.json")

    def test_reset_writes_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        cfg = Config()
        cfg.openai.api_key = "sk-old"
        save_config(cfg, path)
        assert reset_config(path) == default_config()
        assert load_config(path) == default_config()


class TestConfigStore:
    def test_defaults_to_resolved_path(self, isolated_config_home: Path) -> None:
        assert ConfigStore().path == isolated_config_home / "mahoraga" / "config.json"

    def test_load_save_reset(self, tmp_path: Path) -> None:
        store = ConfigStore(tmp_path / "config.json")
        cfg = store.load()
        cfg.anthropic.api_key = "ak"
        store.save(cfg)
        assert store.load().anthropic.api_key == "ak"
        assert store.reset() == default_config()
        assert store.load() == default_config()
