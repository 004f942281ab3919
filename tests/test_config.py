"""Tests for AppConfig helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from tsdbui import config as config_module
from tsdbui.config import AppConfig, ConnectionProfileConfig, load_config, save_config
from tsdbui.suggest import Dialect, SuggestionCategory, SuggestionConfig


def test_defaults_include_demo_profiles() -> None:
    config = AppConfig()

    assert [profile.name for profile in config.profiles] == ["Local Telegraf", "Factory IoTDB"]
    assert config.suggestions.max_items == 50
    assert config.suggestions.cache_ttl_seconds == 300


def test_profile_lookup_prefers_active_then_first() -> None:
    config = AppConfig()

    assert config.profile().name == "Local Telegraf"
    assert config.with_active_profile("Factory IoTDB").profile().name == "Factory IoTDB"
    assert config.profile("Missing") is None


def test_profile_dialect_accepts_aliases() -> None:
    profile = ConnectionProfileConfig.model_validate(
        {"name": "Cloud", "connection_id": "cloud", "dialect": "2.x"}
    )

    assert profile.dialect is Dialect.FLUX


def test_load_config_returns_defaults_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.toml")

    result = load_config()

    assert result == AppConfig()


def test_load_config_reads_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
theme = "light"
log_level = "DEBUG"
bridge_url = "http://127.0.0.1:8086"
debounce_ms = 250
active_profile = "Edge"

[suggestions]
max_items = 20
case_sensitive = true
fallback_tags = ["site"]

[[profiles]]
name = "Edge"
connection_id = "edge-1"
database = "metrics"
dialect = "3.x"

[[profiles]]
name = "Broken"
"""
    )
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result.theme == "light"
    assert result.log_level == "DEBUG"
    assert result.bridge_url == "http://127.0.0.1:8086"
    assert result.debounce_ms == 250
    assert result.suggestions.max_items == 20
    assert result.suggestions.case_sensitive is True
    assert result.suggestions.fallback_tags == ("site",)
    assert [profile.name for profile in result.profiles] == ["Edge"]
    assert result.profile().dialect is Dialect.SQL


def test_load_config_ignores_invalid_suggestion_section(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("[suggestions]\nmax_items = 0\n")
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result.suggestions == SuggestionConfig()


def test_load_config_handles_toml_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("theme = [unterminated")
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result == AppConfig()


def test_save_config_round_trips(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "nested" / "config.toml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)
    saved = AppConfig(
        theme="light",
        bridge_url="http://localhost:9000",
        suggestions=SuggestionConfig(
            max_items=10,
            min_chars=1,
            detail_labels={SuggestionCategory.KEYWORD: "Schlüsselwort", SuggestionCategory.TABLE: 'Tabelle "t"'},
        ),
        profiles=[
            ConnectionProfileConfig(
                name="IoT", connection_id="iot", database="root.sg", dialect=Dialect.IOTDB
            )
        ],
        active_profile="IoT",
    )

    save_config(saved)

    content = config_path.read_text()
    assert "[suggestions]" in content
    assert 'dialect = "iotdb-sql"' in content
    restored = load_config()
    assert restored.bridge_url == "http://localhost:9000"
    assert restored.suggestions.max_items == 10
    assert restored.suggestions.min_chars == 1
    assert restored.suggestions.detail_labels == saved.suggestions.detail_labels
    assert restored.suggestions.detail_for(SuggestionCategory.KEYWORD) == "Schlüsselwort"
    assert restored.profiles == saved.profiles
    assert restored.active_profile == "IoT"


def test_detail_labels_survive_load_then_save(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('[suggestions.detail_labels]\nkeyword = "KW-localized"\n')
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    save_config(load_config())
    result = load_config()

    assert result.suggestions.detail_for(SuggestionCategory.KEYWORD) == "KW-localized"
    assert "[suggestions.detail_labels]" in config_path.read_text()
