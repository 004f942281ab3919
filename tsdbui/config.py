"""App configuration loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, Field, ValidationError, field_validator

from .suggest.models import Dialect, SuggestionCategory
from .suggest.settings import SuggestionConfig

CONFIG_FILE = Path.home() / ".config" / "tsdbui" / "config.toml"


class ConnectionProfileConfig(BaseModel):
    """Connection profile configuration stored in config.toml."""

    name: str
    connection_id: str
    database: str | None = None
    dialect: Dialect = Dialect.INFLUXQL

    @field_validator("dialect", mode="before")
    @classmethod
    def _parse_dialect(cls, value: object) -> object:
        if isinstance(value, str):
            return Dialect.parse(value)
        return value


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    theme: str = "dark"
    log_level: str = "WARNING"
    bridge_url: str | None = None
    debounce_ms: int = Field(default=150, ge=0)
    suggestions: SuggestionConfig = Field(default_factory=SuggestionConfig)
    profiles: list[ConnectionProfileConfig] = Field(default_factory=lambda: list(_default_profiles()))
    active_profile: str | None = None

    def profile(self, name: str | None = None) -> ConnectionProfileConfig | None:
        """Return the named profile, the active one, or the first configured."""

        wanted = name or self.active_profile
        for profile in self.profiles:
            if profile.name == wanted:
                return profile
        if name is None and self.profiles:
            return self.profiles[0]
        return None

    def with_active_profile(self, name: str) -> AppConfig:
        """Return a copy with the active profile updated."""

        return self.model_copy(update={"active_profile": name})


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()

    profiles_data = data.pop("profiles", None)
    profiles: list[ConnectionProfileConfig] = []
    if isinstance(profiles_data, list):
        for profile in profiles_data:
            try:
                profiles.append(ConnectionProfileConfig.model_validate(profile))
            except ValidationError:
                continue
    try:
        suggestions = SuggestionConfig.model_validate(data.pop("suggestions", {}))
    except ValidationError:
        suggestions = SuggestionConfig()
    try:
        return AppConfig(
            **data,
            suggestions=suggestions,
            profiles=profiles or list(_default_profiles()),
        )
    except ValidationError:
        return AppConfig(suggestions=suggestions, profiles=profiles or list(_default_profiles()))


def save_config(config: AppConfig) -> None:
    """Persist configuration to disk."""

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = [
        f'theme = "{config.theme}"',
        f'log_level = "{config.log_level}"',
        f"debounce_ms = {config.debounce_ms}",
    ]
    if config.bridge_url:
        lines.append(f'bridge_url = "{config.bridge_url}"')
    if config.active_profile:
        lines.append(f'active_profile = "{config.active_profile}"')
    suggestions = config.suggestions
    lines.append("")
    lines.append("[suggestions]")
    lines.append(f"max_items = {suggestions.max_items}")
    lines.append(f"case_sensitive = {str(suggestions.case_sensitive).lower()}")
    lines.append(f"min_chars = {suggestions.min_chars}")
    lines.append(f"cache_ttl_seconds = {suggestions.cache_ttl_seconds}")
    lines.append(f"fallback_fields = {_toml_list(suggestions.fallback_fields)}")
    lines.append(f"fallback_tags = {_toml_list(suggestions.fallback_tags)}")
    if suggestions.detail_labels:
        lines.append("")
        lines.append("[suggestions.detail_labels]")
        for category, label in suggestions.detail_labels.items():
            lines.append(f"{SuggestionCategory(category).value} = {_toml_string(label)}")
    if config.profiles:
        lines.append("")
        for profile in config.profiles:
            lines.append("[[profiles]]")
            lines.append(f'name = "{profile.name}"')
            lines.append(f'connection_id = "{profile.connection_id}"')
            if profile.database:
                lines.append(f'database = "{profile.database}"')
            lines.append(f'dialect = "{profile.dialect.value}"')
            lines.append("")
    CONFIG_FILE.write_text("\n".join(lines) + "\n", encoding="utf-8")


def _toml_list(values: tuple[str, ...]) -> str:
    return "[" + ", ".join(_toml_string(value) for value in values) + "]"


def _toml_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    for key in ("theme", "log_level", "bridge_url", "active_profile"):
        value = raw.get(key)
        if isinstance(value, str):
            data[key] = value
    debounce = raw.get("debounce_ms")
    if isinstance(debounce, int) and not isinstance(debounce, bool):
        data["debounce_ms"] = debounce
    suggestions = raw.get("suggestions")
    if isinstance(suggestions, dict):
        data["suggestions"] = suggestions
    profiles = raw.get("profiles")
    if isinstance(profiles, list):
        data["profiles"] = [profile for profile in profiles if isinstance(profile, dict)]
    return data


def _default_profiles() -> tuple[ConnectionProfileConfig, ...]:
    """Default profiles shown on first run before config is customized."""

    return (
        ConnectionProfileConfig(
            name="Local Telegraf",
            connection_id="demo-influx",
            database="telegraf",
            dialect=Dialect.INFLUXQL,
        ),
        ConnectionProfileConfig(
            name="Factory IoTDB",
            connection_id="demo-iotdb",
            database="root.factory",
            dialect=Dialect.IOTDB,
        ),
    )
