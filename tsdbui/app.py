"""Textual application entry point for tsdbui."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import Footer, Header

from .bridge import BackendBridge, DemoBridge, HttpBridge
from .config import AppConfig, ConnectionProfileConfig, load_config, save_config
from .providers import ClearSchemaCacheProvider, ProfileSwitchProvider
from .suggest import SmartSuggestionService
from .widgets import QueryPad

LOG = logging.getLogger(__name__)


def build_bridge(config: AppConfig) -> BackendBridge:
    """Use the HTTP sidecar when configured, otherwise the offline demo data."""

    if config.bridge_url:
        return HttpBridge(config.bridge_url)
    LOG.info("No bridge_url configured, using demo schema data")
    return DemoBridge()


class TsdbuiApp(App[None]):
    """Textual shell around the query editor and its suggestions."""

    COMMANDS = App.COMMANDS | {ProfileSwitchProvider, ClearSchemaCacheProvider}
    CSS = """
    Screen {
        layout: vertical;
    }
    #main-column {
        layout: vertical;
        padding: 1 2;
        height: 1fr;
    }
    """

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+r", "clear_cache", "Refresh Schema"),
        ("ctrl+p", "command_palette", "Command Palette"),
    ]

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        bridge: BackendBridge | None = None,
        persist: bool = True,
    ) -> None:
        super().__init__()
        self._config = config or load_config()
        self._persist = persist
        self._bridge = bridge or build_bridge(self._config)
        self._service = SmartSuggestionService(self._bridge, config=self._config.suggestions)
        self._query_pad: QueryPad | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._query_pad = QueryPad(
            self._service,
            self.active_profile,
            debounce_ms=self._config.debounce_ms,
        )
        yield Container(self._query_pad, id="main-column")
        yield Footer()

    @property
    def suggestion_service(self) -> SmartSuggestionService:
        return self._service

    @property
    def config(self) -> AppConfig:
        return self._config

    def active_profile(self) -> ConnectionProfileConfig | None:
        return self._config.profile()

    def profile_names(self) -> tuple[str, ...]:
        return tuple(profile.name for profile in self._config.profiles)

    def switch_profile(self, name: str) -> None:
        """Activate the requested profile; cached schema belongs to the old one."""

        profile = self._config.profile(name)
        if profile is None:
            self._safe_notify(f"Profile '{name}' not found.", severity="error")
            return
        self._config = self._config.with_active_profile(profile.name)
        self._service.clear_cache()
        if self._persist:
            save_config(self._config)
        if self._query_pad:
            self._query_pad.render_profile()
        self._safe_notify(f"Switched to profile: {profile.name}", severity="information")

    def clear_schema_cache(self) -> None:
        self._service.clear_cache()
        self._safe_notify("Schema cache cleared.", severity="information")

    def action_clear_cache(self) -> None:
        self.clear_schema_cache()

    def _safe_notify(self, message: str, *, severity: str = "information") -> None:
        if not self.is_running:
            LOG.info(message)
            return
        try:
            self.notify(message, severity=severity)
        except Exception:
            LOG.exception("Failed to display notification", extra={"notice": message})

    async def on_unmount(self) -> None:
        if isinstance(self._bridge, HttpBridge):
            await self._bridge.aclose()


def main() -> None:
    """Invoke the Textual application."""

    config = load_config()
    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.WARNING))
    TsdbuiApp(config).run()


if __name__ == "__main__":
    main()
