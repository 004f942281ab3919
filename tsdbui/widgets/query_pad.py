"""Query editor surface that feeds keystrokes into the suggestion engine."""

from __future__ import annotations

from typing import Callable, Sequence

from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Input, Static

from tsdbui.config import ConnectionProfileConfig
from tsdbui.suggest import SmartSuggestionService, SuggestionContext, SuggestionItem

from .debounce import Debouncer

ProfileGetter = Callable[[], "ConnectionProfileConfig | None"]


class QueryPad(Container):
    """Single-line editor with a live suggestion list underneath."""

    DEFAULT_CSS = """
    QueryPad {
        layout: vertical;
        border: round $primary 40%;
        padding: 1 2;
        height: 1fr;
        background: $surface;
    }

    QueryPad .panel-title {
        text-style: bold;
    }

    QueryPad Input {
        border: heavy $primary;
    }

    #query-suggestions {
        height: auto;
        min-height: 3;
        border-top: solid $surface-darken-2;
        padding-top: 1;
    }

    #query-profile {
        color: $text-muted;
    }
    """

    def __init__(
        self,
        service: SmartSuggestionService,
        profile_getter: ProfileGetter,
        *,
        debounce_ms: int = 150,
        visible_rows: int = 8,
    ) -> None:
        super().__init__(id="query-pad")
        self._service = service
        self._profile_getter = profile_getter
        self._debouncer = Debouncer.from_millis(debounce_ms)
        self._visible_rows = visible_rows
        self._input: Input | None = None
        self._suggestions: Static | None = None
        self._profile_panel: Static | None = None
        self._last_suggestions: tuple[SuggestionItem, ...] = ()

    @property
    def last_suggestions(self) -> tuple[SuggestionItem, ...]:
        """Suggestions rendered by the most recent refresh."""

        return self._last_suggestions

    def compose(self) -> ComposeResult:
        yield Static("Query", classes="panel-title")
        yield Input(placeholder="SELECT * FROM cpu WHERE host = 'a'", id="query-input")
        yield Static("Suggestions appear here.", id="query-suggestions")
        yield Static("", id="query-profile")

    async def on_mount(self) -> None:
        self._input = self.query_one("#query-input", Input)
        self._suggestions = self.query_one("#query-suggestions", Static)
        self._profile_panel = self.query_one("#query-profile", Static)
        self.render_profile()

    def on_unmount(self) -> None:
        self._debouncer.cancel()

    async def on_input_changed(self, event: Input.Changed) -> None:
        buffer = event.value
        cursor = event.input.cursor_position
        self._debouncer.submit(lambda b=buffer, c=cursor: self.refresh_suggestions(b, c))

    async def refresh_suggestions(self, buffer: str, cursor: int | None = None) -> list[SuggestionItem]:
        """Request suggestions for ``buffer`` and render them."""

        profile = self._profile_getter()
        context = SuggestionContext.from_buffer(buffer, cursor)
        if profile is None:
            items = await self._service.get_suggestions("", "", context, "sql")
        else:
            items = await self._service.get_suggestions(
                profile.connection_id,
                profile.database or "",
                context,
                profile.dialect,
            )
        self._last_suggestions = tuple(items)
        self._render_suggestions(items)
        return items

    def render_profile(self) -> None:
        if not self._profile_panel:
            return
        profile = self._profile_getter()
        if profile is None:
            self._profile_panel.update("No connection selected")
            return
        database = profile.database or "-"
        self._profile_panel.update(f"{profile.name} · {database} · {profile.dialect.value}")

    def _render_suggestions(self, suggestions: Sequence[SuggestionItem]) -> None:
        if not self._suggestions:
            return
        if not suggestions:
            self._suggestions.update("No suggestions.")
            return
        rows = [
            f"{entry.label} · {entry.detail}"
            for entry in suggestions[: self._visible_rows]
        ]
        self._suggestions.update("\n".join(rows))


__all__ = ["QueryPad"]
