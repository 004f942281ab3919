"""Command palette providers for core app features."""

from __future__ import annotations

from textual.command import DiscoveryHit, Hit, Hits, Provider
from textual.types import IgnoreReturnCallbackType


class ProfileSwitchProvider(Provider):
    """Expose connection profiles to the command palette."""

    async def search(self, query: str) -> Hits:
        matcher = self.matcher(query)
        for name in self._profile_names():
            match = matcher.match(name)
            if match > 0:
                yield Hit(
                    score=match,
                    match_display=f"Switch to profile: {matcher.highlight(name)}",
                    command=self._build_callback(name),
                    help="Use this connection for suggestions.",
                )

    async def discover(self) -> Hits:
        for name in self._profile_names():
            yield DiscoveryHit(
                display=f"Switch to profile: {name}",
                command=self._build_callback(name),
                help="Use this connection for suggestions.",
            )

    def _profile_names(self) -> tuple[str, ...]:
        names = getattr(self.app, "profile_names", None)
        if names is None:
            return ()
        return tuple(names())

    def _build_callback(self, name: str) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            switcher = getattr(self.app, "switch_profile", None)
            if switcher is None:
                return
            switcher(name)

        return _run


class ClearSchemaCacheProvider(Provider):
    """Expose a command that drops cached schema names."""

    _LABEL = "Clear cached schema"

    async def search(self, query: str) -> Hits:
        matcher = self.matcher(query)
        score = matcher.match(self._LABEL)
        if score > 0:
            yield Hit(
                score=score,
                match_display=matcher.highlight(self._LABEL),
                command=self._build_callback(),
                help="Refetch measurements, fields and tags on the next suggestion.",
            )

    async def discover(self) -> Hits:
        yield DiscoveryHit(
            display=self._LABEL,
            command=self._build_callback(),
            help="Refetch measurements, fields and tags on the next suggestion.",
        )

    def _build_callback(self) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            clear = getattr(self.app, "clear_schema_cache", None)
            if clear is None:
                return
            clear()

        return _run


__all__ = ["ClearSchemaCacheProvider", "ProfileSwitchProvider"]
