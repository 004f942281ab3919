"""Shared fakes for the suggestion engine tests."""

from __future__ import annotations

from typing import Any, Callable, Mapping

import pytest

from tsdbui.bridge import BridgeError


class ScriptedBridge:
    """Bridge answering each command from a script; unscripted commands fail."""

    def __init__(self, script: Mapping[str, Any] | None = None) -> None:
        self.script = dict(script or {})
        self.calls: list[tuple[str, dict[str, object]]] = []

    async def call(self, command: str, args: Mapping[str, object]) -> Any:
        self.calls.append((command, dict(args)))
        if command not in self.script:
            raise BridgeError(f"Unknown command '{command}'.")
        response = self.script[command]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(args)
        return response

    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_bridge() -> Callable[..., ScriptedBridge]:
    return ScriptedBridge


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
