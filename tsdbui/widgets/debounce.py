"""Keystroke debouncing for the editor widgets."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

LOG = logging.getLogger(__name__)


class Debouncer:
    """Runs only the last of a burst of submissions, ``delay`` seconds after it."""

    def __init__(self, delay: float = 0.15) -> None:
        self._delay = delay
        self._task: asyncio.Task[Any] | None = None

    @classmethod
    def from_millis(cls, delay_ms: int) -> "Debouncer":
        return cls(delay_ms / 1000)

    @property
    def pending(self) -> bool:
        """True while a submitted call is waiting or running."""

        return self._task is not None and not self._task.done()

    def submit(self, coro_factory: Callable[[], Awaitable[Any]]) -> None:
        """Replace whatever is waiting with ``coro_factory``."""

        self.cancel()
        task = asyncio.get_running_loop().create_task(self._run_later(coro_factory))
        task.add_done_callback(_report_failure)
        self._task = task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run_later(self, coro_factory: Callable[[], Awaitable[Any]]) -> None:
        await asyncio.sleep(self._delay)
        await coro_factory()


def _report_failure(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        LOG.error("Debounced call failed", exc_info=error)


__all__ = ["Debouncer"]
