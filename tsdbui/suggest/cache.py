"""Short-lived schema cache used by the suggestion engine."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

DEFAULT_TTL_SECONDS = 5 * 60

Clock = Callable[[], float]
V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class ColumnSet:
    """Field and tag names of a single table."""

    fields: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.fields or self.tags)


@dataclass(slots=True)
class _Entry(Generic[V]):
    value: V
    expires_at: float


class TTLCache(Generic[V]):
    """Map whose entries expire a fixed time after they were stored.

    Expiry is checked lazily on read; no timers are involved.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, *, clock: Clock | None = None) -> None:
        self._ttl = ttl
        self._clock = clock or time.monotonic
        self._entries: dict[Hashable, _Entry[V]] = {}

    def get(self, key: Hashable) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: Hashable, value: V) -> None:
        self._entries[key] = _Entry(value=value, expires_at=self._clock() + self._ttl)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)


class SchemaCache:
    """Table and column lists keyed by connection, database and table."""

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, *, clock: Clock | None = None) -> None:
        self._tables: TTLCache[tuple[str, ...]] = TTLCache(ttl, clock=clock)
        self._columns: TTLCache[ColumnSet] = TTLCache(ttl, clock=clock)

    def tables(self, connection_id: str, database: str) -> tuple[str, ...] | None:
        return self._tables.get((connection_id, database))

    def store_tables(self, connection_id: str, database: str, tables: tuple[str, ...]) -> None:
        self._tables.set((connection_id, database), tables)

    def columns(self, connection_id: str, database: str, table: str) -> ColumnSet | None:
        return self._columns.get((connection_id, database, table))

    def store_columns(self, connection_id: str, database: str, table: str, columns: ColumnSet) -> None:
        self._columns.set((connection_id, database, table), columns)

    def clear(self) -> None:
        """Drop every entry, e.g. after the active connection changed."""

        self._tables.clear()
        self._columns.clear()


__all__ = ["ColumnSet", "DEFAULT_TTL_SECONDS", "SchemaCache", "TTLCache"]
