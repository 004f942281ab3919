"""Tests for the TTL schema cache."""

from __future__ import annotations

from tsdbui.suggest import ColumnSet, SchemaCache, TTLCache


def test_entries_expire_after_ttl(clock) -> None:
    cache: TTLCache[str] = TTLCache(300, clock=clock)
    cache.set("key", "value")

    clock.advance(299)
    assert cache.get("key") == "value"

    clock.advance(1)
    assert cache.get("key") is None
    assert len(cache) == 0


def test_missing_key_returns_none(clock) -> None:
    cache: TTLCache[str] = TTLCache(10, clock=clock)

    assert cache.get("absent") is None
    assert "absent" not in cache


def test_store_refreshes_expiry(clock) -> None:
    cache: TTLCache[int] = TTLCache(10, clock=clock)
    cache.set("key", 1)
    clock.advance(8)
    cache.set("key", 2)
    clock.advance(8)

    assert cache.get("key") == 2


def test_schema_cache_keys_tables_and_columns_separately(clock) -> None:
    cache = SchemaCache(60, clock=clock)
    cache.store_tables("conn", "db", ("cpu", "mem"))
    cache.store_columns("conn", "db", "cpu", ColumnSet(fields=("usage",), tags=("host",)))

    assert cache.tables("conn", "db") == ("cpu", "mem")
    assert cache.tables("conn", "other") is None
    assert cache.columns("conn", "db", "cpu") == ColumnSet(fields=("usage",), tags=("host",))
    assert cache.columns("conn", "db", "mem") is None


def test_schema_cache_clear_drops_everything(clock) -> None:
    cache = SchemaCache(60, clock=clock)
    cache.store_tables("conn", "db", ("cpu",))
    cache.store_columns("conn", "db", "cpu", ColumnSet(fields=("usage",)))

    cache.clear()

    assert cache.tables("conn", "db") is None
    assert cache.columns("conn", "db", "cpu") is None


def test_column_set_truthiness() -> None:
    assert not ColumnSet()
    assert ColumnSet(tags=("host",))
