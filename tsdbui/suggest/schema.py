"""Schema lookups with an ordered fallback chain and a TTL cache.

Each lookup walks a tuple of ``SchemaSource`` descriptors. A source names a
backend command, builds its arguments and turns the raw result into names.
The first source that yields names wins; failures are logged and skipped.
The last source of every chain runs a raw introspection statement through
``execute_query`` and decodes whatever row shape comes back.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Hashable, Iterable, Mapping, Sequence, TypeVar

from tsdbui.bridge import BackendBridge

from .cache import ColumnSet, SchemaCache
from .models import Dialect

LOG = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SchemaRequest:
    """What a schema source is asked for."""

    connection_id: str
    database: str
    dialect: Dialect = Dialect.INFLUXQL
    table: str | None = None


RowExtractor = Callable[[object], "str | None"]


def mapping_extractor(*keys: str) -> RowExtractor:
    """Return an extractor reading the first non-empty value among ``keys``."""

    def _extract(row: object) -> str | None:
        if not isinstance(row, Mapping):
            return None
        for key in keys:
            value = row.get(key)
            if value not in (None, ""):
                return str(value)
        return None

    return _extract


def positional_extractor(row: object) -> str | None:
    if isinstance(row, (list, tuple)) and row:
        value = row[0]
        return None if value in (None, "") else str(value)
    return None


def scalar_extractor(row: object) -> str | None:
    if isinstance(row, str) and row:
        return row
    return None


TABLE_EXTRACTORS: tuple[RowExtractor, ...] = (
    scalar_extractor,
    mapping_extractor("name", "measurement", "table_name", "tableName", "Device", "device"),
    positional_extractor,
)

FIELD_EXTRACTORS: tuple[RowExtractor, ...] = (
    scalar_extractor,
    mapping_extractor(
        "field_key", "fieldKey", "name", "column_name", "columnName", "Timeseries", "timeseries"
    ),
    positional_extractor,
)

TAG_EXTRACTORS: tuple[RowExtractor, ...] = (
    scalar_extractor,
    mapping_extractor("tag_key", "tagKey", "name"),
    positional_extractor,
)


def result_rows(result: Any) -> list[object]:
    """Flatten the row-oriented shapes backends return into a list of rows.

    Accepts plain lists, ``{"data" | "rows" | "values": [...]}`` with optional
    ``columns``, and InfluxDB 1.x ``{"results": [{"series": [...]}]}`` bodies.
    Sequence rows paired with a column list become mappings.
    """

    if result is None:
        return []
    if isinstance(result, list):
        return list(result)
    if not isinstance(result, Mapping):
        return []
    if isinstance(result.get("results"), list):
        rows: list[object] = []
        for statement in result["results"]:
            if not isinstance(statement, Mapping):
                continue
            for series in statement.get("series") or ():
                rows.extend(result_rows(series))
        return rows
    columns = result.get("columns")
    for key in ("data", "rows", "values"):
        data = result.get(key)
        if isinstance(data, list):
            if isinstance(columns, list) and columns:
                return [_zip_row(columns, row) for row in data]
            return list(data)
    return []


def _zip_row(columns: Sequence[object], row: object) -> object:
    if isinstance(row, (list, tuple)):
        return {str(column): value for column, value in zip(columns, row)}
    return row


def extract_names(result: Any, extractors: Sequence[RowExtractor]) -> tuple[str, ...]:
    """Pull names out of ``result`` trying each extractor per row."""

    names: list[str] = []
    seen: set[str] = set()
    for row in result_rows(result):
        for extractor in extractors:
            name = extractor(row)
            if name:
                break
        else:
            continue
        name = name.strip()
        if name and name not in seen:
            names.append(name)
            seen.add(name)
    return tuple(names)


@dataclass(frozen=True, slots=True)
class SchemaSource:
    """One step of a fallback chain."""

    command: str
    build_args: Callable[[SchemaRequest], "Mapping[str, object] | None"]
    extract: Callable[[Any, SchemaRequest], tuple[str, ...]]


def _names(extractors: Sequence[RowExtractor]) -> Callable[[Any, SchemaRequest], tuple[str, ...]]:
    return lambda result, _request: extract_names(result, extractors)


def _database_args(request: SchemaRequest) -> Mapping[str, object]:
    return {"connection_id": request.connection_id, "database": request.database}


def _suggestion_args(request: SchemaRequest) -> Mapping[str, object]:
    return {**_database_args(request), "partial_query": ""}


def _table_args(request: SchemaRequest) -> Mapping[str, object]:
    return {**_database_args(request), "measurement": request.table}


def is_hierarchical(name: str | None) -> bool:
    """IoTDB paths live under a ``root.`` namespace."""

    return bool(name) and name.lower().startswith("root.")


def _device_path(request: SchemaRequest) -> str | None:
    table = request.table or ""
    if is_hierarchical(table):
        return table
    if is_hierarchical(request.database) and table:
        return f"{request.database}.{table}"
    return None


def _query_args(query: str | None, request: SchemaRequest) -> Mapping[str, object] | None:
    if not query:
        return None
    return {**_database_args(request), "query": query}


def tables_query(request: SchemaRequest) -> str:
    if is_hierarchical(request.database):
        return f"SHOW DEVICES {request.database}.**"
    if request.dialect is Dialect.SQL:
        return "SHOW TABLES"
    return "SHOW MEASUREMENTS"


def fields_query(request: SchemaRequest) -> str | None:
    if not request.table:
        return None
    path = _device_path(request)
    if path:
        return f"SHOW TIMESERIES {path}.*"
    if request.dialect is Dialect.SQL:
        return f"SHOW COLUMNS FROM {request.table}"
    return f'SHOW FIELD KEYS FROM "{request.table}"'


def tags_query(request: SchemaRequest) -> str | None:
    if not request.table or _device_path(request) or request.dialect is Dialect.SQL:
        return None
    return f'SHOW TAG KEYS FROM "{request.table}"'


def _timeseries_names(result: Any, request: SchemaRequest) -> tuple[str, ...]:
    names = extract_names(result, FIELD_EXTRACTORS)
    path = _device_path(request)
    if not path:
        return names
    prefix = f"{path}."
    trimmed: list[str] = []
    for name in names:
        short = name[len(prefix):] if name.startswith(prefix) else name.rsplit(".", 1)[-1]
        if short and short not in trimmed:
            trimmed.append(short)
    return tuple(trimmed)


TABLE_SOURCES: tuple[SchemaSource, ...] = (
    SchemaSource("get_measurements", _database_args, _names(TABLE_EXTRACTORS)),
    SchemaSource("get_tables", _database_args, _names(TABLE_EXTRACTORS)),
    SchemaSource("get_query_suggestions", _suggestion_args, _names(TABLE_EXTRACTORS)),
    SchemaSource(
        "execute_query",
        lambda request: _query_args(tables_query(request), request),
        _names(TABLE_EXTRACTORS),
    ),
)

FIELD_SOURCES: tuple[SchemaSource, ...] = (
    SchemaSource("get_field_keys", _table_args, _names(FIELD_EXTRACTORS)),
    SchemaSource(
        "execute_query",
        lambda request: _query_args(fields_query(request), request),
        _timeseries_names,
    ),
)

TAG_SOURCES: tuple[SchemaSource, ...] = (
    SchemaSource("get_tag_keys", _table_args, _names(TAG_EXTRACTORS)),
    SchemaSource(
        "execute_query",
        lambda request: _query_args(tags_query(request), request),
        _names(TAG_EXTRACTORS),
    ),
)


class SchemaFetcher:
    """Resolves table and column names through cache, commands and raw queries."""

    def __init__(
        self,
        bridge: BackendBridge | None,
        cache: SchemaCache,
        *,
        table_sources: Iterable[SchemaSource] = TABLE_SOURCES,
        field_sources: Iterable[SchemaSource] = FIELD_SOURCES,
        tag_sources: Iterable[SchemaSource] = TAG_SOURCES,
    ) -> None:
        self._bridge = bridge
        self._cache = cache
        self._table_sources = tuple(table_sources)
        self._field_sources = tuple(field_sources)
        self._tag_sources = tuple(tag_sources)
        self._inflight: dict[Hashable, asyncio.Future[Any]] = {}

    @property
    def cache(self) -> SchemaCache:
        return self._cache

    async def tables(self, request: SchemaRequest) -> tuple[str, ...]:
        """Return table names for the request's database."""

        cached = self._cache.tables(request.connection_id, request.database)
        if cached is not None:
            return cached
        key = ("tables", request.connection_id, request.database)
        return await self._coalesce(key, lambda: self._load_tables(request))

    async def columns(self, request: SchemaRequest) -> ColumnSet:
        """Return field and tag names for the request's table."""

        table = request.table or ""
        cached = self._cache.columns(request.connection_id, request.database, table)
        if cached is not None:
            return cached
        key = ("columns", request.connection_id, request.database, table)
        return await self._coalesce(key, lambda: self._load_columns(request))

    async def _load_tables(self, request: SchemaRequest) -> tuple[str, ...]:
        tables = await self._first_non_empty(self._table_sources, request, "tables")
        if tables:
            self._cache.store_tables(request.connection_id, request.database, tables)
        return tables

    async def _load_columns(self, request: SchemaRequest) -> ColumnSet:
        fields = await self._first_non_empty(self._field_sources, request, "fields")
        tags = await self._first_non_empty(self._tag_sources, request, "tags")
        columns = ColumnSet(fields=fields, tags=tags)
        if columns:
            self._cache.store_columns(request.connection_id, request.database, request.table or "", columns)
        return columns

    async def _first_non_empty(
        self,
        sources: Sequence[SchemaSource],
        request: SchemaRequest,
        kind: str,
    ) -> tuple[str, ...]:
        if self._bridge is None:
            return ()
        for source in sources:
            args = source.build_args(request)
            if args is None:
                continue
            try:
                result = await self._bridge.call(source.command, args)
                names = source.extract(result, request)
            except Exception as exc:
                LOG.debug(
                    "Schema source failed",
                    extra={"command": source.command, "kind": kind, "error": str(exc)},
                )
                continue
            if names:
                LOG.debug(
                    "Schema source answered",
                    extra={"command": source.command, "kind": kind, "count": len(names)},
                )
                return names
        LOG.info(
            "No schema source returned data",
            extra={"kind": kind, "database": request.database, "table": request.table},
        )
        return ()

    async def _coalesce(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        future = self._inflight.get(key)
        if future is None:
            future = asyncio.ensure_future(factory())
            self._inflight[key] = future
            future.add_done_callback(lambda done, k=key: self._forget(k, done))
        return await asyncio.shield(future)

    def _forget(self, key: Hashable, future: asyncio.Future[Any]) -> None:
        if self._inflight.get(key) is future:
            del self._inflight[key]


__all__ = [
    "FIELD_SOURCES",
    "RowExtractor",
    "SchemaFetcher",
    "SchemaRequest",
    "SchemaSource",
    "TABLE_SOURCES",
    "TAG_SOURCES",
    "extract_names",
    "fields_query",
    "is_hierarchical",
    "mapping_extractor",
    "positional_extractor",
    "result_rows",
    "scalar_extractor",
    "tables_query",
    "tags_query",
]
