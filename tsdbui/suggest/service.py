"""Main suggestion service merging vocabularies with live schema names."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from tsdbui.bridge import BackendBridge

from .cache import Clock, SchemaCache
from .context import classify
from .models import Dialect, SuggestionCategory, SuggestionContext, SuggestionItem
from .schema import SchemaFetcher, SchemaRequest, is_hierarchical
from .settings import SuggestionConfig
from .vocabulary import is_reserved, vocabulary_for

LOG = logging.getLogger(__name__)

_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_VOCABULARY_CATEGORIES = frozenset({SuggestionCategory.KEYWORD, SuggestionCategory.FUNCTION})


class SmartSuggestionService:
    """Context-aware completion engine for the query editor.

    The service holds no per-request state apart from its schema cache, so a
    single instance can serve every editor tab. Debouncing belongs to the
    caller.
    """

    def __init__(
        self,
        bridge: BackendBridge | None = None,
        *,
        config: SuggestionConfig | None = None,
        cache: SchemaCache | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config or SuggestionConfig()
        self._cache = cache or SchemaCache(self._config.cache_ttl_seconds, clock=clock)
        self._fetcher = SchemaFetcher(bridge, self._cache)

    @property
    def config(self) -> SuggestionConfig:
        return self._config

    @property
    def cache(self) -> SchemaCache:
        return self._cache

    def clear_cache(self) -> None:
        """Forget cached schema, e.g. after switching connections."""

        self._cache.clear()

    async def get_suggestions(
        self,
        connection_id: str,
        database: str,
        context: SuggestionContext,
        dialect: Dialect | str,
    ) -> list[SuggestionItem]:
        """Return ranked suggestions for the cursor described by ``context``."""

        dialect = Dialect.parse(dialect)
        word = context.word_before_cursor
        if len(word) < self._config.min_chars:
            return []

        vocabulary = vocabulary_for(dialect)
        items = vocabulary.keyword_items(self._config.detail_for(SuggestionCategory.KEYWORD))
        items.extend(vocabulary.function_items(self._config.detail_for(SuggestionCategory.FUNCTION)))

        if connection_id and database:
            classification = classify(context)
            if classification.tables:
                request = SchemaRequest(connection_id, database, dialect)
                items.extend(self._table_items(await self._fetcher.tables(request), database))
            if classification.columns and classification.table_name:
                request = SchemaRequest(connection_id, database, dialect, classification.table_name)
                items.extend(await self._column_items(request))
        else:
            LOG.debug("No connection selected, offering vocabulary only", extra={"dialect": dialect.value})

        return self._rank(items, word)

    def _table_items(self, tables: Iterable[str], database: str) -> list[SuggestionItem]:
        detail = self._config.detail_for(SuggestionCategory.TABLE)
        items: list[SuggestionItem] = []
        for table in tables:
            if is_reserved(table):
                continue
            items.append(
                SuggestionItem.build(
                    table,
                    SuggestionCategory.TABLE,
                    detail=detail,
                    documentation=f"{detail} {table} in database {database}",
                    value=_quote_identifier(table),
                )
            )
        return items

    async def _column_items(self, request: SchemaRequest) -> list[SuggestionItem]:
        columns = await self._fetcher.columns(request)
        table = request.table or ""
        if not columns:
            LOG.debug("Using generic column names", extra={"table": table})
            return self._name_items(
                self._config.fallback_fields, SuggestionCategory.FIELD, "Common field name"
            ) + self._name_items(self._config.fallback_tags, SuggestionCategory.TAG, "Common tag name")
        return self._name_items(
            columns.fields, SuggestionCategory.FIELD, f"Field of {table}"
        ) + self._name_items(columns.tags, SuggestionCategory.TAG, f"Tag of {table}")

    def _name_items(
        self,
        names: Sequence[str],
        category: SuggestionCategory,
        documentation: str,
    ) -> list[SuggestionItem]:
        detail = self._config.detail_for(category)
        return [
            SuggestionItem.build(name, category, detail=detail, documentation=f"{documentation}: {name}")
            for name in names
        ]

    def _rank(self, items: Sequence[SuggestionItem], word: str) -> list[SuggestionItem]:
        case_sensitive = self._config.case_sensitive
        needle = word if case_sensitive else word.lower()

        def _label(item: SuggestionItem) -> str:
            return item.label if case_sensitive else item.label.lower()

        matches = [item for item in _dedupe(items) if needle in _label(item)]
        matches.sort(
            key=lambda item: (
                item.priority,
                not _label(item).startswith(needle),
                item.label.lower(),
                item.sort_key,
            )
        )
        return _truncate(matches, self._config.max_items)


def _dedupe(items: Iterable[SuggestionItem]) -> list[SuggestionItem]:
    unique: list[SuggestionItem] = []
    seen: set[tuple[SuggestionCategory, str]] = set()
    for item in items:
        key = (item.category, item.label)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def _truncate(ranked: Sequence[SuggestionItem], limit: int) -> list[SuggestionItem]:
    """Cut ``ranked`` to ``limit`` items, giving up vocabulary slots before schema names.

    Schema items only exist when the context asked for them, so they keep
    their place even when the static vocabulary alone would fill the list.
    Vocabulary priorities sort ahead of schema priorities, so the result
    stays in ranked order.
    """

    if len(ranked) <= limit:
        return list(ranked)
    schema = [item for item in ranked if item.category not in _VOCABULARY_CATEGORIES][:limit]
    vocabulary = [item for item in ranked if item.category in _VOCABULARY_CATEGORIES]
    return vocabulary[: limit - len(schema)] + schema


def _quote_identifier(name: str) -> str:
    if is_hierarchical(name) or _PLAIN_IDENTIFIER.match(name):
        return name
    escaped = name.replace('"', '\\"')
    return f'"{escaped}"'


__all__ = ["SmartSuggestionService"]
