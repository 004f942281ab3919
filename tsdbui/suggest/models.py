"""Core dataclasses shared by the suggestion engine."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

LOG = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\w*$")
_PLACEHOLDER_RE = re.compile(r"\$\d")


class Dialect(str, Enum):
    """Query language variants with their own vocabulary."""

    INFLUXQL = "influxql"
    FLUX = "flux"
    SQL = "sql"
    IOTDB = "iotdb-sql"

    @classmethod
    def parse(cls, value: "Dialect | str") -> "Dialect":
        """Resolve enum members, values and data-source aliases.

        Unknown strings fall back to the generic SQL vocabulary; anything that
        is not a string is a caller bug and raises ``TypeError``.
        """

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Dialect must be a string, got {type(value).__name__}.")
        key = value.strip().lower()
        alias = _DIALECT_ALIASES.get(key)
        if alias is not None:
            return alias
        for member in cls:
            if member.value == key:
                return member
        LOG.warning("Unknown dialect, using generic SQL vocabulary", extra={"dialect": value})
        return cls.SQL


_DIALECT_ALIASES: Mapping[str, Dialect] = {
    "1.x": Dialect.INFLUXQL,
    "2.x": Dialect.FLUX,
    "3.x": Dialect.SQL,
    "iotdb": Dialect.IOTDB,
    "iotdb_sql": Dialect.IOTDB,
}


class SuggestionCategory(str, Enum):
    """Kinds of completion candidates surfaced to the editor."""

    KEYWORD = "keyword"
    FUNCTION = "function"
    TABLE = "table"
    FIELD = "field"
    TAG = "tag"


PRIORITIES: Mapping[SuggestionCategory, int] = {
    SuggestionCategory.KEYWORD: 1,
    SuggestionCategory.FUNCTION: 2,
    SuggestionCategory.TABLE: 3,
    SuggestionCategory.FIELD: 4,
    SuggestionCategory.TAG: 5,
}


@dataclass(slots=True)
class SuggestionItem:
    """Single completion candidate."""

    label: str
    value: str
    category: SuggestionCategory
    detail: str
    documentation: str
    insert_text: str
    is_snippet: bool
    priority: int
    sort_key: str

    @classmethod
    def build(
        cls,
        label: str,
        category: SuggestionCategory,
        *,
        detail: str,
        documentation: str,
        value: str | None = None,
        insert_text: str | None = None,
    ) -> "SuggestionItem":
        """Create an item with priority and sort key derived from the category."""

        value = value if value is not None else label
        insert_text = insert_text if insert_text is not None else value
        priority = PRIORITIES[category]
        return cls(
            label=label,
            value=value,
            category=category,
            detail=detail,
            documentation=documentation,
            insert_text=insert_text,
            is_snippet=(
                category is SuggestionCategory.FUNCTION
                and _PLACEHOLDER_RE.search(insert_text) is not None
            ),
            priority=priority,
            sort_key=f"{priority}_{label}",
        )


@dataclass(frozen=True, slots=True)
class SuggestionContext:
    """Editor snapshot for one suggestion request."""

    full_text: str
    line_text: str
    word_before_cursor: str
    cursor_offset: int

    @classmethod
    def from_buffer(cls, buffer: str, cursor: int | None = None) -> "SuggestionContext":
        """Derive line and partial word from a buffer and an absolute cursor."""

        cursor = len(buffer) if cursor is None else max(0, min(cursor, len(buffer)))
        before = buffer[:cursor]
        line_text = before.rsplit("\n", 1)[-1]
        match = _WORD_RE.search(line_text)
        word = match.group(0) if match else ""
        return cls(
            full_text=buffer,
            line_text=line_text,
            word_before_cursor=word,
            cursor_offset=cursor,
        )

    @property
    def clamped_offset(self) -> int:
        """Cursor offset forced into the bounds of ``full_text``."""

        return max(0, min(self.cursor_offset, len(self.full_text)))


__all__ = [
    "Dialect",
    "PRIORITIES",
    "SuggestionCategory",
    "SuggestionContext",
    "SuggestionItem",
]
