"""Heuristic classification of the cursor context.

The rules below look at raw text with regular expressions rather than a
parsed statement. They are ordered tables so individual heuristics can be
adjusted without touching ranking or schema fetching:

* ``TABLE_RULES`` decide whether table names are worth offering. They are
  permissive.
* ``COLUMN_RULES`` decide whether fields and tags apply. ``SELECT``
  counts only once a ``FROM`` follows it, so ``"SELECT "`` alone offers no
  columns.
* ``TABLE_NAME_RULES`` pull the target table out of the full text, first
  match wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Sequence

from .models import SuggestionContext

_IDENT = r'(?:"[^"]+"|`[^`]+`|[\w\-]+)'

# Clause words a loose FROM/JOIN pattern can capture while the query is half typed.
_CLAUSE_WORDS = frozenset(
    {
        "SELECT", "FROM", "WHERE", "GROUP", "ORDER", "BY", "HAVING", "LIMIT",
        "OFFSET", "SLIMIT", "SOFFSET", "AS", "ON", "JOIN", "AND", "OR", "NOT",
        "INTO", "FILL", "ALIGN", "UNION",
    }
)


@dataclass(frozen=True, slots=True)
class ContextRule:
    """Named predicate over a suggestion context."""

    name: str
    predicate: Callable[[SuggestionContext], bool]


def _after_from(context: SuggestionContext) -> bool:
    return re.search(r'\bFROM\s+[\w."`\-]*$', context.line_text, re.IGNORECASE) is not None


def _schema_listing(context: SuggestionContext) -> bool:
    line = context.line_text.upper()
    return re.search(r"\bSHOW\s+(MEASUREMENTS|SERIES|TABLES|DEVICES|TIMESERIES)\b", line) is not None


def _blank_line(context: SuggestionContext) -> bool:
    return not context.line_text.strip()


def _after_into(context: SuggestionContext) -> bool:
    return re.search(r"\bINTO\s+$", context.line_text, re.IGNORECASE) is not None


def _from_with_partial_word(context: SuggestionContext) -> bool:
    if not context.word_before_cursor:
        return False
    return re.search(r"\bFROM\b", context.line_text, re.IGNORECASE) is not None


TABLE_RULES: tuple[ContextRule, ...] = (
    ContextRule("after-from", _after_from),
    ContextRule("schema-listing", _schema_listing),
    ContextRule("blank-line", _blank_line),
    ContextRule("after-into", _after_into),
    ContextRule("from-with-partial-word", _from_with_partial_word),
)


def _inside_select_list(context: SuggestionContext) -> bool:
    text = context.full_text.upper()
    cursor = context.clamped_offset
    select_pos = -1
    for match in re.finditer(r"\bSELECT\b", text[:cursor]):
        select_pos = match.end()
    if select_pos < 0:
        return False
    from_match = re.compile(r"\bFROM\b").search(text, select_pos)
    if from_match is None:
        return False
    return select_pos <= cursor <= from_match.start()


def _filter_or_grouping_clause(context: SuggestionContext) -> bool:
    line = context.line_text.upper()
    return re.search(r"\b(WHERE|GROUP\s+BY|HAVING|ORDER\s+BY)\b", line) is not None


COLUMN_RULES: tuple[ContextRule, ...] = (
    ContextRule("select-list", _inside_select_list),
    ContextRule("filter-or-grouping", _filter_or_grouping_clause),
)


@dataclass(frozen=True, slots=True)
class TableNameRule:
    """Pattern plus the function turning its match into a table name."""

    name: str
    pattern: re.Pattern[str]
    extract: Callable[[re.Match[str]], str]


def _unquote(identifier: str) -> str:
    identifier = identifier.strip()
    if len(identifier) >= 2 and identifier[0] == identifier[-1] and identifier[0] in "\"`'":
        return identifier[1:-1]
    return identifier


def _last_segment(match: re.Match[str]) -> str:
    segments = re.findall(_IDENT, match.group(1))
    return _unquote(segments[-1]) if segments else ""


def _first_group(match: re.Match[str]) -> str:
    return _unquote(match.group(1))


TABLE_NAME_RULES: tuple[TableNameRule, ...] = (
    TableNameRule(
        "iotdb-path",
        re.compile(r"\bFROM\s+(root(?:\.(?:`[^`]+`|[\w*]+))+)", re.IGNORECASE),
        lambda match: match.group(1),
    ),
    TableNameRule(
        "qualified",
        re.compile(rf"\bFROM\s+((?:{_IDENT}\.)+{_IDENT})", re.IGNORECASE),
        _last_segment,
    ),
    TableNameRule(
        "aliased",
        re.compile(rf"\bFROM\s+({_IDENT})\s+AS\s+\w+", re.IGNORECASE),
        _first_group,
    ),
    TableNameRule(
        "plain",
        re.compile(rf"\bFROM\s+({_IDENT})", re.IGNORECASE),
        _first_group,
    ),
    TableNameRule(
        "join",
        re.compile(rf"\bJOIN\s+({_IDENT})", re.IGNORECASE),
        _first_group,
    ),
)


def _any(rules: Sequence[ContextRule], context: SuggestionContext) -> bool:
    return any(rule.predicate(context) for rule in rules)


def should_suggest_tables(context: SuggestionContext) -> bool:
    """Return True when table/measurement names should be offered."""

    return _any(TABLE_RULES, context)


def should_suggest_columns(context: SuggestionContext) -> bool:
    """Return True when field and tag names should be offered."""

    return _any(COLUMN_RULES, context)


def extract_table_name(text: str) -> str | None:
    """Return the first table referenced by ``text``, or ``None``."""

    for rule in TABLE_NAME_RULES:
        for match in rule.pattern.finditer(text):
            name = rule.extract(match)
            if name and name.upper() not in _CLAUSE_WORDS:
                return name
    return None


@dataclass(frozen=True, slots=True)
class ContextClassification:
    """Outcome of classifying one suggestion context."""

    tables: bool
    columns: bool
    table_name: str | None


def classify(context: SuggestionContext) -> ContextClassification:
    """Classify a context; the table name is only extracted when columns apply."""

    columns = should_suggest_columns(context)
    return ContextClassification(
        tables=should_suggest_tables(context),
        columns=columns,
        table_name=extract_table_name(context.full_text) if columns else None,
    )


__all__ = [
    "COLUMN_RULES",
    "ContextClassification",
    "ContextRule",
    "TABLE_NAME_RULES",
    "TABLE_RULES",
    "TableNameRule",
    "classify",
    "extract_table_name",
    "should_suggest_columns",
    "should_suggest_tables",
]
