"""Context-aware query autocompletion."""

from __future__ import annotations

from .cache import ColumnSet, SchemaCache, TTLCache
from .context import classify, extract_table_name, should_suggest_columns, should_suggest_tables
from .models import Dialect, SuggestionCategory, SuggestionContext, SuggestionItem
from .schema import SchemaFetcher, SchemaRequest, SchemaSource
from .service import SmartSuggestionService
from .settings import SuggestionConfig
from .vocabulary import vocabulary_for

__all__ = [
    "ColumnSet",
    "Dialect",
    "SchemaCache",
    "SchemaFetcher",
    "SchemaRequest",
    "SchemaSource",
    "SmartSuggestionService",
    "SuggestionCategory",
    "SuggestionConfig",
    "SuggestionContext",
    "SuggestionItem",
    "TTLCache",
    "classify",
    "extract_table_name",
    "should_suggest_columns",
    "should_suggest_tables",
    "vocabulary_for",
]
