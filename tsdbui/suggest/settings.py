"""Tunables for the suggestion engine."""

from __future__ import annotations

from typing import Mapping

from pydantic import BaseModel, Field

from .cache import DEFAULT_TTL_SECONDS
from .models import SuggestionCategory

MAX_SUGGESTIONS = 50

DEFAULT_DETAIL_LABELS: Mapping[SuggestionCategory, str] = {
    SuggestionCategory.KEYWORD: "Keyword",
    SuggestionCategory.FUNCTION: "Function",
    SuggestionCategory.TABLE: "Measurement",
    SuggestionCategory.FIELD: "Field",
    SuggestionCategory.TAG: "Tag",
}


class SuggestionConfig(BaseModel):
    """Limits, matching mode, cache lifetime and fallbacks for suggestions."""

    max_items: int = Field(default=MAX_SUGGESTIONS, ge=1)
    case_sensitive: bool = False
    min_chars: int = Field(default=0, ge=0)
    cache_ttl_seconds: float = Field(default=DEFAULT_TTL_SECONDS, gt=0)
    fallback_fields: tuple[str, ...] = ("time", "value")
    fallback_tags: tuple[str, ...] = ("host", "region")
    detail_labels: dict[SuggestionCategory, str] = Field(
        default_factory=lambda: dict(DEFAULT_DETAIL_LABELS)
    )

    def detail_for(self, category: SuggestionCategory) -> str:
        """Localizable short label shown next to a suggestion."""

        return self.detail_labels.get(category) or DEFAULT_DETAIL_LABELS[category]


__all__ = ["DEFAULT_DETAIL_LABELS", "MAX_SUGGESTIONS", "SuggestionConfig"]
