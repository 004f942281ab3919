"""Tests for the cursor context heuristics."""

from __future__ import annotations

import pytest

from tsdbui.suggest import (
    SuggestionContext,
    classify,
    extract_table_name,
    should_suggest_columns,
    should_suggest_tables,
)


def _ctx(buffer: str, cursor: int | None = None) -> SuggestionContext:
    return SuggestionContext.from_buffer(buffer, cursor)


def test_from_buffer_splits_line_and_word() -> None:
    context = _ctx("SELECT *\nFROM cp")

    assert context.line_text == "FROM cp"
    assert context.word_before_cursor == "cp"
    assert context.cursor_offset == len("SELECT *\nFROM cp")


def test_from_buffer_clamps_cursor() -> None:
    assert _ctx("SELECT", -4).cursor_offset == 0
    assert _ctx("SELECT", 99).cursor_offset == 6


def test_clamped_offset_tolerates_inconsistent_snapshots() -> None:
    context = SuggestionContext(full_text="SELECT", line_text="SELECT", word_before_cursor="", cursor_offset=40)

    assert context.clamped_offset == 6


@pytest.mark.parametrize(
    "line",
    [
        "SELECT * FROM ",
        "SELECT * FROM cp",
        "select * from ",
        "SHOW MEASUREMENTS",
        "show tables",
        "",
        "   ",
        "SELECT mean(value) INTO ",
        "SELECT * FROM cpu WHERE ho",
    ],
)
def test_table_suggestions_triggered(line: str) -> None:
    assert should_suggest_tables(_ctx(line)) is True


@pytest.mark.parametrize(
    "line",
    [
        "SELECT ",
        "SELECT * FROM cpu WHERE ",
        "SELECT mean(value) INTO cq",
    ],
)
def test_table_suggestions_not_triggered(line: str) -> None:
    assert should_suggest_tables(_ctx(line)) is False


def test_select_without_from_offers_no_columns() -> None:
    context = _ctx("SELECT ")

    assert should_suggest_columns(context) is False


def test_cursor_between_select_and_from_offers_columns() -> None:
    buffer = "SELECT  FROM cpu"

    context = _ctx(buffer, len("SELECT "))

    assert should_suggest_columns(context) is True
    assert classify(context).table_name == "cpu"


@pytest.mark.parametrize(
    "buffer",
    [
        "SELECT * FROM cpu WHERE ",
        "SELECT mean(v) FROM cpu GROUP BY ",
        "SELECT count(v) FROM cpu GROUP BY host HAVING ",
        "SELECT * FROM cpu ORDER BY ",
    ],
)
def test_filter_and_grouping_clauses_offer_columns(buffer: str) -> None:
    assert should_suggest_columns(_ctx(buffer)) is True


def test_column_clause_on_previous_line_is_ignored() -> None:
    context = _ctx("SELECT * FROM cpu WHERE host = 'a'\nLIMIT ")

    assert should_suggest_columns(context) is False


def test_multiline_query_uses_current_line_for_where() -> None:
    classification = classify(_ctx("SELECT *\nFROM cpu\nWHERE "))

    assert classification.columns is True
    assert classification.table_name == "cpu"


def test_classify_skips_table_name_when_columns_do_not_apply() -> None:
    classification = classify(_ctx("SELECT * FROM "))

    assert classification.tables is True
    assert classification.columns is False
    assert classification.table_name is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("SELECT * FROM measurements AS m WHERE m.value > 1", "measurements"),
        ("SELECT * FROM cpu WHERE host = 'a'", "cpu"),
        ("SELECT * FROM telegraf.autogen.cpu WHERE ", "cpu"),
        ('SELECT * FROM "telegraf"."autogen"."disk io" WHERE ', "disk io"),
        ('SELECT * FROM "my-measurement" WHERE ', "my-measurement"),
        ("SELECT s1 FROM root.sg1.d1 WHERE time > 0", "root.sg1.d1"),
        ("SELECT a.x FROM (SELECT 1) JOIN metrics ON 1 = 1", "metrics"),
        ("select usage from Cpu where ", "Cpu"),
    ],
)
def test_extract_table_name(text: str, expected: str) -> None:
    assert extract_table_name(text) == expected


def test_extract_table_name_skips_keywords() -> None:
    assert extract_table_name("SELECT * FROM WHERE") is None
    assert extract_table_name("SELECT value") is None
