"""Tests for leaderboard ranking, filtering and persistence."""

from __future__ import annotations

import json

from trivia_quiz.data_models import LeaderboardEntry
from trivia_quiz.storage.leaderboard import DEFAULT_STORAGE_KEY, LeaderboardStore


def _entry(name: str, score: int, total: int = 10, category: str = "science") -> LeaderboardEntry:
    return LeaderboardEntry(name=name, score=score, total=total, category=category)


def test_query_ranks_by_percentage(leaderboard):
    """A (90%), B (70%), C (80%) inserted in that order come back as A, C, B."""
    leaderboard.record(_entry("A", 9))
    leaderboard.record(_entry("B", 7))
    leaderboard.record(_entry("C", 8))

    assert [entry.name for entry in leaderboard.query("all")] == ["A", "C", "B"]


def test_equal_percentage_breaks_ties_on_raw_score(leaderboard):
    leaderboard.record(_entry("short", 9, total=10))
    leaderboard.record(_entry("long", 18, total=20))

    assert [entry.name for entry in leaderboard.query("all")] == ["long", "short"]


def test_full_ties_keep_insertion_order(leaderboard):
    for name in ["first", "second", "third"]:
        leaderboard.record(_entry(name, 8))

    ranked = leaderboard.query("all")
    assert [entry.name for entry in ranked] == ["first", "second", "third"]
    assert [entry.seq for entry in ranked] == [0, 1, 2]


def test_query_is_capped_but_storage_keeps_everything(leaderboard):
    for idx in range(15):
        leaderboard.record(_entry(f"p{idx}", idx % 11))

    assert len(leaderboard.query("all")) == 10
    assert len(leaderboard.load()) == 15


def test_sports_filter_matches_football_and_cricket(leaderboard):
    leaderboard.record(_entry("sci", 10, category="science"))
    leaderboard.record(_entry("foot", 6, category="football"))
    leaderboard.record(_entry("crick", 8, category="cricket"))

    assert [entry.name for entry in leaderboard.query("sports")] == ["crick", "foot"]


def test_category_filters(leaderboard):
    leaderboard.record(_entry("sci", 5, category="Science"))
    leaderboard.record(_entry("maths", 6, category="mathematics"))
    leaderboard.record(_entry("geo", 7, category="geography"))

    assert [entry.name for entry in leaderboard.query("science")] == ["sci"]
    assert [entry.name for entry in leaderboard.query("math")] == ["maths"]
    assert len(leaderboard.query("unknown-filter")) == 3


def test_clear_empties_the_leaderboard(leaderboard, storage):
    leaderboard.record(_entry("A", 9))
    leaderboard.clear()

    assert leaderboard.query("all") == []
    assert storage.get_item(DEFAULT_STORAGE_KEY) is None


def test_record_stamps_the_date(leaderboard):
    stored = leaderboard.record(_entry("A", 9))
    assert stored.date == "2026-10-19"


def test_malformed_storage_reads_as_empty(leaderboard, storage):
    storage.set_item(DEFAULT_STORAGE_KEY, "{not json")
    assert leaderboard.query("all") == []

    leaderboard.record(_entry("A", 9))
    assert [entry.name for entry in leaderboard.query("all")] == ["A"]


def test_unreadable_rows_are_skipped(leaderboard, storage):
    rows = [
        "just a string",
        {"name": "Cheat", "score": 11, "total": 10, "category": "science"},
        {"name": "Fine", "score": 4, "total": 10, "category": "science"},
    ]
    storage.set_item(DEFAULT_STORAGE_KEY, json.dumps(rows))

    assert [entry.name for entry in leaderboard.query("all")] == ["Fine"]


def test_externally_written_rows_are_reranked(leaderboard, storage):
    rows = [
        {"name": "low", "score": 2, "total": 10, "category": "science"},
        {"name": "high", "score": 9, "total": 10, "category": "science"},
    ]
    storage.set_item(DEFAULT_STORAGE_KEY, json.dumps(rows))

    assert [entry.name for entry in leaderboard.query("all")] == ["high", "low"]


def test_missing_total_is_shown_as_unknown(leaderboard, storage):
    rows = [
        {"name": "Old", "score": 5, "category": "science", "date": "1/2/2024"},
        {"name": "New", "score": 1, "total": 10, "category": "science"},
    ]
    storage.set_item(DEFAULT_STORAGE_KEY, json.dumps(rows))

    display = leaderboard.rows("all")
    assert [row.name for row in display] == ["New", "Old"], "Unknown totals rank as 0%"
    assert display[1].score_display == "5/?"
    assert display[1].date == "1/2/2024"


def test_legacy_rows_rank_ahead_of_sequenced_ties(leaderboard, storage):
    storage.set_item(
        DEFAULT_STORAGE_KEY,
        json.dumps([{"name": "legacy", "score": 8, "total": 10, "category": "science"}]),
    )
    leaderboard.record(_entry("new", 8))

    assert [entry.name for entry in leaderboard.query("all")] == ["legacy", "new"]


def test_extra_fields_survive_a_rewrite(leaderboard, storage):
    storage.set_item(
        DEFAULT_STORAGE_KEY,
        json.dumps([{"name": "Old", "score": 3, "total": 10, "category": "science", "avatar": "owl"}]),
    )
    leaderboard.record(_entry("New", 4))

    raw = json.loads(storage.get_item(DEFAULT_STORAGE_KEY))
    old = next(item for item in raw if item["name"] == "Old")
    assert old["avatar"] == "owl"


def test_rows_use_category_labels(leaderboard):
    leaderboard.record(_entry("A", 9, category="football"))
    leaderboard.record(_entry("B", 8, category="customQuiz"))
    leaderboard.record(_entry("C", 7, category=""))

    display = leaderboard.rows("all")
    assert [row.rank for row in display] == [1, 2, 3]
    assert [row.category_label for row in display] == ["Football", "customQuiz", "—"]
    assert display[0].score_display == "9/10"


def test_custom_storage_key_and_limit(storage):
    store = LeaderboardStore(storage, storage_key="otherBoard", display_limit=2)
    for score in (3, 9, 6):
        store.record(_entry(f"s{score}", score))

    assert [entry.name for entry in store.query("all")] == ["s9", "s6"]
    assert storage.get_item(DEFAULT_STORAGE_KEY) is None
    assert storage.get_item("otherBoard") is not None


def test_null_text_fields_are_read_as_blank(leaderboard, storage):
    rows = [{"name": None, "score": 6, "total": 10, "category": None, "date": None}]
    storage.set_item(DEFAULT_STORAGE_KEY, json.dumps(rows))

    display = leaderboard.rows("all")
    assert len(display) == 1, "Rows with null name or category are still shown"
    assert display[0].name == ""
    assert display[0].category_label == "—"
    assert display[0].score_display == "6/10"


def test_explicit_zero_limit_returns_nothing(leaderboard):
    leaderboard.record(_entry("A", 9))

    assert leaderboard.query("all", limit=0) == []
    assert [entry.name for entry in leaderboard.query("all", limit=None)] == ["A"]
