from __future__ import annotations

import json
from datetime import date
from typing import Callable, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from trivia_quiz.categories import category_label, filter_categories
from trivia_quiz.data_models import LeaderboardEntry, LeaderboardRow
from trivia_quiz.quiz.results import score_percentage
from trivia_quiz.storage.local_storage import LocalStorage
from trivia_quiz.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "ultimateQuizLeaderboard"


def ranking_key(entry: LeaderboardEntry) -> Tuple[int, int, int]:
    """
    Sort key: percentage desc, raw score desc, insertion sequence asc.

    Rows written without a sequence number predate sequencing, so they rank
    ahead of sequenced ties; `sorted` is stable and keeps their stored order.
    """
    percentage = score_percentage(entry.score, entry.total or 0)
    seq = entry.seq if entry.seq is not None else -1
    return (-percentage, -entry.score, seq)


def rank_entries(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
    return sorted(entries, key=ranking_key)


class LeaderboardStore:
    """
    Ranked history of finished rounds kept in local storage.

    The whole list lives as one JSON array under `storage_key`. Writes are a
    plain read-modify-write; only one session writes at a time.

    Examples
    --------
    >>> store = LeaderboardStore(LocalStorage(Path("data/local_storage.json")))
    >>> store.record(LeaderboardEntry(name="Asha", score=9, total=10, category="science"))
    >>> [entry.name for entry in store.query("science")]
    ['Asha']
    """

    def __init__(
        self,
        storage: LocalStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        display_limit: int = 10,
        date_format: str = "%Y-%m-%d",
        today: Optional[Callable[[], date]] = None,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self.display_limit = display_limit
        self.date_format = date_format
        self._today = today or date.today

    def load(self) -> List[LeaderboardEntry]:
        """Read stored entries in stored order, skipping anything unreadable."""
        raw = self.storage.get_item(self.storage_key)
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("leaderboard.malformed_json", key=self.storage_key, error=str(exc))
            return []
        if not isinstance(payload, list):
            logger.warning("leaderboard.not_a_list", key=self.storage_key)
            return []

        entries: List[LeaderboardEntry] = []
        for idx, item in enumerate(payload):
            if not isinstance(item, dict):
                logger.warning("leaderboard.skipped_entry", index=idx, reason="not an object")
                continue
            try:
                entries.append(LeaderboardEntry.model_validate(item))
            except ValidationError as exc:
                logger.warning("leaderboard.skipped_entry", index=idx, reason=str(exc))
        return entries

    def _save(self, entries: List[LeaderboardEntry]) -> None:
        serialized = [entry.model_dump(exclude_none=True) for entry in entries]
        self.storage.set_item(self.storage_key, json.dumps(serialized, ensure_ascii=False))

    def record(self, entry: LeaderboardEntry) -> LeaderboardEntry:
        """Append an entry with the next sequence number, re-rank the full list, and persist."""
        entries = self.load()
        next_seq = max((e.seq for e in entries if e.seq is not None), default=-1) + 1
        updates = {"seq": next_seq}
        if not entry.date:
            updates["date"] = self._today().strftime(self.date_format)
        stored = entry.model_copy(update=updates)
        entries.append(stored)
        self._save(rank_entries(entries))
        logger.info(
            "leaderboard.recorded",
            name=stored.name,
            score=stored.score,
            total=stored.total,
            category=stored.category,
            seq=stored.seq,
        )
        return stored

    def record_result(self, name: str, score: int, total: int, category: str) -> LeaderboardEntry:
        return self.record(LeaderboardEntry(name=name, score=score, total=total, category=category))

    def query(self, filter_name: str = "all", limit: Optional[int] = None) -> List[LeaderboardEntry]:
        """
        Ranked entries matching a filter, truncated for display.

        The stored list is re-ranked on every read so hand-edited storage still
        comes back in order. Filters other than the known ones apply no filtering.
        """
        ranked = rank_entries(self.load())
        accepted = filter_categories(filter_name)
        if accepted is not None:
            ranked = [entry for entry in ranked if (entry.category or "").lower() in accepted]
        return ranked[: self.display_limit if limit is None else limit]

    def rows(self, filter_name: str = "all") -> List[LeaderboardRow]:
        """Display rows for the leaderboard table."""
        rows: List[LeaderboardRow] = []
        for rank, entry in enumerate(self.query(filter_name), start=1):
            total = "?" if not entry.total else str(entry.total)
            rows.append(
                LeaderboardRow(
                    rank=rank,
                    name=entry.name,
                    category_label=category_label(entry.category, fallback="—"),
                    score_display=f"{entry.score}/{total}",
                    date=entry.date,
                )
            )
        return rows

    def clear(self) -> None:
        """Erase every stored entry. Callers confirm with the player first."""
        self.storage.remove_item(self.storage_key)
        logger.info("leaderboard.cleared", key=self.storage_key)
