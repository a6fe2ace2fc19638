"""Shared fixtures for quiz tests."""

from __future__ import annotations

import random
import tempfile
from datetime import date
from pathlib import Path

import pytest

from trivia_quiz.bank import QuestionBank
from trivia_quiz.data_models import Question
from trivia_quiz.quiz.scheduling import ManualClock, Scheduler
from trivia_quiz.quiz.session import QuizController
from trivia_quiz.storage import LeaderboardStore, LocalStorage


def make_questions(category: str, count: int) -> list[Question]:
    """Build `count` distinct questions whose first option is always correct."""
    return [
        Question(
            text=f"{category} question {idx}",
            options=(f"{category}-right-{idx}", f"wrong-a-{idx}", f"wrong-b-{idx}", f"wrong-c-{idx}"),
            answer=f"{category}-right-{idx}",
        )
        for idx in range(count)
    ]


@pytest.fixture
def sample_bank():
    """Bank with one large pool, two small sports pools and an empty one."""
    return QuestionBank(
        {
            "science": make_questions("science", 12),
            "football": make_questions("football", 3),
            "cricket": make_questions("cricket", 4),
            "music": [],
        }
    )


@pytest.fixture
def temp_storage_dir():
    """Create a temporary directory for local storage files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def storage(temp_storage_dir):
    return LocalStorage(temp_storage_dir / "local_storage.json")


@pytest.fixture
def leaderboard(storage):
    """Leaderboard with a fixed date so stored rows are predictable."""
    return LeaderboardStore(storage, today=lambda: date(2026, 10, 19))


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def controller(sample_bank, leaderboard, clock):
    """Controller driven by a manual clock and a seeded RNG."""
    return QuizController(
        sample_bank,
        leaderboard,
        scheduler=Scheduler(clock),
        rng=random.Random(1234),
        questions_per_round=10,
        advance_delay=1.0,
    )
