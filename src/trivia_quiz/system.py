from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

from trivia_quiz.bank import QuestionBank, load_question_bank
from trivia_quiz.categories import MIXED_CATEGORY
from trivia_quiz.config import Settings, load_settings
from trivia_quiz.preferences import ThemePreference
from trivia_quiz.quiz.scheduling import Clock, Scheduler
from trivia_quiz.quiz.session import QuizController
from trivia_quiz.storage import LeaderboardStore, LocalStorage
from trivia_quiz.utils.logging import configure_logging

logger = logging.getLogger(__name__)


class QuizSystem:
    """
    Facade wiring configuration, storage, the question bank and controllers.

    Both front ends (the Typer CLI and the Streamlit app) build one of these
    and ask it for a fresh `QuizController` per player. Storage-backed pieces
    are shared: the leaderboard and the theme preference read the same local
    storage file.

    Attributes
    ----------
    settings : Settings
        Validated configuration, usually from config/default.yaml.
    storage : LocalStorage
        Key/value file standing in for the browser's local storage.
    bank : QuestionBank
        Static questions keyed by category.
    leaderboard : LeaderboardStore
        Ranked history of finished rounds.
    theme : ThemePreference
        Persisted dark/light mode, read once here.
    """

    def __init__(self, settings: Settings, bank: Optional[QuestionBank] = None):
        self.settings = settings
        configure_logging(settings.logging.level, settings.logging.use_json)

        self.storage = LocalStorage(settings.paths.storage_file)
        self.bank = bank if bank is not None else load_question_bank(settings.paths.question_bank)
        self.leaderboard = LeaderboardStore(
            self.storage,
            storage_key=settings.leaderboard.storage_key,
            display_limit=settings.leaderboard.display_limit,
            date_format=settings.leaderboard.date_format,
        )
        self.theme = ThemePreference(self.storage, storage_key=settings.theme.storage_key)
        logger.info(
            "Quiz system ready: %d categories, storage at %s",
            len(self.bank),
            settings.paths.storage_file,
        )

    @classmethod
    def from_config(cls, config_path: Optional[Path] = None) -> "QuizSystem":
        """Load settings (see `load_settings`) and build the system from them."""
        return cls(load_settings(config_path))

    def new_controller(
        self,
        *,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> QuizController:
        """Create a controller for one player with its own scheduler."""
        quiz = self.settings.quiz
        return QuizController(
            self.bank,
            self.leaderboard,
            scheduler=Scheduler(clock),
            rng=rng,
            questions_per_round=quiz.questions_per_round,
            advance_delay=quiz.advance_delay_seconds,
            celebrate_threshold=quiz.celebrate_threshold,
        )

    def categories(self) -> list[str]:
        """Playable category keys: every bank category plus `mixed` when the bank has questions."""
        keys = [key for key in self.bank.categories() if key != MIXED_CATEGORY and self.bank.pool(key)]
        if keys:
            keys.append(MIXED_CATEGORY)
        return keys
