from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from trivia_quiz.bank import QuestionBank
from trivia_quiz.categories import category_label
from trivia_quiz.data_models import LeaderboardRow, Question
from trivia_quiz.quiz.builder import DEFAULT_ROUND_SIZE, build_question_set, shuffled
from trivia_quiz.quiz.results import QuizResult, compute_result
from trivia_quiz.quiz.scheduling import ScheduledCall, Scheduler

if TYPE_CHECKING:
    from trivia_quiz.storage.leaderboard import LeaderboardStore

logger = logging.getLogger(__name__)

NAME_REQUIRED = "Please enter your name."
CATEGORY_REQUIRED = "Please choose a category from the home screen."
NO_QUESTIONS = "No questions available for this category."
CORRECT_FEEDBACK = "Correct!"


class QuizInputError(ValueError):
    """Player input that blocks the round from starting; the message is shown as-is."""


class Screen(str, Enum):
    HOME = "home"
    NAME = "name"
    QUIZ = "quiz"
    RESULT = "result"
    LEADERBOARD = "leaderboard"


class Phase(str, Enum):
    AWAITING_ANSWER = "awaiting_answer"
    ANSWERED = "answered"
    FINISHED = "finished"


class ScreenChange(BaseModel):
    kind: Literal["screen"] = "screen"
    screen: Screen
    category: Optional[str] = None
    category_label: str = ""
    player_name: str = ""


class QuestionView(BaseModel):
    """Everything the quiz screen shows for the current question."""

    kind: Literal["question"] = "question"
    number: int
    total: int
    text: str
    options: List[str]
    score: int
    progress: float = Field(ge=0.0, le=1.0)
    player_name: str
    category_label: str


class AnswerFeedback(BaseModel):
    """Outcome of the first selection on a question, with per-option highlight flags."""

    kind: Literal["feedback"] = "feedback"
    selected: str
    answer: str
    is_correct: bool
    option_flags: Dict[str, Optional[Literal["correct", "incorrect"]]]
    message: str
    score: int


class ResultView(BaseModel):
    kind: Literal["result"] = "result"
    result: QuizResult


class LeaderboardView(BaseModel):
    kind: Literal["leaderboard"] = "leaderboard"
    filter: str
    rows: List[LeaderboardRow]


ViewUpdate = Union[ScreenChange, QuestionView, AnswerFeedback, ResultView, LeaderboardView]


@dataclass
class QuizSession:
    """Mutable state of one attempt; never persisted."""

    category: str
    category_label: str
    player_name: str
    questions: List[Question]
    started_at: float
    index: int = 0
    score: int = 0
    phase: Phase = Phase.AWAITING_ANSWER
    displayed_options: List[str] = field(default_factory=list)
    selected: Optional[str] = None
    pending_advance: Optional[ScheduledCall] = None

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self.index < self.total:
            return self.questions[self.index]
        return None

    @property
    def progress(self) -> float:
        return self.index / self.total if self.total else 0.0


class QuizController:
    """
    Screen controller driving the quiz state machine.

    Owns the current `QuizSession` and turns discrete front-end events
    (category chosen, name submitted, option chosen, navigation) into view
    updates. Each event method returns its update and also hands it to every
    subscribed listener. The one deferred transition, advancing after an
    answer, goes through the `Scheduler` and fires on `tick()`.
    """

    def __init__(
        self,
        bank: QuestionBank,
        leaderboard: Optional["LeaderboardStore"] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        questions_per_round: int = DEFAULT_ROUND_SIZE,
        advance_delay: float = 1.0,
        celebrate_threshold: int = 70,
    ):
        self.bank = bank
        self.leaderboard = leaderboard
        self.scheduler = scheduler or Scheduler()
        self.rng = rng or random.Random()
        self.questions_per_round = questions_per_round
        self.advance_delay = advance_delay
        self.celebrate_threshold = celebrate_threshold

        self.screen = Screen.HOME
        self.category: Optional[str] = None
        self.category_label = ""
        self.player_name = ""
        self.session: Optional[QuizSession] = None
        self.last_result: Optional[QuizResult] = None
        self._listeners: List[Callable[[ViewUpdate], None]] = []

    def subscribe(self, listener: Callable[[ViewUpdate], None]) -> None:
        self._listeners.append(listener)

    def _emit(self, update: ViewUpdate) -> ViewUpdate:
        for listener in self._listeners:
            listener(update)
        return update

    def _show(self, screen: Screen) -> ScreenChange:
        self.screen = screen
        return self._emit(
            ScreenChange(
                screen=screen,
                category=self.category,
                category_label=self.category_label,
                player_name=self.player_name,
            )
        )

    def _discard_session(self) -> None:
        if self.session is not None and self.session.pending_advance is not None:
            self.session.pending_advance.cancel()
        self.session = None

    # Navigation -----------------------------------------------------------

    def go_home(self) -> ScreenChange:
        self._discard_session()
        self.category = None
        self.category_label = ""
        self.player_name = ""
        return self._show(Screen.HOME)

    def change_category(self) -> ScreenChange:
        return self.go_home()

    def select_category(self, category: str) -> ScreenChange:
        """Remember the chosen category and move to name entry, keeping any name already typed."""
        self._discard_session()
        self.category = category
        self.category_label = category_label(category)
        return self._show(Screen.NAME)

    def play_again(self) -> ScreenChange:
        """Return to name entry with the same category and player name prefilled."""
        self._discard_session()
        return self._show(Screen.NAME)

    # Round lifecycle -------------------------------------------------------

    def submit_name(self, name: Optional[str]) -> QuestionView:
        """
        Validate the name and category, build the question set, and start the round.

        Raises QuizInputError (leaving the controller on the name screen) for a
        blank name, a missing category, or a category with no questions.
        """
        player_name = (name or "").strip()
        if not player_name:
            raise QuizInputError(NAME_REQUIRED)
        self.player_name = player_name
        if not self.category:
            raise QuizInputError(CATEGORY_REQUIRED)

        questions = build_question_set(
            self.bank, self.category, size=self.questions_per_round, rng=self.rng
        )
        if not questions:
            raise QuizInputError(NO_QUESTIONS)

        self._discard_session()
        self.session = QuizSession(
            category=self.category,
            category_label=self.category_label,
            player_name=player_name,
            questions=questions,
            started_at=self.scheduler.clock.now(),
        )
        logger.info(
            "Started round for %s in %s with %d questions",
            player_name,
            self.category,
            len(questions),
        )
        self._show(Screen.QUIZ)
        return self._present_question()

    def _present_question(self) -> QuestionView:
        session = self.session
        question = session.current_question
        session.phase = Phase.AWAITING_ANSWER
        session.selected = None
        session.pending_advance = None
        session.displayed_options = shuffled(question.options, self.rng)
        return self._emit(
            QuestionView(
                number=session.index + 1,
                total=session.total,
                text=question.text,
                options=list(session.displayed_options),
                score=session.score,
                progress=session.progress,
                player_name=session.player_name,
                category_label=session.category_label,
            )
        )

    def current_view(self) -> Optional[QuestionView]:
        """Rebuild the view for the question on screen without reshuffling its options."""
        session = self.session
        if session is None or session.current_question is None:
            return None
        return QuestionView(
            number=session.index + 1,
            total=session.total,
            text=session.current_question.text,
            options=list(session.displayed_options),
            score=session.score,
            progress=session.progress,
            player_name=session.player_name,
            category_label=session.category_label,
        )

    def select_option(self, option: str) -> Optional[AnswerFeedback]:
        """
        Score the first selection for the current question and lock it.

        Later selections (until the scheduled advance fires) and selections
        outside an active question return None and change nothing.
        """
        session = self.session
        if session is None or session.phase is not Phase.AWAITING_ANSWER:
            return None
        if option not in session.displayed_options:
            raise ValueError(f"{option!r} is not an option for the current question")

        question = session.current_question
        session.phase = Phase.ANSWERED
        session.selected = option
        is_correct = option == question.answer
        if is_correct:
            session.score += 1

        flags: Dict[str, Optional[Literal["correct", "incorrect"]]] = {}
        for text in session.displayed_options:
            if text == question.answer:
                flags[text] = "correct"
            elif not is_correct and text == option:
                flags[text] = "incorrect"
            else:
                flags[text] = None

        session.pending_advance = self.scheduler.call_later(self.advance_delay, self._advance)
        return self._emit(
            AnswerFeedback(
                selected=option,
                answer=question.answer,
                is_correct=is_correct,
                option_flags=flags,
                message=CORRECT_FEEDBACK if is_correct else f"Wrong. Correct: {question.answer}",
                score=session.score,
            )
        )

    def tick(self) -> int:
        """Run any scheduled transitions that are due; returns how many fired."""
        return self.scheduler.run_pending()

    def _advance(self) -> None:
        session = self.session
        if session is None or session.phase is not Phase.ANSWERED:
            return
        session.index += 1
        if session.index >= session.total:
            self._finish()
        else:
            self._present_question()

    def _finish(self) -> ResultView:
        session = self.session
        session.phase = Phase.FINISHED
        session.pending_advance = None
        result = compute_result(
            player_name=session.player_name,
            category=session.category,
            category_label=session.category_label,
            score=session.score,
            total=session.total,
            elapsed=self.scheduler.clock.now() - session.started_at,
            celebrate_threshold=self.celebrate_threshold,
        )
        self.last_result = result
        logger.info(
            "Finished round for %s: %d/%d (%d%%) in %s",
            result.player_name,
            result.score,
            result.total,
            result.percentage,
            result.time_taken,
        )
        if self.leaderboard is not None:
            self.leaderboard.record_result(
                session.player_name, session.score, session.total, session.category
            )
        self.session = None
        self._show(Screen.RESULT)
        return self._emit(ResultView(result=result))

    # Leaderboard -------------------------------------------------------------

    def open_leaderboard(self, filter_name: str = "all") -> LeaderboardView:
        self._discard_session()
        if self.screen is not Screen.LEADERBOARD:
            self._show(Screen.LEADERBOARD)
        rows = self.leaderboard.rows(filter_name) if self.leaderboard is not None else []
        return self._emit(LeaderboardView(filter=filter_name, rows=rows))

    def clear_leaderboard(self, confirm: Callable[[], bool]) -> bool:
        """Clear stored scores only if `confirm()` agrees; returns whether anything was cleared."""
        if self.leaderboard is None or not confirm():
            return False
        self.leaderboard.clear()
        self._emit(LeaderboardView(filter="all", rows=[]))
        return True
