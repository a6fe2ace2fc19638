from .builder import build_question_set, shuffled
from .results import QuizResult, compute_result, format_elapsed, result_message, score_percentage
from .scheduling import ManualClock, RealClock, Scheduler
from .session import (
    AnswerFeedback,
    LeaderboardView,
    Phase,
    QuestionView,
    QuizController,
    QuizInputError,
    QuizSession,
    ResultView,
    Screen,
    ScreenChange,
)

__all__ = [
    "AnswerFeedback",
    "LeaderboardView",
    "ManualClock",
    "Phase",
    "QuestionView",
    "QuizController",
    "QuizInputError",
    "QuizResult",
    "QuizSession",
    "RealClock",
    "ResultView",
    "Scheduler",
    "Screen",
    "ScreenChange",
    "build_question_set",
    "compute_result",
    "format_elapsed",
    "result_message",
    "score_percentage",
    "shuffled",
]
