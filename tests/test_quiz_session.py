"""Tests for the quiz controller state machine."""

from __future__ import annotations

import pytest

from trivia_quiz.quiz.session import (
    CATEGORY_REQUIRED,
    NAME_REQUIRED,
    NO_QUESTIONS,
    AnswerFeedback,
    Phase,
    QuestionView,
    QuizInputError,
    ResultView,
    Screen,
    ScreenChange,
)


def _wrong_option(controller) -> str:
    session = controller.session
    return next(
        option
        for option in session.displayed_options
        if option != session.current_question.answer
    )


def _play_through(controller, clock, correct: bool = True) -> None:
    while controller.session is not None:
        session = controller.session
        choice = session.current_question.answer if correct else _wrong_option(controller)
        controller.select_option(choice)
        clock.advance(1.0)
        controller.tick()


def test_blank_name_blocks_the_round(controller):
    controller.select_category("science")
    with pytest.raises(QuizInputError, match=NAME_REQUIRED):
        controller.submit_name("   ")
    assert controller.session is None
    assert controller.screen is Screen.NAME


def test_missing_category_blocks_the_round(controller):
    with pytest.raises(QuizInputError) as excinfo:
        controller.submit_name("Asha")
    assert str(excinfo.value) == CATEGORY_REQUIRED
    assert controller.session is None


def test_empty_category_blocks_the_round(controller):
    controller.select_category("music")
    with pytest.raises(QuizInputError) as excinfo:
        controller.submit_name("Asha")
    assert str(excinfo.value) == NO_QUESTIONS
    assert controller.session is None
    assert controller.screen is Screen.NAME


def test_starting_a_round_shows_the_first_question(controller):
    controller.select_category("science")
    view = controller.submit_name("  Asha ")

    assert isinstance(view, QuestionView)
    assert view.number == 1
    assert view.total == 10
    assert view.score == 0
    assert view.progress == 0.0
    assert view.player_name == "Asha"
    assert view.category_label == "Science"
    assert controller.screen is Screen.QUIZ

    question = controller.session.current_question
    assert view.text == question.text
    assert sorted(view.options) == sorted(question.options)


def test_current_view_keeps_the_displayed_order(controller):
    controller.select_category("science")
    view = controller.submit_name("Asha")
    assert controller.current_view().options == view.options


def test_correct_answer_scores_and_flags(controller):
    controller.select_category("science")
    controller.submit_name("Asha")
    answer = controller.session.current_question.answer

    feedback = controller.select_option(answer)

    assert isinstance(feedback, AnswerFeedback)
    assert feedback.is_correct is True
    assert feedback.score == 1
    assert feedback.message == "Correct!"
    assert feedback.option_flags[answer] == "correct"
    assert [flag for option, flag in feedback.option_flags.items() if option != answer] == [None] * 3
    assert controller.session.phase is Phase.ANSWERED


def test_wrong_answer_marks_both_options(controller):
    controller.select_category("science")
    controller.submit_name("Asha")
    answer = controller.session.current_question.answer
    wrong = _wrong_option(controller)

    feedback = controller.select_option(wrong)

    assert feedback.is_correct is False
    assert feedback.score == 0
    assert feedback.message == f"Wrong. Correct: {answer}"
    assert feedback.option_flags[answer] == "correct"
    assert feedback.option_flags[wrong] == "incorrect"


def test_second_selection_is_ignored(controller):
    """Only the first click on a question counts."""
    controller.select_category("science")
    controller.submit_name("Asha")
    answer = controller.session.current_question.answer
    wrong = _wrong_option(controller)

    controller.select_option(wrong)
    assert controller.select_option(answer) is None
    assert controller.select_option(answer) is None
    assert controller.session.score == 0
    assert controller.scheduler.pending() == 1, "Only one advance may be scheduled"


def test_unknown_option_is_rejected(controller):
    controller.select_category("science")
    controller.submit_name("Asha")
    with pytest.raises(ValueError):
        controller.select_option("not an option")
    assert controller.session.phase is Phase.AWAITING_ANSWER


def test_advance_waits_for_the_delay(controller, clock):
    controller.select_category("science")
    controller.submit_name("Asha")
    controller.select_option(controller.session.current_question.answer)

    clock.advance(0.5)
    assert controller.tick() == 0
    assert controller.session.index == 0

    clock.advance(0.5)
    assert controller.tick() == 1
    assert controller.session.index == 1
    assert controller.session.phase is Phase.AWAITING_ANSWER
    assert controller.current_view().progress == pytest.approx(0.1)
    assert controller.current_view().score == 1


def test_full_round_records_result(controller, clock, leaderboard):
    updates = []
    controller.subscribe(updates.append)
    controller.select_category("science")
    controller.submit_name("Asha")

    _play_through(controller, clock, correct=True)

    result = controller.last_result
    assert controller.screen is Screen.RESULT
    assert controller.session is None
    assert result.score == 10
    assert result.total == 10
    assert result.percentage == 100
    assert result.message == "Quiz Master!"
    assert result.celebrate is True
    assert result.time_taken == "10 sec"
    assert isinstance(updates[-1], ResultView)

    stored = leaderboard.load()
    assert len(stored) == 1
    assert (stored[0].name, stored[0].score, stored[0].total, stored[0].category) == (
        "Asha",
        10,
        10,
        "science",
    )
    assert stored[0].date == "2026-10-19"


def test_all_wrong_round_scores_zero(controller, clock):
    controller.select_category("football")
    controller.submit_name("Ben")
    _play_through(controller, clock, correct=False)

    result = controller.last_result
    assert result.score == 0
    assert result.total == 3
    assert result.percentage == 0
    assert result.message == "Keep Practicing!"
    assert result.celebrate is False


def test_score_never_exceeds_total(controller, clock):
    controller.select_category("cricket")
    controller.submit_name("Cai")
    while controller.session is not None:
        session = controller.session
        controller.select_option(session.current_question.answer)
        controller.select_option(session.current_question.answer)
        assert 0 <= session.score <= session.total
        clock.advance(1.0)
        controller.tick()
    assert controller.last_result.score == 4


def test_listeners_receive_updates_in_order(controller):
    updates = []
    controller.subscribe(updates.append)
    controller.select_category("science")
    controller.submit_name("Asha")

    assert [type(update) for update in updates] == [ScreenChange, ScreenChange, QuestionView]
    assert updates[0].screen is Screen.NAME
    assert updates[1].screen is Screen.QUIZ


def test_leaving_mid_question_cancels_the_advance(controller, clock):
    controller.select_category("science")
    controller.submit_name("Asha")
    controller.select_option(controller.session.current_question.answer)

    controller.go_home()
    clock.advance(5.0)

    assert controller.tick() == 0
    assert controller.screen is Screen.HOME
    assert controller.session is None
    assert controller.category is None
    assert controller.player_name == ""


def test_play_again_keeps_name_and_category(controller, clock):
    controller.select_category("football")
    controller.submit_name("Asha")
    _play_through(controller, clock)

    change = controller.play_again()

    assert change.screen is Screen.NAME
    assert change.player_name == "Asha"
    assert change.category == "football"
    view = controller.submit_name(controller.player_name)
    assert view.score == 0
    assert view.number == 1


def test_open_leaderboard_lists_ranked_rows(controller, clock):
    controller.select_category("football")
    controller.submit_name("Asha")
    _play_through(controller, clock)

    view = controller.open_leaderboard("sports")

    assert controller.screen is Screen.LEADERBOARD
    assert [row.name for row in view.rows] == ["Asha"]
    assert view.rows[0].score_display == "3/3"
    assert view.rows[0].category_label == "Football"


def test_clear_leaderboard_requires_confirmation(controller, leaderboard):
    leaderboard.record_result("Asha", 5, 10, "science")

    assert controller.clear_leaderboard(lambda: False) is False
    assert len(leaderboard.query("all")) == 1

    assert controller.clear_leaderboard(lambda: True) is True
    assert leaderboard.query("all") == []
