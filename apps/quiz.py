"""Streamlit interface for playing rounds and browsing the leaderboard."""

from __future__ import annotations

import time
from typing import Optional

import streamlit as st

from trivia_quiz.categories import LEADERBOARD_FILTERS, category_label
from trivia_quiz.quiz.session import AnswerFeedback, Phase, QuizController, QuizInputError, Screen
from trivia_quiz.system import QuizSystem

DARK_CSS = """
<style>
.stApp { background-color: #0f172a; color: #e2e8f0; }
</style>
"""

FILTER_LABELS = {"all": "All", "science": "Science", "sports": "Sports", "math": "Math"}


@st.cache_resource(show_spinner=False)
def load_system() -> QuizSystem:
    return QuizSystem.from_config()


def _controller(system: QuizSystem) -> QuizController:
    if "controller" not in st.session_state:
        st.session_state.controller = system.new_controller()
        st.session_state.feedback = None
        st.session_state.confirm_clear = False
    return st.session_state.controller


def _render_sidebar(system: QuizSystem, controller: QuizController) -> None:
    with st.sidebar:
        st.header("Menu")
        label = "☀️ Light mode" if system.theme.dark_mode else "🌙 Dark mode"
        if st.button(label):
            system.theme.toggle()
            st.rerun()
        if st.button("Home"):
            controller.go_home()
            st.rerun()
        if st.button("Leaderboard"):
            controller.open_leaderboard("all")
            st.rerun()


def _render_home(system: QuizSystem, controller: QuizController) -> None:
    st.subheader("Choose a category")
    keys = system.categories()
    if not keys:
        st.error("The question bank is empty.")
        return
    columns = st.columns(3)
    for idx, key in enumerate(keys):
        if columns[idx % 3].button(category_label(key), key=f"category_{key}", use_container_width=True):
            controller.select_category(key)
            st.rerun()


def _render_name(controller: QuizController) -> None:
    st.subheader(f"Category: {controller.category_label}")
    name = st.text_input("Your name", value=controller.player_name)
    start, back = st.columns(2)
    if start.button("Start quiz", type="primary"):
        try:
            controller.submit_name(name)
        except QuizInputError as exc:
            st.error(str(exc))
            return
        st.session_state.feedback = None
        st.rerun()
    if back.button("Back"):
        controller.go_home()
        st.rerun()


def _render_question(controller: QuizController) -> None:
    view = controller.current_view()
    if view is None:
        return
    st.caption(f"{view.player_name} · {view.category_label}")
    st.progress(view.progress, text=f"Question {view.number} of {view.total} · Score {view.score}")
    st.markdown(f"### {view.text}")

    feedback: Optional[AnswerFeedback] = st.session_state.feedback
    answered = controller.session.phase is Phase.ANSWERED
    for idx, option in enumerate(view.options):
        flag = feedback.option_flags.get(option) if (answered and feedback) else None
        prefix = {"correct": "✅ ", "incorrect": "❌ "}.get(flag, "")
        if st.button(prefix + option, key=f"option_{view.number}_{idx}", disabled=answered, use_container_width=True):
            st.session_state.feedback = controller.select_option(option)
            st.rerun()

    if answered:
        if feedback is not None and feedback.is_correct:
            st.success(feedback.message)
        elif feedback is not None:
            st.error(feedback.message)
        due = controller.scheduler.next_due()
        if due is not None:
            time.sleep(max(0.0, due - controller.scheduler.clock.now()))
        controller.tick()
        st.session_state.feedback = None
        st.rerun()


def _render_result(controller: QuizController) -> None:
    result = controller.last_result
    if result is None:
        controller.go_home()
        st.rerun()
    if result.celebrate:
        st.balloons()
    st.subheader(result.message)
    st.write(f"**{result.player_name}** · {result.category_label}")
    st.metric("Score", f"{result.score}/{result.total}", f"{result.percentage}%")
    st.caption(f"Time taken: {result.time_taken}")
    again, change, board = st.columns(3)
    if again.button("Play again", type="primary"):
        controller.play_again()
        st.rerun()
    if change.button("Change category"):
        controller.change_category()
        st.rerun()
    if board.button("View leaderboard"):
        controller.open_leaderboard("all")
        st.rerun()


def _render_leaderboard(controller: QuizController) -> None:
    st.subheader("🏆 Leaderboard")
    filter_name = st.radio(
        "Filter",
        options=list(LEADERBOARD_FILTERS),
        format_func=lambda key: FILTER_LABELS.get(key, key),
        horizontal=True,
    )
    view = controller.open_leaderboard(filter_name)
    if not view.rows:
        st.info("No scores yet. Play a quiz to get on the board!")
    else:
        st.table(
            [
                {
                    "#": row.rank,
                    "Name": row.name,
                    "Category": row.category_label,
                    "Score": row.score_display,
                    "Date": row.date,
                }
                for row in view.rows
            ]
        )

    if not st.session_state.confirm_clear:
        if st.button("Clear leaderboard"):
            st.session_state.confirm_clear = True
            st.rerun()
        return

    st.warning("Are you sure you want to clear all leaderboard scores? This cannot be undone.")
    yes, no = st.columns(2)
    if yes.button("Yes, clear"):
        controller.clear_leaderboard(lambda: True)
        st.session_state.confirm_clear = False
        st.rerun()
    if no.button("Cancel"):
        st.session_state.confirm_clear = False
        st.rerun()


def render() -> None:
    st.set_page_config(page_title="Ultimate Knowledge Quiz", page_icon="🧠", layout="centered")
    system = load_system()
    controller = _controller(system)
    if system.theme.dark_mode:
        st.markdown(DARK_CSS, unsafe_allow_html=True)
    st.title("🧠 Ultimate Knowledge Quiz")
    _render_sidebar(system, controller)

    screens = {
        Screen.HOME: lambda: _render_home(system, controller),
        Screen.NAME: lambda: _render_name(controller),
        Screen.QUIZ: lambda: _render_question(controller),
        Screen.RESULT: lambda: _render_result(controller),
        Screen.LEADERBOARD: lambda: _render_leaderboard(controller),
    }
    screens[controller.screen]()


__all__ = ["render"]


if __name__ == "__main__":
    render()
