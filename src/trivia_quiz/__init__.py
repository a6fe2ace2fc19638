"""
Ultimate Knowledge Quiz.

A category-based multiple-choice trivia game: a pure session state machine,
a static question bank, and a locally persisted leaderboard, with terminal and
Streamlit front ends rendering the updates the state machine emits.
"""

from .config.loader import load_settings

__all__ = ["load_settings"]
