from .leaderboard import LeaderboardEntry, LeaderboardRow
from .question import Question

__all__ = [
    "LeaderboardEntry",
    "LeaderboardRow",
    "Question",
]
