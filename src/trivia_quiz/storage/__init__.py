from .leaderboard import LeaderboardStore
from .local_storage import LocalStorage

__all__ = ["LeaderboardStore", "LocalStorage"]
