from __future__ import annotations

import math
from typing import List, Tuple

from pydantic import BaseModel

# Checked top-down; the first threshold the percentage reaches wins.
MESSAGE_TIERS: List[Tuple[int, str]] = [
    (90, "Quiz Master!"),
    (70, "Excellent!"),
    (50, "Good Effort!"),
]
FALLBACK_MESSAGE = "Keep Practicing!"


class QuizResult(BaseModel):
    """Final figures for a finished round."""

    player_name: str
    category: str
    category_label: str
    score: int
    total: int
    percentage: int
    elapsed_seconds: int
    time_taken: str
    message: str
    celebrate: bool


def score_percentage(score: int, total: int) -> int:
    """round(100 * score / total), halves rounded up; 0 when there are no questions."""
    if total <= 0:
        return 0
    return int(math.floor(100 * score / total + 0.5))


def format_elapsed(seconds: float) -> str:
    """Render whole elapsed seconds as "M min S sec", or "S sec" under a minute."""
    whole = max(0, int(math.floor(seconds)))
    minutes, secs = divmod(whole, 60)
    if minutes > 0:
        return f"{minutes} min {secs} sec"
    return f"{secs} sec"


def result_message(percentage: int) -> str:
    for threshold, message in MESSAGE_TIERS:
        if percentage >= threshold:
            return message
    return FALLBACK_MESSAGE


def compute_result(
    *,
    player_name: str,
    category: str,
    category_label: str,
    score: int,
    total: int,
    elapsed: float,
    celebrate_threshold: int = 70,
) -> QuizResult:
    """Assemble the result screen values from the final session counters."""
    if not 0 <= score <= max(total, 0):
        raise ValueError(f"score {score} outside 0..{total}")
    percentage = score_percentage(score, total)
    elapsed_seconds = max(0, int(math.floor(elapsed)))
    return QuizResult(
        player_name=player_name,
        category=category,
        category_label=category_label,
        score=score,
        total=total,
        percentage=percentage,
        elapsed_seconds=elapsed_seconds,
        time_taken=format_elapsed(elapsed_seconds),
        message=result_message(percentage),
        celebrate=percentage >= celebrate_threshold,
    )
