from __future__ import annotations

import random
from typing import List, Optional, Sequence, TypeVar

from trivia_quiz.bank import QuestionBank
from trivia_quiz.categories import MIXED_CATEGORY
from trivia_quiz.data_models import Question

T = TypeVar("T")

DEFAULT_ROUND_SIZE = 10


def shuffled(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly permuted copy of `items` (Fisher-Yates via `Random.shuffle`)."""
    result = list(items)
    (rng or random).shuffle(result)
    return result


def category_pool(bank: QuestionBank, category: str) -> List[Question]:
    """Questions eligible for a round; `mixed` draws from every pool without repeats."""
    if category != MIXED_CATEGORY:
        return bank.pool(category)
    seen = set()
    pool: List[Question] = []
    for question in bank.all_questions():
        if question in seen:
            continue
        seen.add(question)
        pool.append(question)
    return pool


def build_question_set(
    bank: QuestionBank,
    category: str,
    size: int = DEFAULT_ROUND_SIZE,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """
    Draw up to `size` questions for a round, sampled without replacement.

    The whole pool is permuted before truncation so both the selection and the
    order change from one round to the next. Returns an empty list for unknown
    or empty categories; callers treat that as "no questions available".
    """
    if size < 1:
        raise ValueError("size must be at least 1")
    return shuffled(category_pool(bank, category), rng)[:size]
