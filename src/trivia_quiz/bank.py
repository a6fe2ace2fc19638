from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence

import yaml
from pydantic import ValidationError

from trivia_quiz.categories import MIXED_CATEGORY
from trivia_quiz.data_models import Question

logger = logging.getLogger(__name__)


class QuestionBank:
    """Read-only mapping of category key to its pool of questions."""

    def __init__(self, pools: Mapping[str, Sequence[Question]]):
        self._pools: Dict[str, List[Question]] = {
            key: list(questions) for key, questions in pools.items()
        }

    def __contains__(self, category: object) -> bool:
        return category in self._pools

    def __iter__(self) -> Iterator[str]:
        return iter(self._pools)

    def __len__(self) -> int:
        return len(self._pools)

    def categories(self) -> List[str]:
        """Category keys in bank order."""
        return list(self._pools)

    def pool(self, category: str) -> List[Question]:
        """Return a copy of one category's questions; unknown categories are empty."""
        return list(self._pools.get(category, []))

    def all_questions(self) -> List[Question]:
        """Concatenate every pool in bank order, skipping a literal `mixed` pool."""
        combined: List[Question] = []
        for key, questions in self._pools.items():
            if key == MIXED_CATEGORY:
                continue
            combined.extend(questions)
        return combined

    def counts(self) -> Dict[str, int]:
        return {key: len(questions) for key, questions in self._pools.items()}


def parse_pool(category: str, records: Iterable[Mapping]) -> List[Question]:
    """Validate raw `{question, options, answer}` records for one category."""
    questions: List[Question] = []
    for idx, record in enumerate(records):
        try:
            questions.append(Question.model_validate(record))
        except ValidationError as exc:
            raise ValueError(f"Invalid question {idx} in category '{category}': {exc}") from exc
    return questions


def load_question_bank(path: Path) -> QuestionBank:
    """
    Load a YAML question bank of the form `{category: [{question, options, answer}]}`.

    Raises FileNotFoundError when the file is missing and ValueError when the
    structure or any question fails validation.
    """
    if not path.exists():
        raise FileNotFoundError(f"Question bank not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Question bank {path} must map category keys to question lists")

    pools: Dict[str, List[Question]] = {}
    for category, records in raw.items():
        if not isinstance(records, list):
            raise ValueError(f"Category '{category}' in {path} must be a list of questions")
        pools[str(category)] = parse_pool(str(category), records)

    bank = QuestionBank(pools)
    logger.info("Loaded question bank from %s: %s", path, bank.counts())
    return bank
