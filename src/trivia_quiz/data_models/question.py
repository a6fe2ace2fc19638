from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, validator


class Question(BaseModel):
    """Single multiple-choice item from the static bank."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(..., alias="question", min_length=1)
    options: Tuple[str, ...]
    answer: str

    @validator("options")
    def validate_options(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(value) < 2:
            raise ValueError("a question needs at least two options")
        if len(set(value)) != len(value):
            raise ValueError("options must be unique")
        return value

    @validator("answer")
    def answer_is_an_option(cls, value: str, values: dict) -> str:
        options = values.get("options")
        if options is not None and value not in options:
            raise ValueError(f"answer {value!r} is not one of the options")
        return value
