from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator, validator


class LeaderboardEntry(BaseModel):
    """
    One finished attempt as persisted in local storage.

    Stored rows have no schema version, so every field is optional on read:
    a missing `total` stays `None` (shown as "?") and unknown keys are kept
    so that rewriting the list does not lose them.
    """

    model_config = ConfigDict(extra="allow")

    name: str = ""
    score: int = Field(0, ge=0)
    total: Optional[int] = Field(None, ge=0)
    category: str = ""
    date: str = ""
    seq: Optional[int] = Field(None, description="Insertion sequence used to break ranking ties.")

    @validator("name", "category", "date", pre=True)
    def null_text_as_empty(cls, value):
        return "" if value is None else value

    @model_validator(mode="after")
    def score_within_total(self) -> "LeaderboardEntry":
        if self.total is not None and self.score > self.total:
            raise ValueError("score must not exceed total")
        return self


class LeaderboardRow(BaseModel):
    """Display-ready leaderboard line."""

    rank: int
    name: str
    category_label: str
    score_display: str
    date: str
