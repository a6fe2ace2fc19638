from __future__ import annotations

from pathlib import Path
from pydantic import BaseModel, Field, validator


class QuizConfig(BaseModel):
    """Round size and pacing for a single quiz attempt."""

    questions_per_round: int = Field(10, ge=1)
    advance_delay_seconds: float = Field(1.0, ge=0)
    celebrate_threshold: int = Field(70, ge=0, le=100, description="Percentage that triggers the celebration.")


class LeaderboardConfig(BaseModel):
    """Where leaderboard entries live and how many are shown."""

    storage_key: str = Field("ultimateQuizLeaderboard")
    display_limit: int = Field(10, ge=1)
    date_format: str = Field("%Y-%m-%d", description="strftime pattern for the entry date.")

    @validator("storage_key")
    def key_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("storage_key must not be blank")
        return value


class ThemeConfig(BaseModel):
    """Storage key for the persisted display theme."""

    storage_key: str = Field("ultimateQuizTheme")


class PathsConfig(BaseModel):
    """Filesystem layout for the question bank and the local key-value store."""

    question_bank: Path = Field(Path("data/question_bank.yaml"))
    storage_file: Path = Field(Path("data/local_storage.json"))


class LoggingConfig(BaseModel):
    """Controls for logging output and format."""

    level: str = Field("INFO")
    use_json: bool = False


class Settings(BaseModel):
    """Top-level project configuration aggregating all sub-settings."""

    project_name: str = Field("Ultimate Knowledge Quiz")
    quiz: QuizConfig = Field(default_factory=QuizConfig)
    leaderboard: LeaderboardConfig = Field(default_factory=LeaderboardConfig)
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @validator("theme")
    def theme_key_differs(cls, value: ThemeConfig, values: dict) -> ThemeConfig:
        """The theme and leaderboard must not share a storage key."""
        leaderboard = values.get("leaderboard")
        if leaderboard is not None and leaderboard.storage_key == value.storage_key:
            raise ValueError("theme.storage_key must differ from leaderboard.storage_key")
        return value
