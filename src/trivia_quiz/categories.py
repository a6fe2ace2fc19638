"""Category keys, their display labels, and the leaderboard filters built on them."""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

MIXED_CATEGORY = "mixed"

CATEGORY_LABELS: Dict[str, str] = {
    "science": "Science",
    "mathematics": "Mathematics",
    "computer": "Computer",
    "english": "English",
    "socialStudies": "Social Studies",
    "football": "Football",
    "cricket": "Cricket",
    "basketball": "Basketball",
    "olympics": "Olympics",
    "sportsGeneral": "Sports General",
    "nepal": "Nepal",
    "nepalHistory": "Nepal's History",
    "nepalGeography": "Nepal Geography",
    "nepalCulture": "Nepal Culture",
    "nepalFestivals": "Nepal Festivals",
    "geography": "Geography",
    "literature": "Literature",
    "music": "Music",
    "worldHistory": "World History",
    "artMovies": "Art & Movies",
    "nature": "Nature",
    "space": "Space",
    "general": "General Knowledge",
    "currentAffairs": "Current Affairs",
    MIXED_CATEGORY: "Mixed Challenge",
}

# None means "no filtering".
LEADERBOARD_FILTERS: Dict[str, Optional[FrozenSet[str]]] = {
    "all": None,
    "science": frozenset({"science"}),
    "sports": frozenset({"football", "cricket"}),
    "math": frozenset({"mathematics"}),
}


def category_label(key: Optional[str], fallback: str = "") -> str:
    """Return the display label for a category key, the key itself if unknown, else `fallback`."""
    if not key:
        return fallback
    return CATEGORY_LABELS.get(key, key)


def filter_categories(filter_name: str) -> Optional[FrozenSet[str]]:
    """Lower-cased category keys accepted by a leaderboard filter; None for no filtering."""
    return LEADERBOARD_FILTERS.get(filter_name)
