"""Canonical vocabularies for clothing items and outfit requests.

Categories are a closed set and are validated on every item. Occasions, weather
conditions and tags stay free-form strings; the lists below are the values the
client offers and are used for documentation and seeding rather than
enforcement.
"""

from datetime import datetime
from typing import Iterable, List, Tuple


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower()


CATEGORIES: Tuple[str, ...] = ("top", "bottom", "dress", "outerwear", "shoes", "accessories")

OCCASIONS = ["casual", "work", "party", "formal", "date", "gym", "travel", "beach"]
WEATHER_CONDITIONS = ["hot", "warm", "cool", "cold", "rainy"]
GENDERS = ["male", "female", "non-binary"]

ADULT_ONLY_TAG = "adult-only"
MENS_ONLY_TAG = "mens-only"
WOMENS_ONLY_TAG = "womens-only"
RESTRICTION_TAGS = [ADULT_ONLY_TAG, MENS_ONLY_TAG, WOMENS_ONLY_TAG]

# Month ranges are inclusive and use calendar numbering (January == 1).
SEASONS = {
    "spring": (3, 5),
    "summer": (6, 8),
    "fall": (9, 11),
}


def validate_category(value: str) -> str:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    key = _normalize_key(str(value))
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {list(CATEGORIES)}")
    return key


def normalise_tags(values: Iterable[str]) -> List[str]:
    """Strip and deduplicate tags while keeping first-seen order."""

    normalised = []
    seen = set()
    for value in values:
        key = str(value).strip()
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def season_for(moment: datetime) -> str:
    """Return the season name for the calendar month of ``moment``."""

    for season, (first, last) in SEASONS.items():
        if first <= moment.month <= last:
            return season
    return "winter"


__all__ = [
    "CATEGORIES",
    "OCCASIONS",
    "WEATHER_CONDITIONS",
    "GENDERS",
    "ADULT_ONLY_TAG",
    "MENS_ONLY_TAG",
    "WOMENS_ONLY_TAG",
    "RESTRICTION_TAGS",
    "SEASONS",
    "validate_category",
    "normalise_tags",
    "season_for",
]
