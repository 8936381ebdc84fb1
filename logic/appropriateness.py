"""Tag-based age and gender guardrails for suggested outfits."""

from __future__ import annotations

from typing import Iterable

from models.clothing_item import ClothingItem
from models.taxonomy import ADULT_ONLY_TAG, MENS_ONLY_TAG, WOMENS_ONLY_TAG

ADULT_AGE = 18


def is_age_appropriate(items: Iterable[ClothingItem], age: int) -> bool:
    """Minors never get items tagged adult-only."""

    if age < ADULT_AGE:
        return not any(ADULT_ONLY_TAG in item.tags for item in items)
    return True


def is_gender_appropriate(items: Iterable[ClothingItem], gender: str) -> bool:
    """Check gender-restricted tags item by item.

    Combinations without any gender-restricted tag are appropriate for every
    requested gender. Genders other than male/female are never constrained.
    """

    if gender == "non-binary":
        return True

    items = list(items)
    has_gender_specific_items = any(
        MENS_ONLY_TAG in item.tags or WOMENS_ONLY_TAG in item.tags for item in items
    )
    if not has_gender_specific_items:
        return True

    def allowed(item: ClothingItem) -> bool:
        if gender == "male":
            return WOMENS_ONLY_TAG not in item.tags
        if gender == "female":
            return MENS_ONLY_TAG not in item.tags
        return True

    return all(allowed(item) for item in items)


__all__ = ["is_age_appropriate", "is_gender_appropriate", "ADULT_AGE"]
