"""Read-only views over the catalog: search, sorting and summary counts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Tuple

from models.clothing_item import ClothingItem, parse_timestamp
from models.outfit import Outfit
from models.taxonomy import CATEGORIES

ALL_CATEGORIES = "all"
RECENT_OUTFIT_COUNT = 3

# sort key -> (key function, descending)
_ITEM_SORTS: Dict[str, Tuple[Callable[[ClothingItem], object], bool]] = {
    "dateAdded": (lambda item: parse_timestamp(item.date_added), True),
    "name": (lambda item: item.name.casefold(), False),
    "color": (lambda item: item.color.casefold(), False),
    "category": (lambda item: item.category, False),
    "wearCount": (lambda item: item.wear_count, True),
}
_OUTFIT_SORTS: Dict[str, Tuple[Callable[[Outfit], object], bool]] = {
    "dateCreated": (lambda outfit: parse_timestamp(outfit.date_created), True),
    "name": (lambda outfit: outfit.name.casefold(), False),
    "rating": (lambda outfit: outfit.rating, True),
    "wearCount": (lambda outfit: outfit.wear_count, True),
    "occasion": (lambda outfit: outfit.occasion.casefold(), False),
}
ITEM_SORT_OPTIONS = tuple(_ITEM_SORTS)
OUTFIT_SORT_OPTIONS = tuple(_OUTFIT_SORTS)


@dataclass(frozen=True)
class WardrobeSummary:
    total_items: int
    total_outfits: int
    favorite_items: int
    items_per_category: Dict[str, int]
    recent_outfits: List[Outfit] = field(default_factory=list)


def _matches_query(item: ClothingItem, query: str) -> bool:
    needle = query.strip().casefold()
    if not needle:
        return True
    haystacks = [item.name, item.color, item.brand or ""]
    return any(needle in value.casefold() for value in haystacks)


def browse_clothing_items(
    items: Sequence[ClothingItem],
    query: str = "",
    category: str = ALL_CATEGORIES,
    sort_by: str = "dateAdded",
) -> List[ClothingItem]:
    """Search by name, color or brand, filter by category and sort.

    Unknown ``sort_by`` values fall back to newest first.
    """

    filtered = [
        item
        for item in items
        if _matches_query(item, query) and (category == ALL_CATEGORIES or item.category == category)
    ]
    key, descending = _ITEM_SORTS.get(sort_by, _ITEM_SORTS["dateAdded"])
    return sorted(filtered, key=key, reverse=descending)


def sort_outfits(outfits: Sequence[Outfit], sort_by: str = "dateCreated") -> List[Outfit]:
    key, descending = _OUTFIT_SORTS.get(sort_by, _OUTFIT_SORTS["dateCreated"])
    return sorted(outfits, key=key, reverse=descending)


def summarize_wardrobe(items: Sequence[ClothingItem], outfits: Sequence[Outfit]) -> WardrobeSummary:
    per_category = {category: 0 for category in CATEGORIES}
    for item in items:
        per_category[item.category] += 1
    return WardrobeSummary(
        total_items=len(items),
        total_outfits=len(outfits),
        favorite_items=sum(1 for item in items if item.is_favorite),
        items_per_category=per_category,
        recent_outfits=list(outfits[:RECENT_OUTFIT_COUNT]),
    )


def confidence_band(confidence: float) -> str:
    """Bucket a suggestion confidence for display."""

    if confidence >= 0.8:
        return "high"
    if confidence >= 0.6:
        return "medium"
    return "low"


__all__ = [
    "ALL_CATEGORIES",
    "ITEM_SORT_OPTIONS",
    "OUTFIT_SORT_OPTIONS",
    "WardrobeSummary",
    "browse_clothing_items",
    "confidence_band",
    "sort_outfits",
    "summarize_wardrobe",
]
