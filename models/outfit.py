"""Outfit and outfit suggestion schemas."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

from models.clothing_item import (
    ClothingItem,
    _as_record,
    _as_timestamp,
    _ensure_list,
    clothing_item_from_record,
    normalise_field_names,
)
from models.taxonomy import normalise_tags


@dataclass
class Outfit:
    """A named combination of clothing items."""

    id: str
    name: str
    items: List[ClothingItem] = field(default_factory=list)
    occasion: str = ""
    weather: str = ""
    season: str = ""
    rating: float = 0
    date_created: str = ""
    last_worn: Optional[str] = None
    wear_count: int = 0
    is_favorite: bool = False
    image_uri: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.id = str(self.id)
        self.name = str(self.name or "")
        self.items = [
            item if isinstance(item, ClothingItem) else clothing_item_from_record(item)
            for item in _ensure_list(self.items)
        ]
        self.tags = normalise_tags(_ensure_list(self.tags))
        self.rating = float(self.rating or 0)
        self.date_created = _as_timestamp(self.date_created) or ""
        self.last_worn = _as_timestamp(self.last_worn)
        self.wear_count = int(self.wear_count or 0)
        if self.wear_count < 0:
            raise ValueError(f"wear_count cannot be negative (got {self.wear_count})")
        self.is_favorite = bool(self.is_favorite)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "items": [item.to_record() for item in self.items],
            "occasion": self.occasion,
            "weather": self.weather,
            "season": self.season,
            "rating": self.rating,
            "dateCreated": self.date_created,
            "lastWorn": self.last_worn,
            "wearCount": self.wear_count,
            "isFavorite": self.is_favorite,
            "imageUri": self.image_uri,
            "tags": list(self.tags),
        }


@dataclass
class OutfitSuggestion:
    """Ephemeral candidate outfit produced by the suggestion engine."""

    id: str
    outfit: Outfit
    confidence: float
    reason: str
    occasion: str
    weather: str
    age_appropriate: bool
    gender_appropriate: bool

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "outfit": self.outfit.to_record(),
            "confidence": self.confidence,
            "reason": self.reason,
            "occasion": self.occasion,
            "weather": self.weather,
            "ageAppropriate": self.age_appropriate,
            "genderAppropriate": self.gender_appropriate,
        }


OUTFIT_FIELDS = tuple(f.name for f in fields(Outfit))
OUTFIT_MANAGED_FIELDS = ("id", "date_created", "wear_count", "is_favorite")


def outfit_from_record(record: Mapping[str, Any]) -> Outfit:
    """Build an :class:`Outfit` from a stored or loosely keyed record."""

    values = normalise_field_names(_as_record(record, "Outfit"), OUTFIT_FIELDS)
    if not values.get("id"):
        raise ValueError("Missing required fields for Outfit: ['id']")
    values.setdefault("name", "")
    return Outfit(**values)


__all__ = [
    "Outfit",
    "OutfitSuggestion",
    "OUTFIT_FIELDS",
    "OUTFIT_MANAGED_FIELDS",
    "outfit_from_record",
]
