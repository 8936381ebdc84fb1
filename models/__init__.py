"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.clothing_item import ClothingItem, clothing_item_from_record
from models.outfit import Outfit, OutfitSuggestion, outfit_from_record

__all__ = [
    "ClothingItem",
    "Outfit",
    "OutfitSuggestion",
    "clothing_item_from_record",
    "outfit_from_record",
]
