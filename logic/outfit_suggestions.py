"""Combinatorial outfit suggestions filtered by occasion, weather and wearer.

The engine is a pure function of the item snapshot, the request and a random
source. Randomness is limited to picking the shoe/accessory/outerwear that
complete each base combination, the confidence value and the reason text; the
base combinations themselves are enumerated in a fixed order.
"""
from __future__ import annotations

import logging
import math
import random
from datetime import datetime, timezone
from itertools import islice
from typing import Dict, Iterator, List, Protocol, Sequence

from logic.appropriateness import is_age_appropriate, is_gender_appropriate
from models.clothing_item import ClothingItem
from models.outfit import Outfit, OutfitSuggestion
from models.taxonomy import CATEGORIES, season_for

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5
CONFIDENCE_FLOOR = 0.6
CONFIDENCE_SPAN = 0.4
_CONFIDENCE_CEILING = math.nextafter(1.0, 0.0)
COLD_WEATHER = "cold"

REASON_TEMPLATES = (
    "Perfect for {occasion} in {weather} weather",
    "Age-appropriate for {age} year old",
    "Great for {gender} style preferences",
    "Matches your color preferences",
    "Suitable for the occasion and weather",
)


class RandomSource(Protocol):
    """Anything exposing ``random() -> float`` in [0, 1), e.g. ``random.Random``."""

    def random(self) -> float:
        ...


def _pick(group: Sequence[ClothingItem], rng: RandomSource) -> ClothingItem:
    index = int(rng.random() * len(group))
    return group[min(index, len(group) - 1)]


def filter_eligible(items: Sequence[ClothingItem], occasion: str, weather: str) -> List[ClothingItem]:
    """Keep items tagged for both the requested occasion and weather."""

    return [item for item in items if occasion in item.occasions and weather in item.weather]


def group_by_category(items: Sequence[ClothingItem]) -> Dict[str, List[ClothingItem]]:
    grouped: Dict[str, List[ClothingItem]] = {category: [] for category in CATEGORIES}
    for item in items:
        grouped[item.category].append(item)
    return grouped


def _complete(
    base: List[ClothingItem], grouped: Dict[str, List[ClothingItem]], weather: str, rng: RandomSource
) -> List[ClothingItem]:
    combination = list(base)
    if grouped["shoes"]:
        combination.append(_pick(grouped["shoes"], rng))
    if grouped["accessories"]:
        combination.append(_pick(grouped["accessories"], rng))
    if grouped["outerwear"] and weather == COLD_WEATHER:
        combination.append(_pick(grouped["outerwear"], rng))
    return combination


def iter_combinations(
    grouped: Dict[str, List[ClothingItem]], weather: str, rng: RandomSource
) -> Iterator[List[ClothingItem]]:
    """Yield completed combinations in generation order.

    With any eligible dress, each dress anchors exactly one combination and
    tops/bottoms are ignored. Otherwise every top is paired with every bottom.
    """

    if grouped["dress"]:
        for dress in grouped["dress"]:
            yield _complete([dress], grouped, weather, rng)
        return
    for top in grouped["top"]:
        for bottom in grouped["bottom"]:
            yield _complete([top, bottom], grouped, weather, rng)


def draw_confidence(rng: RandomSource) -> float:
    """Uniform draw from [0.6, 1.0)."""

    return min(CONFIDENCE_FLOOR + rng.random() * CONFIDENCE_SPAN, _CONFIDENCE_CEILING)


def draw_reason(occasion: str, weather: str, age: int, gender: str, rng: RandomSource) -> str:
    template = REASON_TEMPLATES[min(int(rng.random() * len(REASON_TEMPLATES)), len(REASON_TEMPLATES) - 1)]
    return template.format(occasion=occasion, weather=weather, age=age, gender=gender)


def generate_outfit_suggestions(
    items: Sequence[ClothingItem],
    occasion: str,
    weather: str,
    age: int,
    gender: str,
    rng: RandomSource | None = None,
    now: datetime | None = None,
) -> List[OutfitSuggestion]:
    """Return up to five suggestions built from the eligible items."""

    rng = rng if rng is not None else random.Random()
    now = now or datetime.now(timezone.utc)

    eligible = filter_eligible(items, occasion, weather)
    grouped = group_by_category(eligible)
    combinations = list(islice(iter_combinations(grouped, weather, rng), MAX_SUGGESTIONS))
    logger.info(
        "Built %s combinations from %s eligible of %s items (occasion=%s weather=%s)",
        len(combinations),
        len(eligible),
        len(items),
        occasion,
        weather,
    )

    season = season_for(now)
    created = now.isoformat()
    suggestions: List[OutfitSuggestion] = []
    for index, combination in enumerate(combinations):
        suggestion_id = f"suggestion-{index}"
        outfit = Outfit(
            id=suggestion_id,
            name=f"{occasion} Outfit {index + 1}",
            items=combination,
            occasion=occasion,
            weather=weather,
            season=season,
            rating=0,
            date_created=created,
            tags=[],
        )
        suggestions.append(
            OutfitSuggestion(
                id=suggestion_id,
                outfit=outfit,
                confidence=draw_confidence(rng),
                reason=draw_reason(occasion, weather, age, gender, rng),
                occasion=occasion,
                weather=weather,
                age_appropriate=is_age_appropriate(combination, age),
                gender_appropriate=is_gender_appropriate(combination, gender),
            )
        )
    return suggestions


__all__ = [
    "MAX_SUGGESTIONS",
    "REASON_TEMPLATES",
    "RandomSource",
    "draw_confidence",
    "draw_reason",
    "filter_eligible",
    "generate_outfit_suggestions",
    "group_by_category",
    "iter_combinations",
]
