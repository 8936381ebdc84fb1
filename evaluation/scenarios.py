"""Evaluation scenarios covering the dress branch, separates, weather and guardrails."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class EvaluationScenario:
    name: str
    description: str
    occasion: str
    weather: str
    age: int
    gender: str
    wardrobe_items: List[Dict[str, object]]
    expectations: Dict[str, object] = field(default_factory=dict)


def _item(name: str, category: str, occasions: List[str], weather: List[str], tags: List[str] | None = None) -> Dict[str, object]:
    return {
        "name": name,
        "category": category,
        "color": "black",
        "occasions": occasions,
        "weather": weather,
        "tags": tags or [],
    }


def _separates_wardrobe() -> List[Dict[str, object]]:
    everyday = ["casual", "work"]
    mild = ["warm", "cool", "cold"]
    return [
        _item("Oxford shirt", "top", everyday, mild),
        _item("Striped tee", "top", everyday, mild),
        _item("Chinos", "bottom", everyday, mild),
        _item("Jeans", "bottom", everyday, mild),
        _item("Shorts", "bottom", ["casual"], ["warm"]),
        _item("Sneakers", "shoes", everyday, mild),
        _item("Canvas tote", "accessories", everyday, mild),
        _item("Wool coat", "outerwear", everyday, ["cold"]),
        _item("Rain shell", "outerwear", everyday, ["cool", "cold"]),
    ]


SCENARIOS: List[EvaluationScenario] = [
    EvaluationScenario(
        name="party_cold_dress",
        description="A single party dress in cold weather picks up shoes and a coat.",
        occasion="party",
        weather="cold",
        age=25,
        gender="female",
        wardrobe_items=[
            _item("Velvet dress", "dress", ["party"], ["cold"]),
            _item("Faux fur jacket", "outerwear", ["party"], ["cold"]),
            _item("Ankle boots", "shoes", ["party"], ["cold"]),
        ],
        expectations={
            "exact_count": 1,
            "required_categories": ["dress", "shoes", "outerwear"],
            "all_age_appropriate": True,
            "all_gender_appropriate": True,
        },
    ),
    EvaluationScenario(
        name="casual_warm_separates",
        description="Separates are crossed and truncated; no outerwear outside the cold.",
        occasion="casual",
        weather="warm",
        age=30,
        gender="non-binary",
        wardrobe_items=_separates_wardrobe(),
        expectations={
            "exact_count": 5,
            "required_categories": ["top", "bottom", "shoes", "accessories"],
            "forbidden_categories": ["outerwear", "dress"],
            "all_gender_appropriate": True,
        },
    ),
    EvaluationScenario(
        name="work_cold_separates",
        description="Cold weather adds one outerwear piece to each combination.",
        occasion="work",
        weather="cold",
        age=40,
        gender="male",
        wardrobe_items=_separates_wardrobe(),
        expectations={
            "exact_count": 4,
            "required_categories": ["top", "bottom", "outerwear"],
        },
    ),
    EvaluationScenario(
        name="minor_adult_only_item",
        description="Adult-only pieces are flagged for wearers under 18.",
        occasion="party",
        weather="warm",
        age=16,
        gender="non-binary",
        wardrobe_items=[
            _item("Sequin top", "top", ["party"], ["warm"], tags=["adult-only"]),
            _item("Mini skirt", "bottom", ["party"], ["warm"]),
        ],
        expectations={"exact_count": 1, "all_age_appropriate": False},
    ),
    EvaluationScenario(
        name="gender_restricted_item",
        description="A mens-only blazer is flagged for a female wearer.",
        occasion="formal",
        weather="cool",
        age=35,
        gender="female",
        wardrobe_items=[
            _item("Tailored blazer", "top", ["formal"], ["cool"], tags=["mens-only"]),
            _item("Wool trousers", "bottom", ["formal"], ["cool"]),
        ],
        expectations={"exact_count": 1, "all_gender_appropriate": False},
    ),
    EvaluationScenario(
        name="nothing_eligible",
        description="Items tagged for other weather are excluded entirely.",
        occasion="beach",
        weather="hot",
        age=22,
        gender="male",
        wardrobe_items=[
            _item("Linen shirt", "top", ["beach"], ["warm"]),
            _item("Swim shorts", "bottom", ["beach"], ["warm"]),
        ],
        expectations={"exact_count": 0},
    ),
]


__all__ = ["EvaluationScenario", "SCENARIOS"]
