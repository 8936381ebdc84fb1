"""Static shopping suggestions shown next to generated outfits.

This is placeholder catalog data: no retailer is queried and ``preferences`` is
accepted for interface compatibility only.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Sequence

PLACEHOLDER_IMAGE = "https://via.placeholder.com/300x300"


@dataclass(frozen=True)
class ShoppingProduct:
    id: str
    name: str
    brand: str
    price: float
    image: str
    category: str
    color: str
    rating: float


STATIC_CATALOG: tuple[ShoppingProduct, ...] = (
    ShoppingProduct(
        id="1",
        name="Classic White T-Shirt",
        brand="Uniqlo",
        price=19.99,
        image=PLACEHOLDER_IMAGE,
        category="top",
        color="white",
        rating=4.5,
    ),
    ShoppingProduct(
        id="2",
        name="Black Jeans",
        brand="Levi's",
        price=89.99,
        image=PLACEHOLDER_IMAGE,
        category="bottom",
        color="black",
        rating=4.2,
    ),
)


def get_shopping_suggestions(budget: float, preferences: Sequence[str] | None = None) -> List[Dict[str, Any]]:
    """Return every static product flagged with whether it fits ``budget``."""

    return [{**asdict(product), "inBudget": budget >= product.price} for product in STATIC_CATALOG]


__all__ = ["ShoppingProduct", "STATIC_CATALOG", "get_shopping_suggestions"]
