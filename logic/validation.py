"""Pydantic schemas for validating catalog and suggestion requests."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

Category = Literal["top", "bottom", "dress", "outerwear", "shoes", "accessories"]


class _CamelModel(BaseModel):
    """Accepts both the client's camelCase keys and snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuggestionRequest(_CamelModel):
    """Input contract for outfit suggestion generation.

    Age and gender fall back to the client's defaults for users who have not
    filled in a profile.
    """

    occasion: str = Field(min_length=1)
    weather: str = Field(min_length=1)
    age: int = Field(25, ge=0)
    gender: str = Field("non-binary", min_length=1)


class ShoppingRequest(_CamelModel):
    budget: float = Field(ge=0)
    preferences: List[str] = Field(default_factory=list)


class ClothingItemCreate(_CamelModel):
    """Fields a caller may supply when adding a clothing item."""

    name: str = ""
    category: Category
    subcategory: str = ""
    color: str = ""
    pattern: str = ""
    material: str = ""
    brand: Optional[str] = None
    size: str = ""
    image_uri: str = ""
    tags: List[str] = Field(default_factory=list)
    occasions: List[str] = Field(default_factory=list)
    weather: List[str] = Field(default_factory=list)
    last_worn: Optional[str] = None


class ClothingItemUpdate(_CamelModel):
    name: Optional[str] = None
    category: Optional[Category] = None
    subcategory: Optional[str] = None
    color: Optional[str] = None
    pattern: Optional[str] = None
    material: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    image_uri: Optional[str] = None
    tags: Optional[List[str]] = None
    occasions: Optional[List[str]] = None
    weather: Optional[List[str]] = None
    last_worn: Optional[str] = None
    wear_count: Optional[int] = Field(None, ge=0)
    is_favorite: Optional[bool] = None


class OutfitCreate(_CamelModel):
    """Fields a caller may supply when saving an outfit."""

    name: str = Field(min_length=1)
    items: List[Dict[str, Any]] = Field(min_length=1)
    occasion: str = ""
    weather: str = ""
    season: str = ""
    rating: float = 0
    last_worn: Optional[str] = None
    image_uri: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class OutfitUpdate(_CamelModel):
    name: Optional[str] = None
    items: Optional[List[Dict[str, Any]]] = Field(None, min_length=1)
    occasion: Optional[str] = None
    weather: Optional[str] = None
    season: Optional[str] = None
    rating: Optional[float] = None
    last_worn: Optional[str] = None
    wear_count: Optional[int] = Field(None, ge=0)
    is_favorite: Optional[bool] = None
    image_uri: Optional[str] = None
    tags: Optional[List[str]] = None


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["invalid"] = "invalid"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent payload."""

    return ValidationResult(message=message, details=exc.errors(include_url=False, include_context=False)).model_dump()


__all__ = [
    "SuggestionRequest",
    "ShoppingRequest",
    "ClothingItemCreate",
    "ClothingItemUpdate",
    "OutfitCreate",
    "OutfitUpdate",
    "ValidationResult",
    "validation_failure",
]
