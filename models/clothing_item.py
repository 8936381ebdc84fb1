"""Clothing item data model and record helpers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from models.taxonomy import normalise_tags, validate_category


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _as_timestamp(value: Any) -> Optional[str]:
    """Stored timestamps are ISO-8601 strings; ``datetime`` values are converted."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _as_record(record: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(record, Mapping):
        raise ValueError(f"{kind} record must be an object, got {type(record).__name__}")
    return record


def to_camel(name: str) -> str:
    """``date_added`` -> ``dateAdded``."""

    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_snake(name: str) -> str:
    """``dateAdded`` -> ``date_added``; snake_case input is returned unchanged."""

    chars = []
    for char in name:
        if char.isupper():
            chars.append("_")
            chars.append(char.lower())
        else:
            chars.append(char)
    return "".join(chars)


def normalise_field_names(values: Mapping[str, Any], allowed: Iterable[str]) -> Dict[str, Any]:
    """Map camelCase or snake_case keys onto dataclass field names.

    Keys that do not correspond to an allowed field are dropped.
    """

    allowed_names = set(allowed)
    normalised: Dict[str, Any] = {}
    for key, value in values.items():
        name = to_snake(str(key))
        if name in allowed_names:
            normalised[name] = value
    return normalised


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 timestamp; unparsable or empty values sort first."""

    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class ClothingItem:
    """A single garment or accessory in the user's wardrobe."""

    id: str
    name: str
    category: str
    subcategory: str = ""
    color: str = ""
    pattern: str = ""
    material: str = ""
    brand: Optional[str] = None
    size: str = ""
    image_uri: str = ""
    tags: List[str] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)
    weather: List[str] = field(default_factory=list)
    date_added: str = ""
    last_worn: Optional[str] = None
    wear_count: int = 0
    is_favorite: bool = False

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise ValueError("ClothingItem requires a non-empty id")
        self.id = str(self.id)
        self.name = str(self.name or "")
        self.category = validate_category(self.category)
        self.brand = str(self.brand) if self.brand is not None else None
        self.date_added = _as_timestamp(self.date_added) or ""
        self.last_worn = _as_timestamp(self.last_worn)
        self.tags = normalise_tags(_ensure_list(self.tags))
        self.occasions = normalise_tags(_ensure_list(self.occasions))
        self.weather = normalise_tags(_ensure_list(self.weather))
        self.wear_count = int(self.wear_count or 0)
        if self.wear_count < 0:
            raise ValueError(f"wear_count cannot be negative (got {self.wear_count})")
        self.is_favorite = bool(self.is_favorite)

    def to_record(self) -> Dict[str, Any]:
        """Serialise using the camelCase keys of the stored blob."""

        return {to_camel(key): value for key, value in asdict(self).items()}


CLOTHING_ITEM_FIELDS = tuple(f.name for f in fields(ClothingItem))

# Assigned by the catalog on creation and never taken from caller input.
CLOTHING_ITEM_MANAGED_FIELDS = ("id", "date_added", "wear_count", "is_favorite")


def clothing_item_from_record(record: Mapping[str, Any]) -> ClothingItem:
    """Build a :class:`ClothingItem` from a stored or loosely keyed record."""

    values = normalise_field_names(_as_record(record, "ClothingItem"), CLOTHING_ITEM_FIELDS)
    missing = [name for name in ("id", "category") if not values.get(name)]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")
    values.setdefault("name", "")
    return ClothingItem(**values)


__all__ = [
    "ClothingItem",
    "CLOTHING_ITEM_FIELDS",
    "CLOTHING_ITEM_MANAGED_FIELDS",
    "clothing_item_from_record",
    "normalise_field_names",
    "parse_timestamp",
    "to_camel",
    "to_snake",
]
