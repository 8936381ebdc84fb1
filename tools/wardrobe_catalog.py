"""In-memory wardrobe catalog with write-through key-value persistence."""
from __future__ import annotations

import json
import logging
import random
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar

from pydantic import ValidationError

from logic.catalog_views import (
    ALL_CATEGORIES,
    WardrobeSummary,
    browse_clothing_items,
    sort_outfits,
    summarize_wardrobe,
)
from logic.outfit_suggestions import RandomSource, generate_outfit_suggestions
from logic.validation import SuggestionRequest
from memory.key_value_store import KeyValueStore
from models.clothing_item import (
    CLOTHING_ITEM_FIELDS,
    CLOTHING_ITEM_MANAGED_FIELDS,
    ClothingItem,
    clothing_item_from_record,
    normalise_field_names,
)
from models.outfit import OUTFIT_FIELDS, OUTFIT_MANAGED_FIELDS, Outfit, OutfitSuggestion, outfit_from_record
from models.taxonomy import season_for
from tools.observability import instrument_operation
from tools.shopping import get_shopping_suggestions
from wardrobe_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)

CLOTHING_ITEMS_KEY = "clothingItems"
OUTFITS_KEY = "outfits"

T = TypeVar("T", ClothingItem, Outfit)


def _default_id() -> str:
    return uuid.uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _find_index(collection: Sequence[T], entity_id: str) -> Optional[int]:
    for index, entity in enumerate(collection):
        if entity.id == entity_id:
            return index
    return None


def _check_wear_count(current: T, changes: Dict[str, Any]) -> None:
    if "wear_count" in changes and int(changes["wear_count"] or 0) < current.wear_count:
        raise ValueError(
            f"wear_count cannot decrease ({current.wear_count} -> {changes['wear_count']})"
        )


class WardrobeCatalog:
    """Single source of truth for clothing items and outfits.

    Every mutation updates the in-memory collection first and then overwrites
    the full collection in ``store``. Storage failures are logged and
    swallowed; the in-memory state stays authoritative for the session.
    """

    def __init__(
        self,
        store: KeyValueStore,
        id_provider: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.store = store
        self._new_id = id_provider or _default_id
        self._clock = clock or _utc_now
        self._rng = rng if rng is not None else random.Random()
        self._clothing_items: List[ClothingItem] = []
        self._outfits: List[Outfit] = []
        self.loading = True

    @property
    def clothing_items(self) -> List[ClothingItem]:
        return list(self._clothing_items)

    @property
    def outfits(self) -> List[Outfit]:
        return list(self._outfits)

    # -- persistence -----------------------------------------------------

    async def load(self) -> None:
        """Read both collections; missing or malformed data yields empty lists."""

        try:
            self._clothing_items = await self._read_collection(CLOTHING_ITEMS_KEY, clothing_item_from_record)
            self._outfits = await self._read_collection(OUTFITS_KEY, outfit_from_record)
        finally:
            self.loading = False
        log_event(
            LOGGER,
            logging.INFO,
            "catalog_loaded",
            clothing_count=len(self._clothing_items),
            outfit_count=len(self._outfits),
        )

    async def _read_collection(self, key: str, factory: Callable[[Mapping[str, Any]], T]) -> List[T]:
        try:
            raw = await self.store.get(key)
        except Exception as exc:  # noqa: BLE001
            log_event(LOGGER, logging.ERROR, "catalog_read_failed", key=key, error=str(exc), exc_info=True)
            return []
        if raw is None:
            log_event(LOGGER, logging.INFO, "catalog_key_missing", key=key)
            return []
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
            entities = []
            for record in payload:
                if not isinstance(record, dict):
                    raise ValueError(f"expected an object record, got {type(record).__name__}")
                entities.append(factory(record))
            return entities
        except (ValueError, TypeError) as exc:
            log_event(LOGGER, logging.WARNING, "catalog_data_malformed", key=key, error=str(exc))
            return []

    async def _write_collection(self, key: str, collection: Sequence[T]) -> None:
        try:
            body = json.dumps([entity.to_record() for entity in collection])
            await self.store.set(key, body)
        except Exception as exc:  # noqa: BLE001
            log_event(
                LOGGER,
                logging.ERROR,
                "catalog_write_failed",
                key=key,
                count=len(collection),
                error=str(exc),
                exc_info=True,
            )

    def _unique_id(self, collection: Sequence[T]) -> str:
        existing = {entity.id for entity in collection}
        base = str(self._new_id())
        candidate = base
        suffix = 1
        while candidate in existing:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _timestamp(self) -> str:
        return self._clock().isoformat()

    # -- clothing items --------------------------------------------------

    @instrument_operation("add_clothing_item")
    async def add_clothing_item(self, fields: Mapping[str, Any]) -> ClothingItem:
        values = normalise_field_names(fields, CLOTHING_ITEM_FIELDS)
        for managed in CLOTHING_ITEM_MANAGED_FIELDS:
            values.pop(managed, None)
        if not values.get("category"):
            raise ValueError("Missing required fields for ClothingItem: ['category']")
        values.setdefault("name", "")
        item = ClothingItem(
            id=self._unique_id(self._clothing_items),
            date_added=self._timestamp(),
            wear_count=0,
            is_favorite=False,
            **values,
        )
        self._clothing_items = [*self._clothing_items, item]
        await self._write_collection(CLOTHING_ITEMS_KEY, self._clothing_items)
        return item

    @instrument_operation("update_clothing_item")
    async def update_clothing_item(self, item_id: str, updates: Mapping[str, Any]) -> Optional[ClothingItem]:
        index = _find_index(self._clothing_items, item_id)
        if index is None:
            log_event(LOGGER, logging.INFO, "catalog_update_skipped", item_id=item_id, collection=CLOTHING_ITEMS_KEY)
            return None
        changes = normalise_field_names(updates, CLOTHING_ITEM_FIELDS)
        changes.pop("id", None)
        current = self._clothing_items[index]
        _check_wear_count(current, changes)
        updated = replace(current, **changes)
        items = list(self._clothing_items)
        items[index] = updated
        self._clothing_items = items
        await self._write_collection(CLOTHING_ITEMS_KEY, self._clothing_items)
        return updated

    @instrument_operation("delete_clothing_item")
    async def delete_clothing_item(self, item_id: str) -> bool:
        remaining = [item for item in self._clothing_items if item.id != item_id]
        if len(remaining) == len(self._clothing_items):
            log_event(LOGGER, logging.INFO, "catalog_delete_skipped", item_id=item_id, collection=CLOTHING_ITEMS_KEY)
            return False
        self._clothing_items = remaining
        await self._write_collection(CLOTHING_ITEMS_KEY, self._clothing_items)
        return True

    async def record_item_worn(self, item_id: str) -> Optional[ClothingItem]:
        index = _find_index(self._clothing_items, item_id)
        if index is None:
            return None
        current = self._clothing_items[index]
        return await self.update_clothing_item(
            item_id, {"wear_count": current.wear_count + 1, "last_worn": self._timestamp()}
        )

    async def toggle_clothing_favorite(self, item_id: str) -> Optional[ClothingItem]:
        index = _find_index(self._clothing_items, item_id)
        if index is None:
            return None
        return await self.update_clothing_item(
            item_id, {"is_favorite": not self._clothing_items[index].is_favorite}
        )

    # -- outfits ---------------------------------------------------------

    @instrument_operation("add_outfit")
    async def add_outfit(self, fields: Mapping[str, Any]) -> Outfit:
        values = normalise_field_names(fields, OUTFIT_FIELDS)
        for managed in OUTFIT_MANAGED_FIELDS:
            values.pop(managed, None)
        if not values.get("items"):
            raise ValueError("An outfit needs at least one clothing item")
        values.setdefault("name", "")
        outfit = Outfit(
            id=self._unique_id(self._outfits),
            date_created=self._timestamp(),
            wear_count=0,
            is_favorite=False,
            **values,
        )
        self._outfits = [*self._outfits, outfit]
        await self._write_collection(OUTFITS_KEY, self._outfits)
        return outfit

    @instrument_operation("update_outfit")
    async def update_outfit(self, outfit_id: str, updates: Mapping[str, Any]) -> Optional[Outfit]:
        index = _find_index(self._outfits, outfit_id)
        if index is None:
            log_event(LOGGER, logging.INFO, "catalog_update_skipped", item_id=outfit_id, collection=OUTFITS_KEY)
            return None
        changes = normalise_field_names(updates, OUTFIT_FIELDS)
        changes.pop("id", None)
        if "items" in changes and not changes["items"]:
            raise ValueError("An outfit needs at least one clothing item")
        current = self._outfits[index]
        _check_wear_count(current, changes)
        updated = replace(current, **changes)
        outfits = list(self._outfits)
        outfits[index] = updated
        self._outfits = outfits
        await self._write_collection(OUTFITS_KEY, self._outfits)
        return updated

    @instrument_operation("delete_outfit")
    async def delete_outfit(self, outfit_id: str) -> bool:
        remaining = [outfit for outfit in self._outfits if outfit.id != outfit_id]
        if len(remaining) == len(self._outfits):
            log_event(LOGGER, logging.INFO, "catalog_delete_skipped", item_id=outfit_id, collection=OUTFITS_KEY)
            return False
        self._outfits = remaining
        await self._write_collection(OUTFITS_KEY, self._outfits)
        return True

    async def record_outfit_worn(self, outfit_id: str) -> Optional[Outfit]:
        index = _find_index(self._outfits, outfit_id)
        if index is None:
            return None
        current = self._outfits[index]
        return await self.update_outfit(
            outfit_id, {"wear_count": current.wear_count + 1, "last_worn": self._timestamp()}
        )

    async def toggle_outfit_favorite(self, outfit_id: str) -> Optional[Outfit]:
        index = _find_index(self._outfits, outfit_id)
        if index is None:
            return None
        return await self.update_outfit(outfit_id, {"is_favorite": not self._outfits[index].is_favorite})

    async def save_suggestion(self, suggestion: OutfitSuggestion) -> Outfit:
        """Persist a generated suggestion as a regular outfit."""

        return await self.add_outfit(
            {
                "name": suggestion.outfit.name,
                "items": suggestion.outfit.items,
                "occasion": suggestion.occasion,
                "weather": suggestion.weather,
                "season": season_for(self._clock()),
                "rating": 0,
                "tags": list(suggestion.outfit.tags),
            }
        )

    # -- suggestions and views ------------------------------------------

    @instrument_operation("generate_outfit_suggestions")
    def generate_outfit_suggestions(
        self, occasion: str, weather: str, age: int = 25, gender: str = "non-binary"
    ) -> List[OutfitSuggestion]:
        """Suggest outfits from the current items; an invalid request yields no suggestions."""

        try:
            request = SuggestionRequest(occasion=occasion, weather=weather, age=age, gender=gender)
        except ValidationError as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "suggestion_request_invalid",
                error_count=exc.error_count(),
                fields=[".".join(str(part) for part in error["loc"]) for error in exc.errors()],
            )
            return []
        return generate_outfit_suggestions(
            self._clothing_items,
            request.occasion,
            request.weather,
            request.age,
            request.gender,
            rng=self._rng,
            now=self._clock(),
        )

    def browse_clothing_items(
        self, query: str = "", category: str = ALL_CATEGORIES, sort_by: str = "dateAdded"
    ) -> List[ClothingItem]:
        return browse_clothing_items(self._clothing_items, query=query, category=category, sort_by=sort_by)

    def sorted_outfits(self, sort_by: str = "dateCreated") -> List[Outfit]:
        return sort_outfits(self._outfits, sort_by=sort_by)

    def wardrobe_summary(self) -> WardrobeSummary:
        return summarize_wardrobe(self._clothing_items, self._outfits)

    def get_shopping_suggestions(self, budget: float, preferences: Sequence[str] | None = None) -> List[Dict[str, Any]]:
        return get_shopping_suggestions(budget, preferences)


__all__ = ["WardrobeCatalog", "CLOTHING_ITEMS_KEY", "OUTFITS_KEY"]
