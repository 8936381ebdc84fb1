"""Catalog CRUD, write-through persistence and load-failure handling."""

from __future__ import annotations

import json
import random
from datetime import datetime, timezone

import pytest

from conftest import FIXED_NOW
from memory.key_value_store import InMemoryKeyValueStore, KeyValueStore, StorageError
from tools.wardrobe_catalog import CLOTHING_ITEMS_KEY, OUTFITS_KEY, WardrobeCatalog

SHIRT = {
    "name": "Oxford shirt",
    "category": "top",
    "color": "blue",
    "occasions": ["work"],
    "weather": ["cool", "cold"],
}
TROUSERS = {"name": "Wool trousers", "category": "bottom", "occasions": ["work"], "weather": ["cold"]}


class FailingStore(KeyValueStore):
    def __init__(self, fail_reads: bool = True, fail_writes: bool = True) -> None:
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.values = {}

    async def get(self, key: str):
        if self.fail_reads:
            raise StorageError(f"cannot read {key}")
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError(f"cannot write {key}")
        self.values[key] = value


@pytest.fixture()
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def catalog(store, id_provider, clock) -> WardrobeCatalog:
    return WardrobeCatalog(store, id_provider=id_provider, clock=clock, rng=random.Random(3))


def _stored(store: InMemoryKeyValueStore, key: str):
    return json.loads(store.values[key])


@pytest.mark.asyncio
async def test_load_on_empty_store(catalog) -> None:
    assert catalog.loading is True
    await catalog.load()
    assert catalog.loading is False
    assert catalog.clothing_items == []
    assert catalog.outfits == []


@pytest.mark.asyncio
async def test_load_reads_existing_records(store, id_provider, clock) -> None:
    store.values[CLOTHING_ITEMS_KEY] = json.dumps(
        [{"id": "old", "name": "Parka", "category": "outerwear", "wearCount": 2, "dateAdded": "2023-11-01T00:00:00Z"}]
    )
    catalog = WardrobeCatalog(store, id_provider=id_provider, clock=clock)
    await catalog.load()

    [item] = catalog.clothing_items
    assert item.id == "old"
    assert item.wear_count == 2
    assert catalog.outfits == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        '{"id": "x"}',
        "[1, 2]",
        '[{"name": "no id"}]',
        '[{"id": "o1", "name": "x", "items": ["not-a-record"]}]',
        '[{"id": "o1", "name": "x", "rating": "great"}]',
    ],
)
async def test_load_treats_malformed_data_as_empty(store, payload: str) -> None:
    store.values[CLOTHING_ITEMS_KEY] = payload
    store.values[OUTFITS_KEY] = payload
    catalog = WardrobeCatalog(store)

    await catalog.load()

    assert catalog.clothing_items == []
    assert catalog.outfits == []
    assert catalog.loading is False


@pytest.mark.asyncio
async def test_load_survives_storage_errors() -> None:
    catalog = WardrobeCatalog(FailingStore())
    await catalog.load()
    assert catalog.loading is False
    assert catalog.clothing_items == []


@pytest.mark.asyncio
async def test_add_item_assigns_managed_fields(catalog, store) -> None:
    await catalog.load()
    item = await catalog.add_clothing_item({**SHIRT, "id": "spoofed", "wearCount": 9, "isFavorite": True})

    assert item.id == "id-1"
    assert item.date_added == FIXED_NOW.isoformat()
    assert item.wear_count == 0
    assert item.is_favorite is False
    assert _stored(store, CLOTHING_ITEMS_KEY) == [item.to_record()]


@pytest.mark.asyncio
async def test_add_item_accepts_camel_case_keys(catalog) -> None:
    item = await catalog.add_clothing_item({**SHIRT, "imageUri": "file:///shirt.jpg"})
    assert item.image_uri == "file:///shirt.jpg"


@pytest.mark.asyncio
async def test_add_item_requires_category(catalog, store) -> None:
    with pytest.raises(ValueError):
        await catalog.add_clothing_item({"name": "Mystery"})
    with pytest.raises(ValueError):
        await catalog.add_clothing_item({"name": "Hat", "category": "headwear"})
    assert catalog.clothing_items == []
    assert CLOTHING_ITEMS_KEY not in store.values


@pytest.mark.asyncio
async def test_ids_stay_unique_with_colliding_provider(store, clock) -> None:
    catalog = WardrobeCatalog(store, id_provider=lambda: "same", clock=clock)
    first = await catalog.add_clothing_item(SHIRT)
    second = await catalog.add_clothing_item(SHIRT)
    third = await catalog.add_clothing_item(SHIRT)
    assert [first.id, second.id, third.id] == ["same", "same-1", "same-2"]


@pytest.mark.asyncio
async def test_update_item_merges_and_keeps_id(catalog, store) -> None:
    item = await catalog.add_clothing_item(SHIRT)

    updated = await catalog.update_clothing_item(item.id, {"color": "white", "id": "hijack", "isFavorite": True})

    assert updated.id == item.id
    assert updated.color == "white"
    assert updated.name == "Oxford shirt"
    assert updated.is_favorite is True
    assert _stored(store, CLOTHING_ITEMS_KEY)[0]["color"] == "white"


@pytest.mark.asyncio
async def test_update_missing_item_leaves_storage_untouched(catalog, store) -> None:
    await catalog.add_clothing_item(SHIRT)
    before = dict(store.values)

    assert await catalog.update_clothing_item("nope", {"color": "red"}) is None
    assert store.values == before


@pytest.mark.asyncio
async def test_update_rejects_decreasing_wear_count(catalog) -> None:
    item = await catalog.add_clothing_item(SHIRT)
    await catalog.record_item_worn(item.id)

    with pytest.raises(ValueError):
        await catalog.update_clothing_item(item.id, {"wear_count": 0})
    assert catalog.clothing_items[0].wear_count == 1


@pytest.mark.asyncio
async def test_delete_item(catalog, store) -> None:
    shirt = await catalog.add_clothing_item(SHIRT)
    trousers = await catalog.add_clothing_item(TROUSERS)

    assert await catalog.delete_clothing_item(shirt.id) is True
    assert [item.id for item in catalog.clothing_items] == [trousers.id]
    assert [record["id"] for record in _stored(store, CLOTHING_ITEMS_KEY)] == [trousers.id]

    before = dict(store.values)
    assert await catalog.delete_clothing_item("missing") is False
    assert store.values == before


@pytest.mark.asyncio
async def test_deleting_item_keeps_outfit_snapshot(catalog) -> None:
    shirt = await catalog.add_clothing_item(SHIRT)
    outfit = await catalog.add_outfit({"name": "Office", "items": [shirt], "occasion": "work"})

    await catalog.delete_clothing_item(shirt.id)

    assert catalog.outfits[0].id == outfit.id
    assert catalog.outfits[0].items[0].id == shirt.id


@pytest.mark.asyncio
async def test_wear_and_favorite_helpers(catalog, clock) -> None:
    item = await catalog.add_clothing_item(SHIRT)
    clock.advance(days=2)

    worn = await catalog.record_item_worn(item.id)
    favorite = await catalog.toggle_clothing_favorite(item.id)

    assert worn.wear_count == 1
    assert worn.last_worn == clock.now.isoformat()
    assert favorite.is_favorite is True
    assert (await catalog.toggle_clothing_favorite(item.id)).is_favorite is False
    assert await catalog.record_item_worn("missing") is None


@pytest.mark.asyncio
async def test_outfit_crud(catalog, store) -> None:
    shirt = await catalog.add_clothing_item(SHIRT)
    trousers = await catalog.add_clothing_item(TROUSERS)

    outfit = await catalog.add_outfit(
        {"name": "Office", "items": [shirt, trousers.to_record()], "occasion": "work", "weather": "cold", "rating": 4}
    )
    assert outfit.date_created == FIXED_NOW.isoformat()
    assert outfit.wear_count == 0
    assert [item.id for item in outfit.items] == [shirt.id, trousers.id]
    assert _stored(store, OUTFITS_KEY)[0]["items"][1]["name"] == "Wool trousers"

    renamed = await catalog.update_outfit(outfit.id, {"name": "Monday", "rating": 5})
    assert renamed.name == "Monday"
    assert renamed.rating == 5

    worn = await catalog.record_outfit_worn(outfit.id)
    assert worn.wear_count == 1
    assert (await catalog.toggle_outfit_favorite(outfit.id)).is_favorite is True

    assert await catalog.delete_outfit(outfit.id) is True
    assert catalog.outfits == []
    assert _stored(store, OUTFITS_KEY) == []


@pytest.mark.asyncio
async def test_outfit_requires_items(catalog, store) -> None:
    with pytest.raises(ValueError):
        await catalog.add_outfit({"name": "Empty", "items": []})
    assert OUTFITS_KEY not in store.values

    shirt = await catalog.add_clothing_item(SHIRT)
    outfit = await catalog.add_outfit({"name": "Solo", "items": [shirt]})
    with pytest.raises(ValueError):
        await catalog.update_outfit(outfit.id, {"items": []})


@pytest.mark.asyncio
async def test_update_missing_outfit_leaves_storage_untouched(catalog, store) -> None:
    shirt = await catalog.add_clothing_item(SHIRT)
    await catalog.add_outfit({"name": "Solo", "items": [shirt]})
    before = dict(store.values)

    assert await catalog.update_outfit("missing", {"name": "x"}) is None
    assert await catalog.delete_outfit("missing") is False
    assert store.values == before


@pytest.mark.asyncio
async def test_write_failures_keep_memory_state() -> None:
    catalog = WardrobeCatalog(FailingStore(fail_reads=False))
    await catalog.load()

    item = await catalog.add_clothing_item(SHIRT)

    assert catalog.clothing_items == [item]
    assert catalog.store.values == {}


@pytest.mark.asyncio
async def test_state_survives_reload(store, id_provider, clock) -> None:
    catalog = WardrobeCatalog(store, id_provider=id_provider, clock=clock)
    shirt = await catalog.add_clothing_item(SHIRT)
    await catalog.add_outfit({"name": "Office", "items": [shirt]})

    reloaded = WardrobeCatalog(store)
    await reloaded.load()

    assert reloaded.clothing_items == catalog.clothing_items
    assert reloaded.outfits == catalog.outfits


@pytest.mark.asyncio
async def test_catalog_suggestions_and_save(catalog, store) -> None:
    await catalog.add_clothing_item(SHIRT)
    await catalog.add_clothing_item(TROUSERS)
    await catalog.add_clothing_item({"name": "Coat", "category": "outerwear", "occasions": ["work"], "weather": ["cold"]})

    [suggestion] = catalog.generate_outfit_suggestions("work", "cold", age=40, gender="male")
    assert [item.category for item in suggestion.outfit.items] == ["top", "bottom", "outerwear"]
    assert suggestion.outfit.season == "winter"
    assert catalog.outfits == []

    saved = await catalog.save_suggestion(suggestion)
    assert saved.id != suggestion.id
    assert saved.occasion == "work"
    assert [record["id"] for record in _stored(store, OUTFITS_KEY)] == [saved.id]


@pytest.mark.asyncio
async def test_invalid_suggestion_request_yields_no_suggestions(catalog) -> None:
    await catalog.add_clothing_item(SHIRT)
    await catalog.add_clothing_item(TROUSERS)

    assert catalog.generate_outfit_suggestions("", "cold") == []
    assert catalog.generate_outfit_suggestions("work", "cold", age=-1) == []
    assert len(catalog.generate_outfit_suggestions("work", "cold", age=40)) == 1


@pytest.mark.asyncio
async def test_datetime_timestamps_are_stored_as_iso_strings(catalog, store) -> None:
    worn_at = datetime(2024, 1, 10, 18, 0, tzinfo=timezone.utc)

    item = await catalog.add_clothing_item({**SHIRT, "last_worn": worn_at})
    await catalog.add_clothing_item(TROUSERS)

    assert item.last_worn == worn_at.isoformat()
    assert [record["lastWorn"] for record in _stored(store, CLOTHING_ITEMS_KEY)] == [worn_at.isoformat(), None]


@pytest.mark.asyncio
async def test_unencodable_record_is_logged_not_raised(catalog, store) -> None:
    item = await catalog.add_clothing_item({**SHIRT, "pattern": {"stripes"}})

    assert catalog.clothing_items == [item]
    assert CLOTHING_ITEMS_KEY not in store.values
    assert await catalog.delete_clothing_item(item.id) is True
    assert _stored(store, CLOTHING_ITEMS_KEY) == []


@pytest.mark.asyncio
async def test_stored_ratings_are_numeric_and_sortable(store) -> None:
    store.values[OUTFITS_KEY] = json.dumps(
        [{"id": "a", "name": "Brunch", "rating": "4.5"}, {"id": "b", "name": "Office", "rating": 3}]
    )
    catalog = WardrobeCatalog(store)
    await catalog.load()

    assert [outfit.id for outfit in catalog.sorted_outfits("rating")] == ["a", "b"]
    assert [outfit.rating for outfit in catalog.outfits] == [4.5, 3.0]


@pytest.mark.asyncio
async def test_catalog_views(catalog) -> None:
    await catalog.add_clothing_item(SHIRT)
    await catalog.add_clothing_item(TROUSERS)

    assert [item.name for item in catalog.browse_clothing_items(query="wool")] == ["Wool trousers"]
    summary = catalog.wardrobe_summary()
    assert summary.total_items == 2
    assert summary.items_per_category["bottom"] == 1
    assert catalog.sorted_outfits() == []
    assert len(catalog.get_shopping_suggestions(20)) == 2
