"""Shared fixtures: deterministic random, clock and id sources plus item builders."""

from __future__ import annotations

import itertools
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.clothing_item import ClothingItem

FIXED_NOW = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


class SequenceRandom:
    """Replays fixed draws in order; the last value repeats once exhausted."""

    def __init__(self, values: Sequence[float]) -> None:
        self.values: List[float] = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


class FrozenClock:
    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now = self.now + timedelta(**delta)


@pytest.fixture()
def sequence_rng() -> Callable[[Sequence[float]], SequenceRandom]:
    return SequenceRandom


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def id_provider() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def make_item() -> Callable[..., ClothingItem]:
    def _make(
        item_id: str,
        category: str,
        occasions: Iterable[str] = ("party",),
        weather: Iterable[str] = ("cold",),
        tags: Iterable[str] = (),
        **overrides: object,
    ) -> ClothingItem:
        values = {
            "id": item_id,
            "name": overrides.pop("name", item_id),
            "category": category,
            "occasions": list(occasions),
            "weather": list(weather),
            "tags": list(tags),
            "date_added": FIXED_NOW.isoformat(),
        }
        values.update(overrides)
        return ClothingItem(**values)

    return _make
