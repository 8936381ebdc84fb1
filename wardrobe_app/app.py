"""Wardrobe planner bootstrap."""

import logging
import random

from memory.key_value_store import (
    InMemoryKeyValueStore,
    JSONFileKeyValueStore,
    KeyValueStore,
    SQLiteKeyValueStore,
)
from tools.wardrobe_catalog import WardrobeCatalog
from wardrobe_app.config import WardrobeConfig
from wardrobe_app.logging_config import configure_logging, get_logger, log_event, operation_context

LOGGER = get_logger(__name__)


def build_key_value_store(config: WardrobeConfig) -> KeyValueStore:
    """Map the configured backend onto a persistence adapter."""

    if config.storage_backend == "memory":
        return InMemoryKeyValueStore()
    if config.storage_backend == "json":
        return JSONFileKeyValueStore(config.storage_path)
    if config.storage_backend == "sqlite":
        return SQLiteKeyValueStore(config.storage_path)
    raise ValueError(f"Unsupported storage backend '{config.storage_backend}'")


class WardrobeApp:
    """Wires configuration, logging, persistence and the catalog together."""

    def __init__(self, config: WardrobeConfig | None = None, store: KeyValueStore | None = None) -> None:
        self.config = config or WardrobeConfig.from_env()
        configure_logging(self.config.log_level)
        self.store = store or build_key_value_store(self.config)
        rng = random.Random(self.config.random_seed) if self.config.random_seed is not None else None
        self.catalog = WardrobeCatalog(self.store, rng=rng)

    async def start(self) -> WardrobeCatalog:
        """Load persisted collections; safe to call once per process."""

        with operation_context("startup"):
            await self.catalog.load()
            log_event(
                LOGGER,
                logging.INFO,
                "app_started",
                storage_backend=self.config.storage_backend,
                environment=self.config.environment or "local",
            )
        return self.catalog


__all__ = ["WardrobeApp", "build_key_value_store"]
