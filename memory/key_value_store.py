"""Asynchronous key-value stores backing the wardrobe catalog.

Each store maps a string key to a string value. The catalog keeps one key per
collection and overwrites the whole serialised collection on every mutation, so
stores only need whole-value ``get`` and ``set``.
"""
from __future__ import annotations

import asyncio
import re
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Dict, Optional

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]+$")


class StorageError(RuntimeError):
    """Raised when a backing store cannot be read or written."""


def _check_key(key: str) -> str:
    if not _KEY_PATTERN.match(key or ""):
        raise ValueError(f"Invalid storage key {key!r}")
    return key


class KeyValueStore:
    """Interface for string blob persistence."""

    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store, used for tests and ephemeral runs."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self.values: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.values.get(_check_key(key))

    async def set(self, key: str, value: str) -> None:
        self.values[_check_key(key)] = value


class JSONFileKeyValueStore(KeyValueStore):
    """One file per key under ``base_dir``; suitable for local runs."""

    def __init__(self, base_dir: str | Path = "data/wardrobe") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{_check_key(key)}.json"

    def _read(self, path: Path) -> Optional[str]:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    @staticmethod
    def _write(path: Path, value: str) -> None:
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    async def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return await asyncio.to_thread(self._read, path)
        except OSError as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    async def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(self._write, path, value)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc


class SQLiteKeyValueStore(KeyValueStore):
    """SQLite-backed store with a single key/value table."""

    def __init__(self, database_path: str | Path = "data/wardrobe.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_entries (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                );
                """
            )

    def _read(self, key: str) -> Optional[str]:
        with closing(self._connect()) as conn:
            row = conn.execute("SELECT value FROM kv_entries WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def _write(self, key: str, value: str) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                "INSERT INTO kv_entries(key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)\n"
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (key, value),
            )

    async def get(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._read, _check_key(key))
        except sqlite3.Error as exc:
            raise StorageError(f"Could not read key {key!r}: {exc}") from exc

    async def set(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._write, _check_key(key), value)
        except sqlite3.Error as exc:
            raise StorageError(f"Could not write key {key!r}: {exc}") from exc


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JSONFileKeyValueStore",
    "SQLiteKeyValueStore",
    "StorageError",
]
