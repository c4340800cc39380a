"""
Async key-value stores holding one JSON value per string key.

Every backend serializes on ``set`` and parses on ``get``; a missing key
reads as ``None``. Any I/O, encoding or database failure surfaces as
``StorageIOError`` so callers handle a single exception type.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from federation.core.config import Settings, get_settings
from federation.db.models import KeyValueEntry
from federation.db.session import create_all, get_session


class StorageIOError(Exception):
    """Raised when the underlying store cannot read or write a key."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.message = message
        self.key = key


def encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise StorageIOError(f"Value for {key!r} is not JSON serializable: {exc}", key) from exc


def decode(key: str, text: str | None) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except ValueError as exc:
        raise StorageIOError(f"Stored value for {key!r} is not valid JSON: {exc}", key) from exc


class KeyValueStore(ABC):
    """Contract shared by all backends."""

    @abstractmethod
    async def get(self, key: str) -> Any:
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete a key; deleting a missing key is not an error."""

    @abstractmethod
    async def clear(self) -> None:
        ...


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store; keeps serialized text so callers never share objects."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Any:
        return decode(key, self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = encode(key, value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def clear(self) -> None:
        self._data.clear()

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileKeyValueStore(KeyValueStore):
    """All keys live in a single JSON object file, rewritten atomically."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict:
        try:
            if not self.path.exists():
                return {}
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise StorageIOError(f"Could not read {self.path}: {exc}") from exc
        except ValueError as exc:
            raise StorageIOError(f"{self.path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageIOError(f"{self.path} must hold a JSON object")
        return data

    def _save(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageIOError(f"Could not write {self.path}: {exc}") from exc

    def _get_sync(self, key: str) -> Any:
        with self._lock:
            return self._load().get(key)

    def _set_sync(self, key: str, text: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = json.loads(text)
            self._save(data)

    def _remove_sync(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key not in data:
                return
            del data[key]
            self._save(data)

    def _clear_sync(self) -> None:
        with self._lock:
            self._save({})

    async def get(self, key: str) -> Any:
        return await asyncio.to_thread(self._get_sync, key)

    async def set(self, key: str, value: Any) -> None:
        text = encode(key, value)
        await asyncio.to_thread(self._set_sync, key, text)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._remove_sync, key)

    async def clear(self) -> None:
        await asyncio.to_thread(self._clear_sync)


class SQLKeyValueStore(KeyValueStore):
    """Keys stored as rows of the ``kv_entries`` table."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            create_all(self.database_url)
            self._schema_ready = True

    def _get_sync(self, key: str) -> str | None:
        self._ensure_schema()
        with get_session(self.database_url) as session:
            entity = session.get(KeyValueEntry, key)
            return entity.value if entity else None

    def _set_sync(self, key: str, text: str) -> None:
        self._ensure_schema()
        with get_session(self.database_url) as session:
            entity = session.get(KeyValueEntry, key)
            if entity is None:
                session.add(KeyValueEntry(key=key, value=text))
            else:
                entity.value = text
            session.commit()

    def _remove_sync(self, key: str) -> None:
        self._ensure_schema()
        with get_session(self.database_url) as session:
            session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            session.commit()

    def _clear_sync(self) -> None:
        self._ensure_schema()
        with get_session(self.database_url) as session:
            session.execute(delete(KeyValueEntry))
            session.commit()

    async def _run(self, fn, *args, key: str | None = None):
        try:
            return await asyncio.to_thread(fn, *args)
        except SQLAlchemyError as exc:
            raise StorageIOError(f"Database operation failed: {exc}", key) from exc

    async def get(self, key: str) -> Any:
        return decode(key, await self._run(self._get_sync, key, key=key))

    async def set(self, key: str, value: Any) -> None:
        await self._run(self._set_sync, key, encode(key, value), key=key)

    async def remove(self, key: str) -> None:
        await self._run(self._remove_sync, key, key=key)

    async def clear(self) -> None:
        await self._run(self._clear_sync)


def build_store(settings: Settings | None = None) -> KeyValueStore:
    """Instantiate the backend selected by ``FEDERATION_STORE_BACKEND``."""
    settings = settings or get_settings()
    if settings.store_backend == "memory":
        return MemoryKeyValueStore()
    if settings.store_backend == "sql":
        return SQLKeyValueStore(settings.database_url)
    return JsonFileKeyValueStore(settings.data_file)
