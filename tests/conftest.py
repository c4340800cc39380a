from __future__ import annotations

import sys
from pathlib import Path

import pytest

# make the federation package importable without installing it
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from federation.app_factory import build_federation  # noqa: E402
from federation.core import config as core_config  # noqa: E402
from federation.repositories.kv_store import MemoryKeyValueStore, StorageIOError  # noqa: E402


class FailingStore(MemoryKeyValueStore):
    """Memory store whose operations can be switched to fail with StorageIOError."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_get = False
        self.fail_set = False
        self.fail_remove = False
        self.set_calls = 0

    async def get(self, key):
        if self.fail_get:
            raise StorageIOError("disk unavailable", key)
        return await super().get(key)

    async def set(self, key, value):
        self.set_calls += 1
        if self.fail_set:
            raise StorageIOError("disk full", key)
        await super().set(key, value)

    async def remove(self, key):
        if self.fail_remove:
            raise StorageIOError("disk unavailable", key)
        await super().remove(key)


@pytest.fixture()
def settings(monkeypatch, tmp_path):
    """Settings pointing at a throwaway data dir; caches reset around each test."""
    monkeypatch.setenv("FEDERATION_STORE_BACKEND", "memory")
    monkeypatch.setenv("FEDERATION_DATA_FILE", str(tmp_path / "federation.json"))
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'federation.db'}")
    core_config.get_settings.cache_clear()
    yield core_config.get_settings()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def store() -> FailingStore:
    return FailingStore()


@pytest.fixture()
def fed(settings, store):
    return build_federation(settings=settings, store=store)
