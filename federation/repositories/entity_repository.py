"""
Generic CRUD over one entity collection stored under a single key.

Each operation is a full read-modify-write cycle against the store; the
repository keeps no state between calls. There is no compare-and-swap:
two writers racing on the same collection can lose an update. Set
``serialize_writes`` to queue the cycles of one repository behind a lock
when several coroutines of the same process write concurrently.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import replace as dc_replace
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from federation.core.app_logging import get_logger
from federation.core.ids import generate_id
from federation.domain.entities import EventRegistration, Record, utc_now_iso
from federation.domain.validation import ValidationError
from federation.repositories.keys import EntityKind, storage_key
from federation.repositories.kv_store import KeyValueStore, StorageIOError

T = TypeVar("T", bound=Record)

logger = get_logger(__name__)


class EntityRepository(Generic[T]):
    """Typed collection of ``entity_type`` records under ``kind``'s storage key."""

    def __init__(
        self,
        store: KeyValueStore,
        kind: EntityKind,
        entity_type: type[T],
        *,
        key_prefix: str = "",
        id_generator: Callable[[], str] = generate_id,
        validator: Optional[Callable[[T], None]] = None,
        newest_first: bool = False,
        serialize_writes: bool = False,
    ) -> None:
        self.store = store
        self.kind = kind
        self.entity_type = entity_type
        self.key = storage_key(kind, key_prefix)
        self.id_generator = id_generator
        self.validator = validator
        self.newest_first = newest_first
        self.serialize_writes = serialize_writes
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    # -------------------------------------- helpers --------------------------------------
    def _loop_lock(self) -> asyncio.Lock:
        # an asyncio.Lock binds to one event loop; start a fresh one when the loop changes
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    @asynccontextmanager
    async def _writing(self):
        if not self.serialize_writes:
            yield
            return
        async with self._loop_lock():
            yield

    async def load(self) -> list[T]:
        """Load the collection, raising StorageIOError on I/O failure or corrupt data."""
        raw = await self.store.get(self.key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise StorageIOError(f"Collection {self.key!r} is not a list", self.key)
        try:
            return [self.entity_type.from_dict(item) for item in raw]
        except (TypeError, ValueError) as exc:
            raise StorageIOError(f"Collection {self.key!r} holds a malformed record: {exc}", self.key) from exc

    async def _write(self, items: Iterable[T]) -> None:
        await self.store.set(self.key, [item.to_dict() for item in items])

    def _validate(self, entity: T) -> None:
        if self.validator is not None:
            self.validator(entity)

    def _prepare_new(self, entity: T) -> T:
        """Hook applied to records on creation."""
        return entity

    def _prepare_replacement(self, existing: T, entity: T) -> T:
        """Hook applied when ``entity`` overwrites ``existing``."""
        return entity

    def _normalize_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Map attribute or JSON field names onto JSON keys; reject unknown names."""
        names = self.entity_type.json_names()
        json_keys = set(names.values())
        normalized: dict[str, Any] = {}
        unknown = []
        for name, value in changes.items():
            if name in json_keys:
                normalized[name] = value
            elif name in names:
                normalized[names[name]] = value
            else:
                unknown.append(name)
        if unknown:
            raise ValidationError(f"Unknown {self.entity_type.__name__} field(s): {', '.join(sorted(unknown))}")
        normalized.pop("id", None)
        return normalized

    # -------------------------------------- reads --------------------------------------
    async def list(self) -> list[T]:
        """Return every record; an absent, unreadable or corrupt collection reads as empty."""
        try:
            return await self.load()
        except StorageIOError as exc:
            logger.warning("Error reading %s: %s", self.key, exc, extra={"storage_key": self.key})
            return []

    async def get(self, entity_id: str) -> Optional[T]:
        for item in await self.list():
            if item.id == entity_id:
                return item
        return None

    # -------------------------------------- writes --------------------------------------
    async def create(self, entity: T) -> T:
        """Append ``entity``, generating an id unless the caller supplied an unused one."""
        self._validate(entity)
        async with self._writing():
            items = await self.load()
            if entity.id is None:
                existing_ids = {item.id for item in items}
                new_id = self.id_generator()
                while new_id in existing_ids:
                    new_id = self.id_generator()
                entity = dc_replace(entity, id=new_id)
            elif any(item.id == entity.id for item in items):
                raise ValidationError(f"{self.entity_type.__name__} {entity.id!r} already exists")
            entity = self._prepare_new(entity)
            items = [entity, *items] if self.newest_first else [*items, entity]
            await self._write(items)
        return entity

    async def replace(self, entity: T) -> bool:
        """Overwrite the record with ``entity.id`` wholesale; False when no record matches."""
        if entity.id is None:
            raise ValueError("replace() needs an entity with an id")
        self._validate(entity)
        async with self._writing():
            items = await self.load()
            for index, item in enumerate(items):
                if item.id == entity.id:
                    items[index] = self._prepare_replacement(item, entity)
                    break
            else:
                return False
            await self._write(items)
        return True

    async def upsert(self, entity: T) -> T:
        """
        Create when ``entity`` has no id, otherwise replace the matching record.

        An id that matches nothing leaves the collection untouched; the entity
        is returned as given but will not appear in later listings.
        """
        if entity.id is None:
            return await self.create(entity)
        if not await self.replace(entity):
            logger.warning("Upsert of unknown %s id %s ignored", self.entity_type.__name__, entity.id)
        return entity

    async def patch(self, entity_id: str, changes: Mapping[str, Any]) -> bool:
        """Shallow-merge ``changes`` onto the record; False when the id is unknown."""
        normalized = self._normalize_changes(changes)
        async with self._writing():
            items = await self.load()
            for index, item in enumerate(items):
                if item.id == entity_id:
                    break
            else:
                return False
            merged = item.to_dict()
            merged.update(normalized)
            merged["id"] = entity_id
            updated = self.entity_type.from_dict(merged)
            self._validate(updated)
            items[index] = self._prepare_replacement(item, updated)
            await self._write(items)
        return True

    update_by_id = patch

    async def remove_by_id(self, entity_id: str) -> None:
        """Drop the record with ``entity_id``; unknown ids succeed without change."""
        async with self._writing():
            items = await self.load()
            await self._write([item for item in items if item.id != entity_id])

    async def seed(self, items: Iterable[T]) -> None:
        """Write ``items`` as the whole collection."""
        async with self._writing():
            await self._write(list(items))


class EventRegistrationRepository(EntityRepository[EventRegistration]):
    """Registrations get their date stamped once, when they are created."""

    def _prepare_new(self, entity: EventRegistration) -> EventRegistration:
        return dc_replace(entity, registration_date=utc_now_iso())

    def _prepare_replacement(self, existing: EventRegistration, entity: EventRegistration) -> EventRegistration:
        return dc_replace(entity, registration_date=existing.registration_date)
