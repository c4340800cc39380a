"""Entity kinds and the storage keys they map to."""
from __future__ import annotations

from enum import Enum


class EntityKind(str, Enum):
    TEAMS = "teams"
    PLAYERS = "players"
    EVENTS = "events"
    EVENT_REGISTRATIONS = "event_registrations"
    USERS = "users"
    ANNOUNCEMENTS = "announcements"
    CURRENT_USER = "current_user"


def storage_key(kind: EntityKind, prefix: str = "") -> str:
    if not isinstance(kind, EntityKind):
        raise TypeError(f"expected EntityKind, got {kind!r}")
    return f"{prefix}{kind.value}"
