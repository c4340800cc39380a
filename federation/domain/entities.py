"""
Typed records persisted by the repositories.

Records travel through the key-value store as camelCase JSON objects; each
dataclass field declares its JSON name in the field metadata. Every field
has a default so that partially written legacy records still load; the
validators in ``federation.domain.validation`` decide what is required.
Keys a record type does not model are kept in ``extras`` and written back
unchanged, so a rewrite of the collection never drops them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar

R = TypeVar("R", bound="Record")


class HockeyType(str, Enum):
    INDOOR = "Indoor"
    OUTDOOR = "Outdoor"


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def json_field(name: str, default: Any = "", *, omit_none: bool = False, default_factory: Any = None) -> Any:
    metadata = {"json": name, "omit_none": omit_none}
    if default_factory is not None:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=default, metadata=metadata)


@dataclass
class Record:
    """Base for persisted records; subclasses are dataclasses with an ``id``."""

    id: Optional[str] = json_field("id", None)
    extras: dict[str, Any] = field(default_factory=dict, repr=False, compare=False, metadata={"extras": True})

    @classmethod
    def json_names(cls) -> dict[str, str]:
        return {f.name: f.metadata.get("json", f.name) for f in fields(cls) if not f.metadata.get("extras")}

    @classmethod
    def from_dict(cls: type[R], data: Mapping[str, Any]) -> R:
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} record must be an object, got {type(data).__name__}")
        names = cls.json_names()
        kwargs = {}
        for attr, key in names.items():
            if key in data:
                kwargs[attr] = data[key]
        known = set(names.values())
        kwargs["extras"] = {k: v for k, v in data.items() if k not in known}
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extras)
        for f in fields(self):
            if f.metadata.get("extras"):
                continue
            value = getattr(self, f.name)
            if value is None and f.metadata.get("omit_none"):
                continue
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, list):
                value = list(value)
            out[f.metadata.get("json", f.name)] = value
        return out


@dataclass
class Team(Record):
    name: str = json_field("name")
    category: str = json_field("category")
    division: str = json_field("division")
    contact_name: str = json_field("contactName")
    contact_email: str = json_field("contactEmail")
    contact_phone: str = json_field("contactPhone")


@dataclass
class Player(Record):
    first_name: str = json_field("firstName")
    last_name: str = json_field("lastName")
    date_of_birth: str = json_field("dateOfBirth")
    gender: str = json_field("gender")
    team_id: Optional[str] = json_field("teamId", None)
    position: str = json_field("position")
    email: str = json_field("email")
    phone: str = json_field("phone")
    bio: Optional[str] = json_field("bio", None, omit_none=True)
    profile_image: Optional[str] = json_field("profileImage", None, omit_none=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Event(Record):
    title: str = json_field("title")
    date: str = json_field("date")
    registration_deadline: str = json_field("registrationDeadline")
    location: str = json_field("location")
    registration_fee: str = json_field("registrationFee")
    description: str = json_field("description")
    category: str = json_field("category")
    hockey_type: str = json_field("hockeyType", HockeyType.OUTDOOR.value)
    min_players: int = json_field("minPlayers", 1)


@dataclass
class EventRegistration(Record):
    event_id: str = json_field("eventId")
    team_id: str = json_field("teamId")
    player_ids: list[str] = json_field("playerIds", default_factory=list)
    accepted_terms: bool = json_field("acceptedTerms", False)
    registration_date: Optional[str] = json_field("registrationDate", None)


@dataclass
class PublicUser(Record):
    """User view that leaves the service boundary: never carries a password."""

    username: str = json_field("username")
    email: str = json_field("email")
    is_admin: bool = json_field("isAdmin", False)
    created_at: Optional[str] = json_field("createdAt", None)


@dataclass
class User(Record):
    username: str = json_field("username")
    password: str = json_field("password")
    email: str = json_field("email")
    is_admin: bool = json_field("isAdmin", False)
    created_at: Optional[str] = json_field("createdAt", None)

    def public(self) -> PublicUser:
        data = asdict(self)
        data.pop("password", None)
        return PublicUser(**data)

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, username={self.username!r}, is_admin={self.is_admin!r})"


@dataclass
class Announcement(Record):
    title: str = json_field("title")
    content: str = json_field("content")
    created_by: str = json_field("createdBy")
    created_at: Optional[str] = json_field("createdAt", None)
    important: bool = json_field("important", False)
