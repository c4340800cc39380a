"""Composition root: one store, one repository per entity kind, shared by every service."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from federation.core.app_logging import get_logger
from federation.core.config import Settings, get_settings
from federation.core.ids import generate_id
from federation.domain.entities import Announcement, Event, EventRegistration, Player, Team, User
from federation.domain.validation import validate_announcement, validate_event, validate_player, validate_team
from federation.repositories.entity_repository import EntityRepository, EventRegistrationRepository
from federation.repositories.keys import EntityKind
from federation.repositories.kv_store import KeyValueStore, build_store
from federation.services.announcement_service import AnnouncementService
from federation.services.auth_service import UserAccountService
from federation.services.authorization import AuthorizationGate
from federation.services.registration_service import EventRegistrationService
from federation.services.roster_service import RosterService
from federation.services.seed_service import BootstrapSeeder

logger = get_logger(__name__)


@dataclass
class Federation:
    settings: Settings
    store: KeyValueStore
    teams: EntityRepository[Team]
    players: EntityRepository[Player]
    events: EntityRepository[Event]
    registrations: EventRegistrationRepository
    users: EntityRepository[User]
    announcements: EntityRepository[Announcement]
    gate: AuthorizationGate
    accounts: UserAccountService
    announcement_feed: AnnouncementService
    roster: RosterService
    event_entries: EventRegistrationService
    seeder: BootstrapSeeder

    async def startup(self) -> dict[str, int]:
        """Run on every application start; seeding problems never abort startup."""
        return await self.seeder.ensure_seeded()

    async def clear_all(self) -> None:
        await self.store.clear()
        logger.info("Storage cleared")


def build_federation(settings: Optional[Settings] = None, store: Optional[KeyValueStore] = None) -> Federation:
    settings = settings or get_settings()
    store = store if store is not None else build_store(settings)
    def repo(kind, entity_type, cls=EntityRepository, **kwargs):
        return cls(
            store,
            kind,
            entity_type,
            key_prefix=settings.key_prefix,
            id_generator=generate_id,
            serialize_writes=settings.serialize_writes,
            **kwargs,
        )

    teams = repo(EntityKind.TEAMS, Team, validator=validate_team)
    players = repo(EntityKind.PLAYERS, Player, validator=validate_player)
    events = repo(EntityKind.EVENTS, Event, validator=validate_event)
    registrations = repo(EntityKind.EVENT_REGISTRATIONS, EventRegistration, cls=EventRegistrationRepository)
    users = repo(EntityKind.USERS, User)
    announcements = repo(EntityKind.ANNOUNCEMENTS, Announcement, validator=validate_announcement, newest_first=True)

    gate = AuthorizationGate(users, verify_actor=settings.verify_actor)
    roster = RosterService(teams, players)
    return Federation(
        settings=settings,
        store=store,
        teams=teams,
        players=players,
        events=events,
        registrations=registrations,
        users=users,
        announcements=announcements,
        gate=gate,
        accounts=UserAccountService(store, users, settings=settings),
        announcement_feed=AnnouncementService(announcements, gate),
        roster=roster,
        event_entries=EventRegistrationService(events, teams, registrations, roster),
        seeder=BootstrapSeeder(
            teams=teams,
            players=players,
            events=events,
            registrations=registrations,
            users=users,
            announcements=announcements,
            id_generator=generate_id,
            settings=settings,
        ),
    )
