"""
First-run population of empty collections with the canonical sample data.
"""

from __future__ import annotations

from typing import Callable, Sequence

from federation.core.app_logging import get_logger
from federation.core.config import Settings, get_settings
from federation.core.security import hash_password
from federation.domain.entities import Announcement, Event, Player, Team, User, utc_now_iso
from federation.repositories.entity_repository import EntityRepository
from federation.repositories.kv_store import StorageIOError

logger = get_logger(__name__)

SEED_TEAMS = [
    Team(id="1", name="Windhoek Hockey Club", category="Men", division="Premier", contact_name="John Smith", contact_email="john@whc.com", contact_phone="123-456-7890"),
    Team(id="2", name="Coastal Hockey Club", category="Women", division="Premier", contact_name="Sarah Johnson", contact_email="sarah@chc.com", contact_phone="234-567-8901"),
    Team(id="3", name="University of Namibia", category="Men", division="First", contact_name="Michael Brown", contact_email="michael@unam.com", contact_phone="345-678-9012"),
    Team(id="4", name="Namibia Defense Force", category="Women", division="First", contact_name="Emma Williams", contact_email="emma@ndf.com", contact_phone="456-789-0123"),
    Team(id="5", name="Swakopmund Hockey Club", category="Men", division="Premier", contact_name="David Miller", contact_email="david@shc.com", contact_phone="567-890-1234"),
]

SEED_PLAYERS = [
    Player(id="p1", first_name="John", last_name="Smith", date_of_birth="1995-05-15", gender="Male", team_id="1", position="Forward", email="john@example.com", phone="123-456-7890"),
    Player(id="p2", first_name="Sarah", last_name="Johnson", date_of_birth="1997-08-22", gender="Female", team_id="2", position="Midfielder", email="sarah@example.com", phone="234-567-8901"),
    Player(id="p3", first_name="Michael", last_name="Brown", date_of_birth="1994-03-10", gender="Male", team_id="3", position="Defender", email="michael@example.com", phone="345-678-9012"),
    Player(id="p4", first_name="Emma", last_name="Williams", date_of_birth="1996-11-28", gender="Female", team_id="4", position="Goalkeeper", email="emma@example.com", phone="456-789-0123"),
    Player(id="p5", first_name="David", last_name="Miller", date_of_birth="1993-07-05", gender="Male", team_id="5", position="Forward", email="david@example.com", phone="567-890-1234"),
    Player(id="p6", first_name="Olivia", last_name="Davis", date_of_birth="1998-01-30", gender="Female", team_id="2", position="Forward", email="olivia@example.com", phone="555-123-4567"),
    Player(id="p7", first_name="Ethan", last_name="Garcia", date_of_birth="1996-04-18", gender="Male", team_id="1", position="Defender", email="ethan@example.com", phone="555-987-6543"),
    Player(id="p8", first_name="Sophia", last_name="Rodriguez", date_of_birth="1999-09-01", gender="Female", team_id="4", position="Midfielder", email="sophia@example.com", phone="555-555-1212"),
    Player(id="p9", first_name="Liam", last_name="Martinez", date_of_birth="1995-12-12", gender="Male", team_id="3", position="Forward", email="liam@example.com", phone="555-010-2030"),
    Player(id="p10", first_name="Ava", last_name="Hernandez", date_of_birth="1997-06-25", gender="Female", team_id="2", position="Goalkeeper", email="ava@example.com", phone="555-888-9999"),
    Player(id="p11", first_name="Noah", last_name="Lopez", date_of_birth="1994-02-03", gender="Male", team_id="1", position="Midfielder", email="noah@example.com", phone="555-333-4444"),
    Player(id="p12", first_name="Isabella", last_name="Gonzalez", date_of_birth="1998-07-07", gender="Female", team_id="4", position="Forward", email="isabella@example.com", phone="555-777-8888"),
]

SEED_EVENTS = [
    Event(
        id="e1",
        title="National Championship",
        date="2025-06-15",
        location="Windhoek Stadium",
        category="Tournament",
        registration_deadline="2025-05-30",
        description="The annual National Hockey Championship brings together the best teams from across Namibia to compete for the national title.",
        registration_fee="N$500",
        hockey_type="Outdoor",
        min_players=10,
    ),
    Event(
        id="e2",
        title="Junior Development Camp (Indoor)",
        date="2025-07-10",
        location="University of Namibia Hall",
        category="Training",
        registration_deadline="2025-06-25",
        description="An indoor development camp for junior players.",
        registration_fee="N$300",
        hockey_type="Indoor",
        min_players=4,
    ),
    Event(
        id="e3",
        title="Coastal Cup (Outdoor)",
        date="2025-08-05",
        location="Swakopmund Sports Complex Field",
        category="Tournament",
        registration_deadline="2025-07-20",
        description="A regional outdoor tournament for teams from the coastal areas of Namibia.",
        registration_fee="N$400",
        hockey_type="Outdoor",
        min_players=8,
    ),
    Event(
        id="e4",
        title="Advanced Indoor Clinic",
        date="2025-09-12",
        location="Windhoek Indoor Center",
        category="Training",
        registration_deadline="2025-08-30",
        description="An advanced clinic focused on indoor hockey techniques.",
        registration_fee="N$250",
        hockey_type="Indoor",
        min_players=3,
    ),
    Event(
        id="e5",
        title="Schools Outdoor Festival",
        date="2025-10-01",
        location="Windhoek High School Fields",
        category="Festival",
        registration_deadline="2025-09-15",
        description="An outdoor hockey festival for school teams.",
        registration_fee="N$350",
        hockey_type="Outdoor",
        min_players=7,
    ),
]


class BootstrapSeeder:
    """Populates each empty collection independently; safe to run on every start."""

    def __init__(
        self,
        *,
        teams: EntityRepository[Team],
        players: EntityRepository[Player],
        events: EntityRepository[Event],
        registrations: EntityRepository,
        users: EntityRepository[User],
        announcements: EntityRepository[Announcement],
        id_generator: Callable[[], str],
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.teams = teams
        self.players = players
        self.events = events
        self.registrations = registrations
        self.users = users
        self.announcements = announcements
        self.id_generator = id_generator

    def _seed_users(self) -> list[User]:
        return [
            User(
                id=self.id_generator(),
                username=self.settings.admin_username,
                password=hash_password(self.settings.admin_password),
                email=self.settings.admin_email,
                is_admin=True,
                created_at=utc_now_iso(),
            )
        ]

    def _seed_announcements(self) -> list[Announcement]:
        return [
            Announcement(
                id=self.id_generator(),
                title="Welcome to Hockey App",
                content="This is the official app for managing hockey teams, players, and events.",
                created_by=self.settings.admin_username,
                created_at=utc_now_iso(),
                important=True,
            )
        ]

    async def _seed_collection(self, repository: EntityRepository, build: Callable[[], Sequence]) -> int:
        """Seed one collection when it is empty; returns how many records were written."""
        try:
            # strict read: an unreadable collection is left alone rather than overwritten
            existing = await repository.load()
            if existing:
                logger.info("%s already populated (%d records)", repository.key, len(existing))
                return 0
            items = list(build())
            if not items:
                return 0
            await repository.seed(items)
        except StorageIOError:
            logger.exception("Seeding %s failed", repository.key)
            return 0
        logger.info("Initialized %s with %d records", repository.key, len(items))
        return len(items)

    async def ensure_seeded(self) -> dict[str, int]:
        """Seed every empty collection; failures are logged and never raised."""
        plan = [
            (self.teams, lambda: SEED_TEAMS),
            (self.players, lambda: SEED_PLAYERS),
            (self.events, lambda: SEED_EVENTS),
            (self.registrations, list),
            (self.users, self._seed_users),
            (self.announcements, self._seed_announcements),
        ]
        written = {}
        for repository, build in plan:
            written[repository.key] = await self._seed_collection(repository, build)
        logger.info("Storage initialization check complete.")
        return written
