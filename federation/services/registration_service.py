"""Entering teams into events."""

from __future__ import annotations

from typing import Optional

from federation.core.app_logging import get_logger
from federation.domain.entities import Event, EventRegistration, Team
from federation.domain.validation import ValidationError
from federation.repositories.entity_repository import EntityRepository
from federation.services.roster_service import RosterService

logger = get_logger(__name__)


class RegistrationRejectedError(ValidationError):
    """A team cannot be registered for an event; nothing was written."""


class EventRegistrationService:
    def __init__(
        self,
        events: EntityRepository[Event],
        teams: EntityRepository[Team],
        registrations: EntityRepository[EventRegistration],
        roster: RosterService,
    ) -> None:
        self.events = events
        self.teams = teams
        self.registrations = registrations
        self.roster = roster

    async def register_team(self, event_id: str, team_id: Optional[str], accepted_terms: bool) -> EventRegistration:
        event = await self.events.get(event_id)
        if event is None:
            raise RegistrationRejectedError("Event not found. Please try again or contact support.")
        if not team_id:
            raise RegistrationRejectedError("Please select a team")
        if await self.teams.get(team_id) is None:
            raise RegistrationRejectedError("Selected team does not exist")

        team_players = await self.roster.players_for_team(team_id)
        minimum = event.min_players
        if len(team_players) < minimum:
            raise RegistrationRejectedError(
                f"Your team needs at least {minimum} players to register (currently has {len(team_players)})"
            )
        if not accepted_terms:
            raise RegistrationRejectedError("Please accept the terms and conditions")

        registration = await self.registrations.create(
            EventRegistration(
                event_id=event_id,
                team_id=team_id,
                player_ids=[player.id for player in team_players[:minimum]],
                accepted_terms=True,
            )
        )
        logger.info("Team %s registered for event %s", team_id, event_id)
        return registration

    async def registrations_for_event(self, event_id: str) -> list[EventRegistration]:
        return [item for item in await self.registrations.list() if item.event_id == event_id]
