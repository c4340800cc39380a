"""Read-side helpers joining players to their teams."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from federation.domain.entities import Player, Team
from federation.repositories.entity_repository import EntityRepository

UNKNOWN_TEAM = "Unknown Team"


@dataclass
class RosterEntry:
    player: Player
    team_name: str

    @property
    def name(self) -> str:
        return self.player.full_name


class RosterService:
    """Resolves the weak Player.teamId reference at read time."""

    def __init__(self, teams: EntityRepository[Team], players: EntityRepository[Player]) -> None:
        self.teams = teams
        self.players = players

    async def _team_names(self) -> dict[str, str]:
        return {team.id: team.name for team in await self.teams.list() if team.id}

    async def team_name_for(self, player: Player) -> str:
        if not player.team_id:
            return UNKNOWN_TEAM
        return (await self._team_names()).get(player.team_id, UNKNOWN_TEAM)

    async def players_for_team(self, team_id: Optional[str]) -> list[Player]:
        if not team_id:
            return []
        return [player for player in await self.players.list() if player.team_id == team_id]

    async def roster(self) -> list[RosterEntry]:
        names = await self._team_names()
        return [
            RosterEntry(player=player, team_name=names.get(player.team_id or "", UNKNOWN_TEAM))
            for player in await self.players.list()
        ]

    async def search_players(self, query: str) -> list[RosterEntry]:
        """Case-insensitive match on player name, team name or position."""
        needle = (query or "").strip().lower()
        entries = await self.roster()
        if not needle:
            return entries
        return [
            entry
            for entry in entries
            if needle in entry.name.lower()
            or needle in entry.team_name.lower()
            or needle in (entry.player.position or "").lower()
        ]
