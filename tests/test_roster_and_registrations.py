from __future__ import annotations

import asyncio

import pytest

from federation.domain.entities import Player
from federation.services.registration_service import RegistrationRejectedError
from federation.services.roster_service import UNKNOWN_TEAM


@pytest.fixture()
def seeded(fed):
    asyncio.run(fed.startup())
    return fed


def test_dangling_team_reference_reads_as_unknown(seeded):
    orphan = asyncio.run(seeded.players.create(Player(first_name="Orphan", last_name="Player", team_id="99")))
    free_agent = Player(first_name="Free", last_name="Agent")
    assert asyncio.run(seeded.roster.team_name_for(orphan)) == UNKNOWN_TEAM
    assert asyncio.run(seeded.roster.team_name_for(free_agent)) == UNKNOWN_TEAM
    p1 = asyncio.run(seeded.players.get("p1"))
    assert asyncio.run(seeded.roster.team_name_for(p1)) == "Windhoek Hockey Club"


def test_deleting_a_team_leaves_players_dangling(seeded):
    asyncio.run(seeded.teams.remove_by_id("5"))
    entry = next(e for e in asyncio.run(seeded.roster.roster()) if e.player.id == "p5")
    assert entry.team_name == UNKNOWN_TEAM


def test_players_for_team_and_search(seeded):
    coastal = asyncio.run(seeded.roster.players_for_team("2"))
    assert [p.id for p in coastal] == ["p2", "p6", "p10"]

    keepers = asyncio.run(seeded.roster.search_players("goalkeeper"))
    assert {e.player.id for e in keepers} == {"p4", "p10"}
    by_team = asyncio.run(seeded.roster.search_players("swakopmund"))
    assert [e.name for e in by_team] == ["David Miller"]
    assert len(asyncio.run(seeded.roster.search_players(""))) == 12


def test_register_team_takes_first_min_players(seeded):
    # e4 needs 3 players; Windhoek Hockey Club has p1, p7, p11
    registration = asyncio.run(seeded.event_entries.register_team("e4", "1", accepted_terms=True))
    assert registration.player_ids == ["p1", "p7", "p11"]
    assert registration.registration_date
    assert registration.accepted_terms is True
    assert asyncio.run(seeded.event_entries.registrations_for_event("e4")) == [registration]


@pytest.mark.parametrize(
    "event_id,team_id,terms,message",
    [
        ("missing", "1", True, "Event not found"),
        ("e4", None, True, "Please select a team"),
        ("e4", "99", True, "does not exist"),
        ("e2", "1", True, "at least 4 players"),
        ("e4", "1", False, "terms and conditions"),
    ],
)
def test_register_team_rejections_write_nothing(seeded, event_id, team_id, terms, message):
    with pytest.raises(RegistrationRejectedError) as exc:
        asyncio.run(seeded.event_entries.register_team(event_id, team_id, accepted_terms=terms))
    assert message in exc.value.message
    assert asyncio.run(seeded.registrations.list()) == []
