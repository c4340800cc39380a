from __future__ import annotations

import asyncio

import pytest

from federation.domain.entities import Event, Team
from federation.domain.validation import ValidationError, is_valid_email, validate_event


def make_event(**kw) -> Event:
    data = dict(
        title="Easter Cup",
        date="2026-04-03",
        registration_deadline="2026-03-20",
        location="Windhoek Indoor Center",
        registration_fee="N$200",
        description="",
        category="Tournament",
        hockey_type="Indoor",
        min_players=6,
    )
    data.update(kw)
    return Event(**data)


@pytest.mark.parametrize("min_players", [0, -3, True, "6"])
def test_min_players_must_be_positive_int(min_players):
    with pytest.raises(ValidationError):
        validate_event(make_event(min_players=min_players))


def test_hockey_type_is_restricted():
    with pytest.raises(ValidationError):
        validate_event(make_event(hockey_type="Ice"))
    validate_event(make_event(hockey_type="Outdoor"))


def test_late_deadline_is_tolerated():
    validate_event(make_event(registration_deadline="2026-05-01"))


def test_email_shape():
    assert is_valid_email("a@b.co")
    assert not is_valid_email("a@b")
    assert not is_valid_email(None)


def test_event_patch_is_validated(fed):
    asyncio.run(fed.startup())
    with pytest.raises(ValidationError):
        asyncio.run(fed.events.patch("e1", {"minPlayers": 0}))
    assert asyncio.run(fed.events.get("e1")).min_players == 10


def test_key_prefix_applies_to_every_collection(settings, store):
    from dataclasses import replace

    from federation.app_factory import build_federation

    fed = build_federation(settings=replace(settings, key_prefix="hockey_"), store=store)
    asyncio.run(fed.teams.create(Team(name="A", category="Men", division="First", contact_name="x",
                                      contact_email="x@y.com", contact_phone="1")))
    assert fed.accounts.session_key == "hockey_current_user"
    assert store.keys() == ["hockey_teams"]
