from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from federation.app_factory import build_federation
from federation.domain.entities import PublicUser
from federation.domain.validation import ValidationError
from federation.services.authorization import AuthorizationError

ADMIN = PublicUser(id="a1", username="admin123", email="admin@hockeyapp.com", is_admin=True)
MEMBER = PublicUser(id="m1", username="member", email="member@example.com", is_admin=False)


def test_non_admin_cannot_create_and_nothing_is_written(fed, store):
    asyncio.run(fed.startup())
    before = asyncio.run(store.get(fed.announcements.key))
    calls = store.set_calls

    for actor in (MEMBER, None, {"username": "member", "isAdmin": False}):
        with pytest.raises(AuthorizationError) as exc:
            asyncio.run(fed.announcement_feed.create({"title": "Hi", "content": "There"}, actor))
        assert exc.value.message == "Only administrators can create announcements"

    assert store.set_calls == calls
    assert asyncio.run(store.get(fed.announcements.key)) == before


def test_authorization_is_checked_before_validation(fed):
    with pytest.raises(AuthorizationError):
        asyncio.run(fed.announcement_feed.create({}, MEMBER))
    with pytest.raises(ValidationError):
        asyncio.run(fed.announcement_feed.create({"title": "", "content": "x"}, ADMIN))


def test_admin_creates_newest_first(fed):
    async def scenario():
        first = await fed.announcement_feed.create({"title": "Trials", "content": "Saturday"}, ADMIN)
        second = await fed.announcement_feed.create(
            {"title": "Venue change", "content": "Indoor centre", "important": True},
            {"id": "a1", "username": "admin123", "isAdmin": True},
        )
        return first, second, await fed.announcement_feed.list()

    first, second, feed = asyncio.run(scenario())
    assert [a.id for a in feed] == [second.id, first.id]
    assert first.created_by == "admin123"
    assert first.important is False
    assert second.important is True
    assert first.created_at


def test_delete_requires_admin(fed):
    created = asyncio.run(fed.announcement_feed.create({"title": "Trials", "content": "Saturday"}, ADMIN))

    with pytest.raises(AuthorizationError) as exc:
        asyncio.run(fed.announcement_feed.delete(created.id, MEMBER))
    assert exc.value.message == "Only administrators can delete announcements"
    assert len(asyncio.run(fed.announcement_feed.list())) == 1

    assert asyncio.run(fed.announcement_feed.delete(created.id, ADMIN)) is True
    assert asyncio.run(fed.announcement_feed.delete(created.id, ADMIN)) is True
    assert asyncio.run(fed.announcement_feed.list()) == []


def test_verified_gate_ignores_forged_admin_flag(settings, store):
    fed = build_federation(settings=replace(settings, verify_actor=True), store=store)
    asyncio.run(fed.startup())
    admin = next(u for u in asyncio.run(fed.users.list()) if u.is_admin)

    forged = replace(MEMBER, is_admin=True)
    with pytest.raises(AuthorizationError):
        asyncio.run(fed.announcement_feed.create({"title": "Fake", "content": "news"}, forged))

    created = asyncio.run(fed.announcement_feed.create({"title": "Real", "content": "news"}, admin.public()))
    assert created.created_by == admin.username
