"""Announcement feed: public reads, admin-only writes."""

from __future__ import annotations

from typing import Any, Mapping, Union

from federation.core.app_logging import get_logger
from federation.domain.entities import Announcement, PublicUser, User, utc_now_iso
from federation.repositories.entity_repository import EntityRepository
from federation.services.authorization import AuthorizationGate

logger = get_logger(__name__)

Actor = Union[PublicUser, User, Mapping[str, Any], None]


def _actor_username(actor: Actor) -> str:
    if isinstance(actor, Mapping):
        return str(actor.get("username") or "")
    return getattr(actor, "username", "") or ""


class AnnouncementService:
    def __init__(self, announcements: EntityRepository[Announcement], gate: AuthorizationGate) -> None:
        self.announcements = announcements
        self.gate = gate

    async def list(self) -> list[Announcement]:
        """Most recent first."""
        return await self.announcements.list()

    async def create(self, data: Mapping[str, Any], actor: Actor) -> Announcement:
        await self.gate.require_admin(actor, "Only administrators can create announcements")
        announcement = Announcement(
            title=(data.get("title") or "").strip(),
            content=(data.get("content") or "").strip(),
            created_by=_actor_username(actor),
            created_at=utc_now_iso(),
            important=bool(data.get("important", False)),
        )
        created = await self.announcements.create(announcement)
        logger.info("Announcement %s created by %s", created.id, created.created_by)
        return created

    async def delete(self, announcement_id: str, actor: Actor) -> bool:
        await self.gate.require_admin(actor, "Only administrators can delete announcements")
        await self.announcements.remove_by_id(announcement_id)
        logger.info("Announcement %s deleted by %s", announcement_id, _actor_username(actor))
        return True
