"""Privilege checks run before privileged mutations."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from federation.domain.entities import PublicUser, User
from federation.repositories.entity_repository import EntityRepository

DEFAULT_MESSAGE = "Only administrators can perform this action"


class AuthorizationError(Exception):
    """Raised when the actor lacks the privilege an operation needs."""

    status_code = 403

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)
        self.message = message


def _actor_fields(actor: Any) -> tuple[Optional[str], bool]:
    if actor is None:
        return None, False
    if isinstance(actor, Mapping):
        return actor.get("id"), bool(actor.get("isAdmin", actor.get("is_admin")))
    return getattr(actor, "id", None), bool(getattr(actor, "is_admin", False))


class AuthorizationGate:
    """
    Checks an actor's admin flag.

    By default the flag carried by the actor object is trusted, which is only
    sound while caller and store share a process. With ``verify_actor`` the
    gate looks the actor up in the Users collection and trusts the stored
    flag instead.
    """

    def __init__(self, users: EntityRepository[User], *, verify_actor: bool = False) -> None:
        self.users = users
        self.verify_actor = verify_actor

    async def require_admin(self, actor: PublicUser | User | Mapping[str, Any] | None, message: str | None = None) -> None:
        actor_id, is_admin = _actor_fields(actor)
        if not is_admin:
            raise AuthorizationError(message or DEFAULT_MESSAGE)
        if self.verify_actor:
            stored = await self.users.get(actor_id) if actor_id else None
            if stored is None or not stored.is_admin:
                raise AuthorizationError(message or DEFAULT_MESSAGE)
