"""Domain checks applied before a record is written."""
from __future__ import annotations

import re
from typing import Any, Iterable

from federation.core.app_logging import get_logger
from federation.domain.entities import Announcement, Event, HockeyType, Player, Team

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
HOCKEY_TYPES = {item.value for item in HockeyType}


class ValidationError(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def is_valid_email(value: str | None) -> bool:
    """Return True when value looks like an e-mail address."""
    if not value:
        return False
    return bool(EMAIL_PATTERN.search(value))


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(record: Any, attrs: Iterable[str], message: str = "Please fill in all required fields") -> None:
    if any(_blank(getattr(record, attr, None)) for attr in attrs):
        raise ValidationError(message)


def validate_team(team: Team) -> None:
    require_fields(
        team,
        ("name", "category", "division", "contact_name", "contact_email", "contact_phone"),
    )
    if not is_valid_email(team.contact_email):
        raise ValidationError("Please enter a valid contact email address")


def validate_player(player: Player) -> None:
    require_fields(player, ("first_name", "last_name"), "First Name and Last Name are required.")


def validate_event(event: Event) -> None:
    require_fields(event, ("title", "location", "registration_fee", "hockey_type"), "Please fill in all required fields (*)")
    if event.hockey_type not in HOCKEY_TYPES:
        raise ValidationError("Hockey type must be Indoor or Outdoor")
    # bool is an int subclass; True is not a player count
    if isinstance(event.min_players, bool) or not isinstance(event.min_players, int) or event.min_players <= 0:
        raise ValidationError("Minimum Players must be a positive number.")
    if event.date and event.registration_deadline and event.registration_deadline > event.date:
        logger.debug("Event %s closes registration after it starts", event.id or event.title)


def validate_announcement(announcement: Announcement) -> None:
    require_fields(announcement, ("title", "content"), "Please enter both title and content")
