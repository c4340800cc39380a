"""
Account and session use cases: registration, login, logout, profile edits.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from federation.core.app_logging import get_logger
from federation.core.config import Settings, get_settings
from federation.core.security import hash_password, is_hashed, verify_password
from federation.domain.entities import PublicUser, User, utc_now_iso
from federation.domain.validation import is_valid_email
from federation.repositories.entity_repository import EntityRepository
from federation.repositories.keys import EntityKind, storage_key
from federation.repositories.kv_store import KeyValueStore, StorageIOError

logger = get_logger(__name__)

PROFILE_FIELDS = {"username", "email"}


class AccountError(Exception):
    """Base class for account-related exceptions."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RegistrationError(AccountError):
    pass


class ProfileUpdateError(AccountError):
    pass


class DuplicateUsernameError(AccountError):
    def __init__(self, message: str = "Username already exists"):
        super().__init__(message)


class InvalidCredentialsError(AccountError):
    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


class UserNotFoundError(AccountError):
    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class UserAccountService:
    """Handles registration, login, the current-session pointer and profile edits."""

    def __init__(
        self,
        store: KeyValueStore,
        users: EntityRepository[User],
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store
        self.users = users
        self.session_key = storage_key(EntityKind.CURRENT_USER, self.settings.key_prefix)

    # -------------------------------------- helpers --------------------------------------
    def _check_identity(self, username: str, email: str, error: type[AccountError]) -> None:
        if not username or not email:
            raise error("Username and Email cannot be empty.")
        if not is_valid_email(email):
            raise error("Please enter a valid email address")

    async def _find_by_username(self, username: str) -> Optional[User]:
        for user in await self.users.list():
            if user.username == username:
                return user
        return None

    async def _save_session(self, user: PublicUser) -> None:
        await self.store.set(self.session_key, user.to_dict())

    # -------------------------------------- registro --------------------------------------
    async def register(self, username: str, email: str, password: str) -> PublicUser:
        username = (username or "").strip()
        email = (email or "").strip()
        if not password:
            raise RegistrationError("Please fill in all fields")
        self._check_identity(username, email, RegistrationError)
        if len(password) < self.settings.min_password_length:
            raise RegistrationError(
                f"Password must be at least {self.settings.min_password_length} characters long"
            )
        if await self._find_by_username(username):
            raise DuplicateUsernameError()

        user = await self.users.create(
            User(
                username=username,
                password=hash_password(password),
                email=email,
                is_admin=False,
                created_at=utc_now_iso(),
            )
        )
        logger.info("Registered user %s", user.username)
        return user.public()

    # -------------------------------------- login --------------------------------------
    async def login(self, username: str, password: str) -> PublicUser:
        user = await self._find_by_username((username or "").strip())
        # same error whether the username or the password was wrong
        if user is None or not verify_password(password or "", user.password):
            raise InvalidCredentialsError()
        if not is_hashed(user.password):
            await self.users.patch(user.id, {"password": hash_password(password)})
            logger.info("Upgraded stored password of %s to a hash", user.username)

        public = user.public()
        await self._save_session(public)
        return public

    async def current_session(self) -> Optional[PublicUser]:
        """Return the logged-in user, or None when nobody is (or the pointer is unreadable)."""
        try:
            raw = await self.store.get(self.session_key)
        except StorageIOError as exc:
            logger.warning("Error reading current session: %s", exc, extra={"storage_key": self.session_key})
            return None
        if not isinstance(raw, Mapping):
            return None
        try:
            return PublicUser.from_dict(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed current session record")
            return None

    async def logout(self) -> None:
        await self.store.remove(self.session_key)

    # -------------------------------------- perfil --------------------------------------
    async def update_profile(self, user_id: str, changes: Mapping[str, Any]) -> PublicUser:
        """Change the username and/or email of ``user_id``."""
        extra = set(changes) - PROFILE_FIELDS
        if extra:
            raise ProfileUpdateError(f"Cannot change {', '.join(sorted(extra))} from the profile screen")
        user = await self.users.get(user_id)
        if user is None:
            raise UserNotFoundError()

        username = (changes.get("username", user.username) or "").strip()
        email = (changes.get("email", user.email) or "").strip()
        self._check_identity(username, email, ProfileUpdateError)
        if username != user.username:
            other = await self._find_by_username(username)
            if other is not None and other.id != user_id:
                raise DuplicateUsernameError()

        if not await self.users.patch(user_id, {"username": username, "email": email}):
            raise UserNotFoundError()
        updated = (await self.users.get(user_id)) or user
        public = updated.public()

        session = await self.current_session()
        if session is not None and session.id == user_id:
            await self._save_session(public)
        return public
