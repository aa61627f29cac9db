"""Credential store: user registration and password checks."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING
from uuid import UUID

from techlearn_auth import (
    DuplicateUsernameError,
    InvalidUsernameError,
    PasswordHashingService,
    PublicUser,
    UserRecord,
)

if TYPE_CHECKING:
    from techlearn_auth import UserRepository

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,20}$")


class CredentialStore:
    """
    Owns user records and everything that touches a plaintext password.

    bcrypt work runs in a worker thread so a slow hash never stalls the
    event loop serving other requests.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingService,
    ):
        self._user_repo = user_repository
        self._password_service = password_service

    @staticmethod
    def validate_username(username: str) -> None:
        if not username or not USERNAME_PATTERN.fullmatch(username):
            raise InvalidUsernameError

    async def register(
        self,
        username: str,
        password: str,
        is_admin: bool = False,
    ) -> PublicUser:
        """Validate, hash and persist a new user.

        Raises
        ------
        InvalidUsernameError, WeakPasswordError
            If the input fails validation (nothing is written)
        DuplicateUsernameError
            If the username is taken, including when a concurrent
            registration wins the race at the unique constraint
        """
        self.validate_username(username)
        self._password_service.validate_strength(password)

        if await self._user_repo.find_by_username(username) is not None:
            raise DuplicateUsernameError(username)

        password_hash = await asyncio.to_thread(self._password_service.hash, password)
        user = await self._user_repo.create(
            username=username,
            password_hash=password_hash,
            is_admin=is_admin,
        )

        logger.info("User registered: %s (admin: %s)", username, is_admin)
        return user.public_view()

    async def find_by_username(self, username: str) -> UserRecord | None:
        return await self._user_repo.find_by_username(username)

    async def find_by_id(self, user_id: UUID) -> UserRecord | None:
        return await self._user_repo.find_by_id(user_id)

    async def check_password(self, user: UserRecord | None, password: str) -> bool:
        """Compare a password with the user's hash.

        For an unknown user the comparison runs against the precomputed
        dummy hash instead, so both outcomes cost one full bcrypt check.
        """
        if user is None:
            return await asyncio.to_thread(self._password_service.verify_dummy, password)
        return await asyncio.to_thread(
            self._password_service.verify,
            password,
            user.password_hash,
        )

    async def upgrade_hash(self, user: UserRecord, password: str) -> bool:
        """Re-hash a verified password stored at an outdated work factor.

        Returns True when a new hash was written.
        """
        if not self._password_service.needs_rehash(user.password_hash):
            return False

        password_hash = await asyncio.to_thread(self._password_service.rehash, password)
        await self._user_repo.update_password_hash(user.id, password_hash)
        logger.info("Upgraded password hash for user: %s", user.username)
        return True
