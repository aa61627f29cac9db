"""Abstract repository interface for user records.

This interface defines the contract for user persistence.
Implementations can use SQLAlchemy, MongoDB, or any other storage.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class PublicUser:
    """The parts of a user that may leave the service."""

    id: UUID
    username: str


@dataclass(frozen=True)
class UserRecord:
    """Immutable user data returned by the repository.

    Carries the password hash, so it must never be serialized to clients;
    use ``public_view()`` for that.
    """

    id: UUID
    username: str
    password_hash: str
    is_admin: bool
    created_at: datetime

    def public_view(self) -> PublicUser:
        return PublicUser(id=self.id, username=self.username)

    def __repr__(self) -> str:
        return f"UserRecord(id={self.id}, username={self.username!r}, is_admin={self.is_admin})"


class UserRepository(ABC):
    """
    Abstract repository interface for user records.

    Username uniqueness must be enforced by the storage layer itself:
    ``create`` raises DuplicateUsernameError when the name is taken, even if
    a concurrent writer claimed it after the caller's own lookup.
    """

    @abstractmethod
    async def create(
        self,
        username: str,
        password_hash: str,
        is_admin: bool = False,
    ) -> UserRecord:
        """
        Persist a new user.

        Parameters
        ----------
        username
            The unique login name
        password_hash
            The bcrypt password hash
        is_admin
            Admin flag

        Returns
        -------
        The stored user record

        Raises
        ------
        DuplicateUsernameError
            If the username is already taken
        """

    @abstractmethod
    async def find_by_username(self, username: str) -> UserRecord | None:
        """Find a user by login name. Returns None if not found."""

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> UserRecord | None:
        """Find a user by id. Returns None if not found."""

    @abstractmethod
    async def update_password_hash(self, user_id: UUID, password_hash: str) -> bool:
        """Replace a user's stored hash. Returns False if the user is gone."""

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        """Delete a user. Returns True if deleted, False if not found."""
