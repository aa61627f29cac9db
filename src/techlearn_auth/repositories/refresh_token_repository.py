from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class RefreshTokenData:
    id: UUID
    token: str
    user_id: UUID
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class RefreshTokenRepository(ABC):
    """Persisted refresh sessions, one row per successful login."""

    @abstractmethod
    async def persist(
        self,
        token: str,
        user_id: UUID,
        expires_at: datetime,
    ) -> RefreshTokenData:
        """Store a token. Re-storing it for the same user is a no-op.

        Raises RefreshTokenConflictError if the token string is already
        bound to a different user.
        """

    @abstractmethod
    async def exists(self, token: str) -> bool:
        pass

    @abstractmethod
    async def find_by_token(self, token: str) -> RefreshTokenData | None:
        pass

    @abstractmethod
    async def delete_by_token(self, token: str) -> bool:
        """Delete a token. Absent tokens are not an error (returns False)."""

    @abstractmethod
    async def purge_expired(self, now: datetime | None = None) -> int:
        pass
