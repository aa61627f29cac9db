"""Data classes exchanged between the auth services and their callers."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded claims of a verified token.

    ``username`` and ``is_admin`` are only carried by access tokens;
    ``token_id`` (the ``jti`` claim) only by refresh tokens.
    """

    user_id: UUID
    token_type: str
    exp: datetime
    username: str | None = None
    is_admin: bool = False
    token_id: str | None = None

    def is_access_token(self) -> bool:
        return self.token_type == ACCESS_TOKEN_TYPE

    def is_refresh_token(self) -> bool:
        return self.token_type == REFRESH_TOKEN_TYPE


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token together with its expiry."""

    token: str
    expires_at: datetime


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity attached to a request that passed access-token verification."""

    user_id: UUID
    name: str
    is_admin: bool = False
