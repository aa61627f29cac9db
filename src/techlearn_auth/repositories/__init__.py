"""Repository interfaces for techlearn_auth.

This package defines abstract repository interfaces that can be implemented
by different persistence technologies (SQLAlchemy, MongoDB, etc.).

The SQLAlchemy implementations live in techlearn_auth.persistence.sqlalchemy.
"""

from techlearn_auth.repositories.refresh_token_repository import (
    RefreshTokenData,
    RefreshTokenRepository,
)
from techlearn_auth.repositories.user_repository import (
    PublicUser,
    UserRecord,
    UserRepository,
)

__all__ = [
    "PublicUser",
    "RefreshTokenData",
    "RefreshTokenRepository",
    "UserRecord",
    "UserRepository",
]
