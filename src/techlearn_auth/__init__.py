"""TechLearn Auth - Generic authentication infrastructure.

This package provides authentication infrastructure shared by the gateway
and by every resource server that needs to check access tokens. It handles:
- Password hashing (bcrypt)
- JWT access/refresh token signing and verification
- User and refresh-token storage (with pluggable persistence)
- A stateless request authenticator for FastAPI services

Architecture:
    techlearn_auth/
    ├── services/               # Pure logic (password hashing, tokens)
    ├── repositories/           # Abstract interfaces
    ├── persistence/            # Implementations by technology
    │   └── sqlalchemy/         # SQLAlchemy implementation
    ├── request_authenticator.py
    ├── schemas.py              # Data classes
    └── exceptions.py           # Auth exceptions

Usage:
    from techlearn_auth import RequestAuthenticator, TokenIssuer

    from techlearn_auth.persistence.sqlalchemy import (
        AuthBase,
        RefreshTokenRepositorySQLAlchemy,
        UserRepositorySQLAlchemy,
    )
"""

from techlearn_auth.exceptions import (
    AuthError,
    DevelopmentOnlyError,
    DuplicateUsernameError,
    ErrorCode,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidSignatureError,
    InvalidUsernameError,
    MalformedTokenError,
    MissingTokenError,
    RateLimitExceededError,
    RefreshTokenConflictError,
    RefreshTokenExpiredError,
    TokenError,
    TokenExpiredError,
    UserNotFoundError,
    ValidationError,
    WeakPasswordError,
)
from techlearn_auth.repositories import (
    PublicUser,
    RefreshTokenData,
    RefreshTokenRepository,
    UserRecord,
    UserRepository,
)
from techlearn_auth.request_authenticator import RequestAuthenticator
from techlearn_auth.schemas import AuthenticatedUser, IssuedToken, TokenPayload
from techlearn_auth.services import PasswordHashingService, TokenIssuer

__all__ = [
    # Services
    "PasswordHashingService",
    "TokenIssuer",
    "RequestAuthenticator",
    # Repositories (interfaces)
    "PublicUser",
    "RefreshTokenData",
    "RefreshTokenRepository",
    "UserRecord",
    "UserRepository",
    # Schemas
    "AuthenticatedUser",
    "IssuedToken",
    "TokenPayload",
    # Exceptions
    "AuthError",
    "DevelopmentOnlyError",
    "DuplicateUsernameError",
    "ErrorCode",
    "InvalidCredentialsError",
    "InvalidRefreshTokenError",
    "InvalidSignatureError",
    "InvalidUsernameError",
    "MalformedTokenError",
    "MissingTokenError",
    "RateLimitExceededError",
    "RefreshTokenConflictError",
    "RefreshTokenExpiredError",
    "TokenError",
    "TokenExpiredError",
    "UserNotFoundError",
    "ValidationError",
    "WeakPasswordError",
]
