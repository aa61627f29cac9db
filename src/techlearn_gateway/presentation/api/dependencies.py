"""FastAPI dependency injection for the auth gateway.

Provides dependencies for:
- Database engine and sessions (shared per process, per database URL)
- Token issuer and password hashing services
- The AuthGateway application service
- Current user (stateless access-token check)
- Per-address rate limiting
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from techlearn_auth import (
    AuthenticatedUser,
    PasswordHashingService,
    RateLimitExceededError,
    RequestAuthenticator,
    TokenIssuer,
)
from techlearn_auth.persistence.sqlalchemy import (
    AuthBase,
    RefreshTokenRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)
from techlearn_auth.request_authenticator import security
from techlearn_config.settings import Settings
from techlearn_gateway.application.services import AuthGateway, CredentialStore
from techlearn_gateway.infrastructure.rate_limit import RateLimiter
from techlearn_gateway.presentation.api.config import get_api_settings

logger = logging.getLogger(__name__)

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton per URL)
# -----------------------------------------------------------------------------


def _prepare_sqlite_path(url: str) -> None:
    """Ensure the data directory exists for file-based SQLite."""
    if url.startswith("sqlite") and ":memory:" not in url:
        db_path = url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_engine(database_url: str) -> AsyncEngine:
    """
    Get the shared async database engine for a URL (singleton).

    The engine manages the connection pool and is reused across all requests.

    Returns
    -------
    AsyncEngine instance
    """
    _prepare_sqlite_path(database_url)
    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache()
def get_session_maker(database_url: str) -> async_sessionmaker[AsyncSession]:
    """
    Get the shared async session maker (singleton).

    Returns
    -------
    async_sessionmaker configured with the shared engine
    """
    return async_sessionmaker(
        get_engine(database_url),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def dispose_engine(database_url: str) -> None:
    """Close the pool behind ``database_url`` and forget the cached engine."""
    engine = get_engine(database_url)
    await engine.dispose()
    get_session_maker.cache_clear()
    get_engine.cache_clear()


async def get_db_session(
    settings: SettingsDep,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Creates an async session for the request using the shared engine/pool.
    Uncommitted work is rolled back when the session closes.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker(settings.database_url)() as session:
        yield session


# Type alias for injected session
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# -----------------------------------------------------------------------------
# Database Schema Management
# -----------------------------------------------------------------------------


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    Existing tables and their data are never modified or deleted.
    """
    logger.info("Ensuring all database tables exist...")

    async with engine.begin() as conn:
        await conn.run_sync(AuthBase.metadata.create_all)

    logger.info("Database schema is up to date (missing tables created if needed)")


# -----------------------------------------------------------------------------
# Authentication Services
# -----------------------------------------------------------------------------


def get_token_issuer(settings: SettingsDep) -> TokenIssuer:
    """Get token issuer configured with API settings."""
    return TokenIssuer(
        access_secret=settings.access_token_secret.get_secret_value(),
        refresh_secret=settings.refresh_token_secret.get_secret_value(),
        access_token_expire_minutes=settings.access_token_expire_minutes,
        refresh_token_expire_days=settings.refresh_token_expire_days,
    )


@lru_cache()
def password_service_for(rounds: int) -> PasswordHashingService:
    """Shared hashing service per work factor, so the dummy hash is built once."""
    return PasswordHashingService(rounds=rounds)


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    """Get password hashing service."""
    return password_service_for(settings.bcrypt_rounds)


async def get_auth_gateway(
    session: DBSession,
    token_issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    password_service: Annotated[PasswordHashingService, Depends(get_password_service)],
) -> AuthGateway:
    """
    Get the auth gateway with all dependencies.

    This service orchestrates registration, login, refresh and logout.
    """
    credential_store = CredentialStore(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
    )
    return AuthGateway(
        credential_store=credential_store,
        refresh_token_repository=RefreshTokenRepositorySQLAlchemy(session),
        token_issuer=token_issuer,
    )


# Type alias for injected auth gateway
AuthGatewayDep = Annotated[AuthGateway, Depends(get_auth_gateway)]


# -----------------------------------------------------------------------------
# Current User (stateless access-token check)
# -----------------------------------------------------------------------------


async def get_current_user(
    request: Request,
    settings: SettingsDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthenticatedUser:
    """
    FastAPI dependency to get the current user from the access token.

    Same check resource servers run: no database access.
    """
    authenticator = RequestAuthenticator(
        settings.access_token_secret.get_secret_value(),
    )
    return await authenticator(request, credentials)


# Type alias for injected current user
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


# -----------------------------------------------------------------------------
# Rate Limiting
# -----------------------------------------------------------------------------


def get_rate_limiter(request: Request) -> RateLimiter:
    """Get the per-application limiter, created on first use."""
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        limiter = RateLimiter()
        request.app.state.rate_limiter = limiter
    return limiter


def client_address(request: Request, trust_proxy_headers: bool = False) -> str:
    """Best-effort source address of the caller."""
    if trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client is not None:
        return request.client.host
    return "unknown"


def rate_limited(scope: str):
    """Build a dependency that counts one attempt per call for ``scope``."""

    async def _enforce(
        request: Request,
        settings: SettingsDep,
        limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    ) -> None:
        if not settings.rate_limit_enabled:
            return

        address = client_address(request, settings.api_trust_proxy_headers)
        allowed, retry_after = limiter.hit(
            f"{scope}:ip:{address}",
            limit=settings.rate_limit_attempts,
            per_seconds=settings.rate_limit_window_seconds,
        )
        if not allowed:
            raise RateLimitExceededError(retry_after=retry_after)

    return _enforce
