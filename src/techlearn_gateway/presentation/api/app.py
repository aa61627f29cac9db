"""FastAPI application factory.

Creates and configures the gateway application with its routers, the
per-process rate limiter and the exception handlers.

Run with uvicorn's factory mode (settings are read at startup, not import):
    uvicorn techlearn_gateway.presentation.api.app:create_app --factory
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import FastAPI

from techlearn_config.settings import Settings, get_settings
from techlearn_gateway.infrastructure.rate_limit import RateLimiter
from techlearn_gateway.presentation.api.config import get_api_settings
from techlearn_gateway.presentation.api.dependencies import (
    create_tables,
    dispose_engine,
    get_engine,
    password_service_for,
)
from techlearn_gateway.presentation.api.exception_handlers import (
    setup_exception_handlers,
)
from techlearn_gateway.presentation.api.routers import auth_router, dev_router


@lru_cache(maxsize=1)
def _configure_logging(log_level_str: str) -> None:
    """Configure application logging.

    - Console output with timestamps and module names
    - Configurable log level for our packages
    - WARNING level for noisy third-party libraries
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    logging.getLogger("techlearn_auth").setLevel(log_level)
    logging.getLogger("techlearn_gateway").setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Registration, login and token lifecycle.

**Tokens:**
- Access tokens are short-lived and checked statelessly by every service
- Refresh tokens are long-lived, stored server-side and revoked by logout
- Access and refresh tokens are signed with different secrets

**Security:**
- Passwords are hashed with bcrypt
- Unknown usernames and wrong passwords are indistinguishable
- Registration and login are rate limited per source address
""",
    },
    {
        "name": "Development",
        "description": "Helpers only available when `APP_ENV=development`.",
    },
]


def _build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        logger.info(
            "Starting %s v%s (%s)...",
            settings.app_name,
            API_VERSION,
            settings.app_env,
        )
        engine = get_engine(settings.database_url)
        try:
            await create_tables(engine)
        except ConnectionRefusedError:
            logger.critical("Could not connect to the database.")
            raise SystemExit(1) from None

        # Built now so the first unknown-user login is not slower than the rest
        _ = password_service_for(settings.bcrypt_rounds).dummy_hash

        yield

        logger.info("Shutting down %s...", settings.app_name)
        await dispose_engine(settings.database_url)
        logger.info("Database connections closed")

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing. When given, every request
        dependency resolves settings to this instance.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Configure logging on first app creation (not on module import)
    _configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Authentication gateway issuing **JWT access and refresh tokens**.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=_build_lifespan(settings),
        openapi_tags=OPENAPI_TAGS,
    )

    app.dependency_overrides[get_api_settings] = lambda: settings

    # One limiter per process; see dependencies.get_rate_limiter
    app.state.rate_limiter = RateLimiter()

    setup_exception_handlers(app)

    app.include_router(auth_router, tags=["Authentication"])
    app.include_router(dev_router, prefix="/dev", tags=["Development"])

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "version": API_VERSION,
        }

    return app
