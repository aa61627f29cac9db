"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/              # Fast, isolated tests (mocks, no database)
    │   ├── techlearn_auth/
    │   ├── techlearn_config/
    │   ├── application/
    │   ├── infrastructure/
    │   └── presentation/
    └── integration/       # Tests against a temporary SQLite file
        ├── persistence/
        └── api/

Shared fixtures provide signing secrets that satisfy the settings
validator and a fresh database per test.
"""

from collections.abc import AsyncGenerator

import pytest
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from techlearn_auth.persistence.sqlalchemy import AuthBase
from techlearn_config import clear_settings_cache
from techlearn_config.settings import Settings

TEST_ACCESS_SECRET = "test-access-secret-0123456789abcdef"
TEST_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"

# Lowest work factor bcrypt accepts; keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that run against a real (SQLite) database",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take more than 1 second",
    )


@pytest.fixture(autouse=True)
def fresh_settings_cache():
    """Never let one test's settings leak into another."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_settings():
    """Build settings that pass validation, with per-test overrides."""

    def _make(**overrides) -> Settings:
        values = {
            "access_token_secret": SecretStr(TEST_ACCESS_SECRET),
            "refresh_token_secret": SecretStr(TEST_REFRESH_SECRET),
            "bcrypt_rounds": TEST_BCRYPT_ROUNDS,
            "app_env": "production",
            "log_level": "WARNING",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}"


@pytest.fixture
async def db_engine(database_url) -> AsyncGenerator[AsyncEngine, None]:
    """A SQLite file database with all auth tables created."""
    engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(AuthBase.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session
