"""Pytest fixtures for API integration tests."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from techlearn_config.settings import Settings
from techlearn_gateway.presentation.api.app import create_app
from techlearn_gateway.presentation.api.dependencies import get_db_session


@pytest.fixture
def api_settings(make_settings, database_url) -> Settings:
    """Test API settings. Rate limiting is off unless a test turns it on."""
    return make_settings(
        database_url=database_url,
        api_debug=True,
        rate_limit_enabled=False,
    )


@pytest.fixture
def make_app(make_settings, database_url, session_maker):
    """Build an app on the test database with settings overrides."""

    def _make(settings: Settings | None = None, **overrides) -> FastAPI:
        if settings is None:
            values = {"database_url": database_url, "rate_limit_enabled": False}
            values.update(overrides)
            settings = make_settings(**values)
        app = create_app(settings=settings)

        # Override the database session dependency to use the test engine
        async def override_get_db_session():
            async with session_maker() as session:
                yield session

        app.dependency_overrides[get_db_session] = override_get_db_session
        return app

    return _make


@pytest.fixture
def app(make_app, api_settings) -> FastAPI:
    return make_app(api_settings)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client


@pytest.fixture
def registered_user_data() -> dict:
    return {"name": "alice_01", "password": "Passw0rd!"}


@pytest.fixture
async def registered_user(client, registered_user_data) -> dict:
    response = await client.post("/register", json=registered_user_data)
    assert response.status_code == 201, response.text
    return response.json()["user"]


@pytest.fixture
async def logged_in(client, registered_user, registered_user_data) -> dict:
    response = await client.post("/login", json=registered_user_data)
    assert response.status_code == 200, response.text
    return response.json()
