"""REST API presentation layer for the auth gateway.

Structure:
    api/
    ├── app.py                # FastAPI application factory
    ├── config.py             # API configuration
    ├── dependencies.py       # Dependency injection
    ├── exception_handlers.py # Error code to HTTP mapping
    ├── routers/              # API route handlers
    └── schemas/              # Pydantic request/response schemas
"""

from techlearn_gateway.presentation.api.app import create_app

__all__ = ["create_app"]
