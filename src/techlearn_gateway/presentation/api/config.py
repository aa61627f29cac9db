"""API configuration adapter.

Bridges the centralized techlearn_config settings with the API layer.
Tests and embedding applications override ``get_api_settings`` through
FastAPI's dependency overrides (see ``create_app``).
"""

from techlearn_config.settings import Settings, get_settings


def get_api_settings() -> Settings:
    """Get settings from centralized configuration."""
    return get_settings()
