"""Gateway settings.

Values come from, highest precedence first:
- process environment
- the env file named by TECHLEARN_ENV_FILE
- config/.env.dev (developer machines), else config/.env (deployments)
- field defaults below

The two signing secrets have no default; startup fails without them.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Walk up from this file to the directory holding config/ or pyproject.toml."""
    here = Path(__file__).resolve().parent

    for candidate in (here, *here.parents):
        if (candidate / "config").is_dir() or (candidate / "pyproject.toml").is_file():
            return candidate

    return Path.cwd()


def get_config_dir() -> Path:
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Pick the env file to read, or None when there is none."""
    explicit = os.environ.get("TECHLEARN_ENV_FILE")
    if explicit:
        path = Path(explicit)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    for name in (".env.dev", ".env"):
        candidate = get_config_dir() / name
        if candidate.exists():
            return candidate

    return None


class Settings(BaseSettings):
    """Typed view of the gateway configuration.

    Field names map to upper-case environment variables
    (``access_token_secret`` is read from ``ACCESS_TOKEN_SECRET``).
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Signing secrets, required
    access_token_secret: SecretStr  # Signs short-lived access tokens
    refresh_token_secret: SecretStr  # Signs refresh tokens, must differ

    # Application
    app_name: str = "TechLearn Auth"
    app_env: Literal["development", "production"] = "production"

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/techlearn_auth.db"

    # API (API_ prefix)
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    api_debug: bool = False
    api_trust_proxy_headers: bool = False

    # Tokens
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7

    # Passwords
    bcrypt_rounds: int = 10

    # Rate limiting (register/login, per source address, per process)
    rate_limit_enabled: bool = True
    rate_limit_attempts: int = 5
    rate_limit_window_seconds: int = 900

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _validate_secrets(self) -> Settings:
        """Refuse empty or shared signing secrets."""
        access = self.access_token_secret.get_secret_value()
        refresh = self.refresh_token_secret.get_secret_value()
        if not access or not refresh:
            msg = "ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must be set"
            raise ValueError(msg)
        if access == refresh:
            msg = "ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ"
            raise ValueError(msg)
        return self

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """Settings for this process, read once."""
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
