"""Unit tests for Settings."""

import pytest
from pydantic import SecretStr, ValidationError

from techlearn_config.settings import Settings, get_settings

ACCESS = "settings-access-secret-0123456789abcdef"
REFRESH = "settings-refresh-secret-0123456789abcdef"


@pytest.fixture
def clean_env(monkeypatch):
    """Strip any auth variables the developer's shell may carry."""
    for name in (
        "ACCESS_TOKEN_SECRET",
        "REFRESH_TOKEN_SECRET",
        "APP_ENV",
        "DATABASE_URL",
        "BCRYPT_ROUNDS",
        "RATE_LIMIT_ATTEMPTS",
        "RATE_LIMIT_WINDOW_SECONDS",
        "ACCESS_TOKEN_EXPIRE_MINUTES",
        "REFRESH_TOKEN_EXPIRE_DAYS",
        "API_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsDefaults:
    def test_defaults(self, clean_env):
        settings = Settings(
            access_token_secret=SecretStr(ACCESS),
            refresh_token_secret=SecretStr(REFRESH),
            _env_file=None,
        )

        assert settings.app_env == "production"
        assert settings.is_production
        assert not settings.is_development
        assert settings.access_token_expire_minutes == 15
        assert settings.refresh_token_expire_days == 7
        assert settings.bcrypt_rounds == 10
        assert settings.rate_limit_enabled is True
        assert settings.rate_limit_attempts == 5
        assert settings.rate_limit_window_seconds == 900
        assert settings.api_port == 4000
        assert settings.database_url.startswith("sqlite+aiosqlite:///")

    def test_secrets_are_not_printed(self, clean_env):
        settings = Settings(
            access_token_secret=SecretStr(ACCESS),
            refresh_token_secret=SecretStr(REFRESH),
            _env_file=None,
        )

        assert ACCESS not in repr(settings)
        assert REFRESH not in repr(settings)


class TestSettingsFromEnvironment:
    def test_reads_environment_variables(self, clean_env):
        clean_env.setenv("ACCESS_TOKEN_SECRET", ACCESS)
        clean_env.setenv("REFRESH_TOKEN_SECRET", REFRESH)
        clean_env.setenv("APP_ENV", "development")
        clean_env.setenv("BCRYPT_ROUNDS", "12")
        clean_env.setenv("API_PORT", "8080")

        settings = Settings(_env_file=None)

        assert settings.access_token_secret.get_secret_value() == ACCESS
        assert settings.is_development
        assert settings.bcrypt_rounds == 12
        assert settings.api_port == 8080

    def test_get_settings_is_cached(self, clean_env):
        clean_env.setenv("ACCESS_TOKEN_SECRET", ACCESS)
        clean_env.setenv("REFRESH_TOKEN_SECRET", REFRESH)

        assert get_settings() is get_settings()

    def test_reads_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            f"ACCESS_TOKEN_SECRET={ACCESS}\nREFRESH_TOKEN_SECRET={REFRESH}\n"
            "RATE_LIMIT_ATTEMPTS=3\n",
        )

        settings = Settings(_env_file=env_file)

        assert settings.rate_limit_attempts == 3


class TestSettingsValidation:
    def test_missing_secrets_fail(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_identical_secrets_fail(self, clean_env):
        with pytest.raises(ValidationError, match="must differ"):
            Settings(
                access_token_secret=SecretStr(ACCESS),
                refresh_token_secret=SecretStr(ACCESS),
                _env_file=None,
            )

    def test_empty_secret_fails(self, clean_env):
        with pytest.raises(ValidationError, match="must be set"):
            Settings(
                access_token_secret=SecretStr(""),
                refresh_token_secret=SecretStr(REFRESH),
                _env_file=None,
            )

    def test_unknown_app_env_fails(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(
                access_token_secret=SecretStr(ACCESS),
                refresh_token_secret=SecretStr(REFRESH),
                app_env="staging",
                _env_file=None,
            )
