"""Unit tests for CredentialStore."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock
from uuid import UUID

import pytest

from techlearn_auth import (
    DuplicateUsernameError,
    InvalidUsernameError,
    PasswordHashingService,
    PublicUser,
    UserRecord,
    WeakPasswordError,
)
from techlearn_gateway.application.services import CredentialStore

TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")
TEST_USERNAME = "alice_01"
TEST_PASSWORD = "Passw0rd!"


def _user(password_hash: str = "hashed_password") -> UserRecord:
    return UserRecord(
        id=TEST_USER_ID,
        username=TEST_USERNAME,
        password_hash=password_hash,
        is_admin=False,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class TestValidateUsername:
    """Tests for username rules."""

    @pytest.mark.parametrize("username", ["abc", "alice_01", "A" * 20, "___"])
    def test_valid_usernames(self, username):
        CredentialStore.validate_username(username)

    @pytest.mark.parametrize(
        "username",
        ["", "ab", "A" * 21, "alice-01", "alice 01", "alice@x", "ünïcode"],
    )
    def test_invalid_usernames(self, username):
        with pytest.raises(InvalidUsernameError):
            CredentialStore.validate_username(username)


class TestCredentialStoreRegister:
    """Tests for user registration."""

    def setup_method(self):
        self.user_repo = AsyncMock()
        self.password_service = PasswordHashingService(rounds=4)
        self.store = CredentialStore(
            user_repository=self.user_repo,
            password_service=self.password_service,
        )

    async def test_register_hashes_and_creates_user(self):
        """Test that register stores a bcrypt hash, never the password."""
        # Arrange
        self.user_repo.find_by_username.return_value = None
        self.user_repo.create.side_effect = lambda username, password_hash, is_admin: (
            UserRecord(
                id=TEST_USER_ID,
                username=username,
                password_hash=password_hash,
                is_admin=is_admin,
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
        )

        # Act
        user = await self.store.register(TEST_USERNAME, TEST_PASSWORD)

        # Assert
        assert user == PublicUser(id=TEST_USER_ID, username=TEST_USERNAME)
        stored_hash = self.user_repo.create.call_args.kwargs["password_hash"]
        assert stored_hash != TEST_PASSWORD
        assert self.password_service.verify(TEST_PASSWORD, stored_hash)
        assert self.user_repo.create.call_args.kwargs["is_admin"] is False

    async def test_register_passes_admin_flag(self):
        self.user_repo.find_by_username.return_value = None
        self.user_repo.create.return_value = _user()

        await self.store.register(TEST_USERNAME, TEST_PASSWORD, is_admin=True)

        assert self.user_repo.create.call_args.kwargs["is_admin"] is True

    async def test_register_rejects_taken_username(self):
        self.user_repo.find_by_username.return_value = _user()

        with pytest.raises(DuplicateUsernameError):
            await self.store.register(TEST_USERNAME, TEST_PASSWORD)

        self.user_repo.create.assert_not_called()

    async def test_register_propagates_constraint_race(self):
        """Test that losing the race at the unique constraint is a duplicate."""
        self.user_repo.find_by_username.return_value = None
        self.user_repo.create.side_effect = DuplicateUsernameError(TEST_USERNAME)

        with pytest.raises(DuplicateUsernameError):
            await self.store.register(TEST_USERNAME, TEST_PASSWORD)

    async def test_register_rejects_bad_username_before_lookup(self):
        with pytest.raises(InvalidUsernameError):
            await self.store.register("a!", TEST_PASSWORD)

        self.user_repo.find_by_username.assert_not_called()
        self.user_repo.create.assert_not_called()

    async def test_register_rejects_weak_password_before_lookup(self):
        with pytest.raises(WeakPasswordError):
            await self.store.register(TEST_USERNAME, "alllowercase1")

        self.user_repo.find_by_username.assert_not_called()
        self.user_repo.create.assert_not_called()


class TestCheckPassword:
    """Tests for password checks, including unknown users."""

    def setup_method(self):
        self.password_service = Mock(spec=PasswordHashingService)
        self.store = CredentialStore(
            user_repository=AsyncMock(),
            password_service=self.password_service,
        )

    async def test_known_user_compares_against_stored_hash(self):
        self.password_service.verify.return_value = True

        assert await self.store.check_password(_user("stored"), TEST_PASSWORD) is True
        self.password_service.verify.assert_called_once_with(TEST_PASSWORD, "stored")
        self.password_service.verify_dummy.assert_not_called()

    async def test_unknown_user_still_runs_a_comparison(self):
        self.password_service.verify_dummy.return_value = False

        assert await self.store.check_password(None, TEST_PASSWORD) is False
        self.password_service.verify_dummy.assert_called_once_with(TEST_PASSWORD)
        self.password_service.verify.assert_not_called()


class TestUpgradeHash:
    """Tests for re-hashing after a work factor change."""

    def setup_method(self):
        self.user_repo = AsyncMock()
        self.password_service = PasswordHashingService(rounds=5)
        self.store = CredentialStore(
            user_repository=self.user_repo,
            password_service=self.password_service,
        )

    async def test_hash_at_old_cost_is_replaced(self):
        old_hash = PasswordHashingService(rounds=4).hash(TEST_PASSWORD)

        upgraded = await self.store.upgrade_hash(_user(old_hash), TEST_PASSWORD)

        assert upgraded is True
        user_id, new_hash = self.user_repo.update_password_hash.call_args.args
        assert user_id == TEST_USER_ID
        assert new_hash.startswith("$2b$05$")
        assert self.password_service.verify(TEST_PASSWORD, new_hash)

    async def test_hash_at_current_cost_is_left_alone(self):
        current_hash = self.password_service.hash(TEST_PASSWORD)

        upgraded = await self.store.upgrade_hash(_user(current_hash), TEST_PASSWORD)

        assert upgraded is False
        self.user_repo.update_password_hash.assert_not_called()

    async def test_password_older_than_strength_rules_is_still_upgraded(self):
        legacy_password = "legacy"
        old_hash = PasswordHashingService(rounds=4).rehash(legacy_password)

        assert await self.store.upgrade_hash(_user(old_hash), legacy_password) is True
