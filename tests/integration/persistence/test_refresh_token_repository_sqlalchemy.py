"""Integration tests for RefreshTokenRepositorySQLAlchemy against SQLite."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from techlearn_auth import RefreshTokenConflictError
from techlearn_auth.persistence.sqlalchemy import RefreshTokenRepositorySQLAlchemy

pytestmark = pytest.mark.integration


def _in(days: int) -> datetime:
    return (datetime.now(tz=timezone.utc) + timedelta(days=days)).replace(microsecond=0)


class TestRefreshTokenRepositorySQLAlchemy:
    async def test_persist_then_exists(self, db_session):
        repo = RefreshTokenRepositorySQLAlchemy(db_session)
        user_id = uuid4()
        expires_at = _in(7)

        stored = await repo.persist("token-a", user_id, expires_at)
        await db_session.commit()

        assert await repo.exists("token-a")
        assert not await repo.exists("token-b")
        assert stored.user_id == user_id

        found = await repo.find_by_token("token-a")
        assert found is not None
        assert found.expires_at == expires_at
        assert found.expires_at.tzinfo is not None

    async def test_persist_same_pair_twice_is_a_no_op(self, db_session):
        repo = RefreshTokenRepositorySQLAlchemy(db_session)
        user_id = uuid4()

        first = await repo.persist("token-a", user_id, _in(7))
        second = await repo.persist("token-a", user_id, _in(7))

        assert first.id == second.id

    async def test_persist_token_for_another_user_conflicts(self, db_session):
        repo = RefreshTokenRepositorySQLAlchemy(db_session)
        await repo.persist("token-a", uuid4(), _in(7))

        with pytest.raises(RefreshTokenConflictError):
            await repo.persist("token-a", uuid4(), _in(7))

    async def test_delete_by_token(self, db_session):
        repo = RefreshTokenRepositorySQLAlchemy(db_session)
        await repo.persist("token-a", uuid4(), _in(7))

        assert await repo.delete_by_token("token-a") is True
        assert not await repo.exists("token-a")
        assert await repo.delete_by_token("token-a") is False

    async def test_many_tokens_per_user(self, db_session):
        repo = RefreshTokenRepositorySQLAlchemy(db_session)
        user_id = uuid4()
        await repo.persist("laptop", user_id, _in(7))
        await repo.persist("phone", user_id, _in(7))

        await repo.delete_by_token("laptop")

        assert await repo.exists("phone")

    async def test_find_expired_row_reports_expiry(self, db_session):
        repo = RefreshTokenRepositorySQLAlchemy(db_session)
        await repo.persist("old", uuid4(), _in(-1))

        found = await repo.find_by_token("old")

        assert found is not None
        assert found.is_expired(datetime.now(tz=timezone.utc))

    async def test_purge_expired_keeps_live_rows(self, db_session):
        repo = RefreshTokenRepositorySQLAlchemy(db_session)
        await repo.persist("old-1", uuid4(), _in(-2))
        await repo.persist("old-2", uuid4(), _in(-1))
        await repo.persist("live", uuid4(), _in(1))

        removed = await repo.purge_expired()

        assert removed == 2
        assert await repo.exists("live")
        assert not await repo.exists("old-1")
