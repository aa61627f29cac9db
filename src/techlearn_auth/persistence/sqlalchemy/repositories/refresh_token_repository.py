"""SQLAlchemy implementation of RefreshTokenRepository."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from techlearn_auth.clock import ensure_tz_aware, utc_now
from techlearn_auth.exceptions import RefreshTokenConflictError
from techlearn_auth.persistence.sqlalchemy.models import RefreshTokenModel
from techlearn_auth.repositories import RefreshTokenData, RefreshTokenRepository

logger = logging.getLogger(__name__)


class RefreshTokenRepositorySQLAlchemy(RefreshTokenRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_data(self, model: RefreshTokenModel) -> RefreshTokenData:
        return RefreshTokenData(
            id=model.id,
            token=model.token,
            user_id=model.user_id,
            expires_at=ensure_tz_aware(model.expires_at),
            created_at=ensure_tz_aware(model.created_at),
        )

    async def _find_model_by_token(self, token: str) -> RefreshTokenModel | None:
        stmt = select(RefreshTokenModel).where(RefreshTokenModel.token == token)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def persist(
        self,
        token: str,
        user_id: UUID,
        expires_at: datetime,
    ) -> RefreshTokenData:
        existing = await self._find_model_by_token(token)
        if existing is not None:
            if existing.user_id != user_id:
                logger.error(
                    "Refresh token collision between users %s and %s",
                    existing.user_id,
                    user_id,
                )
                raise RefreshTokenConflictError
            return self._to_data(existing)

        model = RefreshTokenModel(
            token=token,
            user_id=user_id,
            expires_at=expires_at,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise RefreshTokenConflictError from e

        logger.debug("Stored refresh token for user: %s", user_id)
        return self._to_data(model)

    async def exists(self, token: str) -> bool:
        stmt = select(exists().where(RefreshTokenModel.token == token))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def find_by_token(self, token: str) -> RefreshTokenData | None:
        model = await self._find_model_by_token(token)
        return self._to_data(model) if model else None

    async def delete_by_token(self, token: str) -> bool:
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.token == token)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def purge_expired(self, now: datetime | None = None) -> int:
        cutoff = now or utc_now()
        stmt = delete(RefreshTokenModel).where(RefreshTokenModel.expires_at <= cutoff)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]
