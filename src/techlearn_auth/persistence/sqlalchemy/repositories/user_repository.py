"""SQLAlchemy implementation of UserRepository."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from techlearn_auth.clock import ensure_tz_aware
from techlearn_auth.exceptions import DuplicateUsernameError
from techlearn_auth.persistence.sqlalchemy.models import UserModel
from techlearn_auth.repositories import UserRecord, UserRepository

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _to_data(self, model: UserModel) -> UserRecord:
        """Map SQLAlchemy model to the immutable user record."""
        return UserRecord(
            id=model.id,
            username=model.username,
            password_hash=model.password_hash,
            is_admin=model.is_admin,
            created_at=ensure_tz_aware(model.created_at),
        )

    async def create(
        self,
        username: str,
        password_hash: str,
        is_admin: bool = False,
    ) -> UserRecord:
        model = UserModel(
            username=username,
            password_hash=password_hash,
            is_admin=is_admin,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            # The unique constraint is the authority on username ownership
            if "unique" in str(e).lower():
                raise DuplicateUsernameError(username) from e
            raise

        logger.info("Created user: %s (username: %s)", model.id, username)
        return self._to_data(model)

    async def find_by_username(self, username: str) -> UserRecord | None:
        stmt = select(UserModel).where(UserModel.username == username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_data(model) if model else None

    async def find_by_id(self, user_id: UUID) -> UserRecord | None:
        model = await self._find_model_by_id(user_id)
        return self._to_data(model) if model else None

    async def update_password_hash(self, user_id: UUID, password_hash: str) -> bool:
        model = await self._find_model_by_id(user_id)
        if model is None:
            return False

        model.password_hash = password_hash
        await self._session.flush()
        return True

    async def delete(self, user_id: UUID) -> bool:
        model = await self._find_model_by_id(user_id)
        if model is None:
            return False

        await self._session.delete(model)
        await self._session.flush()
        logger.info("Deleted user: %s", user_id)
        return True

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
