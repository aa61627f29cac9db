"""SQLAlchemy model for persisted refresh tokens."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from techlearn_auth.clock import utc_now
from techlearn_auth.persistence.sqlalchemy.base import AuthBase


class RefreshTokenModel(AuthBase):
    """
    One row per issued refresh token (one per successful login).

    Table: refresh_tokens
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    token: Mapped[str] = mapped_column(
        String(1024),
        unique=True,
        nullable=False,
        index=True,
    )

    # No FK to users: sessions outlive a deleted user and are reported as 404
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<RefreshTokenModel(id={self.id}, user_id={self.user_id})>"
