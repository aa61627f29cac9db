"""SQLAlchemy model for user records."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from techlearn_auth.clock import utc_now
from techlearn_auth.persistence.sqlalchemy.base import AuthBase


class UserModel(AuthBase):
    """
    SQLAlchemy model for registered users.

    The UNIQUE constraint on ``username`` is what makes concurrent
    registrations of the same name resolve to exactly one winner.

    Table: users
    """

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    username: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
        index=True,
    )

    # Password hash (bcrypt format, ~60 chars)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, username={self.username})>"
