"""SQLAlchemy declarative base for techlearn_auth models.

The gateway creates all tables from ``AuthBase.metadata`` at startup
(see techlearn_gateway.presentation.api.app).
"""

from sqlalchemy.orm import DeclarativeBase


class AuthBase(DeclarativeBase):
    """Declarative base for techlearn_auth models."""
