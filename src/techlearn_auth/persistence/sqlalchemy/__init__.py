"""SQLAlchemy implementation for techlearn_auth persistence.

Provides:
- AuthBase: Declarative base for auth models
- UserModel, RefreshTokenModel: SQLAlchemy models
- UserRepositorySQLAlchemy, RefreshTokenRepositorySQLAlchemy: Repository
  implementations

Examples
--------
async with engine.begin() as conn:
    await conn.run_sync(AuthBase.metadata.create_all)
"""

from techlearn_auth.persistence.sqlalchemy.base import AuthBase
from techlearn_auth.persistence.sqlalchemy.models import (
    RefreshTokenModel,
    UserModel,
)
from techlearn_auth.persistence.sqlalchemy.repositories import (
    RefreshTokenRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

__all__ = [
    "AuthBase",
    "RefreshTokenModel",
    "RefreshTokenRepositorySQLAlchemy",
    "UserModel",
    "UserRepositorySQLAlchemy",
]
