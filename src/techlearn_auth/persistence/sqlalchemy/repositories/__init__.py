from techlearn_auth.persistence.sqlalchemy.repositories.refresh_token_repository import (  # NOQA: E501
    RefreshTokenRepositorySQLAlchemy,
)
from techlearn_auth.persistence.sqlalchemy.repositories.user_repository import (
    UserRepositorySQLAlchemy,
)

__all__ = ["RefreshTokenRepositorySQLAlchemy", "UserRepositorySQLAlchemy"]
