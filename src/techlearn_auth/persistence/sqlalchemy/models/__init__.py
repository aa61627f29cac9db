from techlearn_auth.persistence.sqlalchemy.models.refresh_token_model import (
    RefreshTokenModel,
)
from techlearn_auth.persistence.sqlalchemy.models.user_model import UserModel

__all__ = ["RefreshTokenModel", "UserModel"]
