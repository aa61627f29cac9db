"""Auth gateway service: register, login, refresh and logout."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from techlearn_auth import (
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    MissingTokenError,
    PublicUser,
    RefreshTokenExpiredError,
    TokenExpiredError,
    TokenError,
    TokenIssuer,
    UserNotFoundError,
    UserRecord,
)

if TYPE_CHECKING:
    from techlearn_auth import RefreshTokenRepository
    from techlearn_gateway.application.services.credential_store import (
        CredentialStore,
    )

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    user: UserRecord
    access_token: str
    refresh_token: str


class AuthGateway:
    """
    Application service for the gateway's four public operations.

    Orchestrates the credential store (users and passwords), the token
    issuer (signing) and the refresh token repository (sessions).

    Refresh tokens are not rotated: the same token keeps working until
    logout or its own expiry.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        refresh_token_repository: RefreshTokenRepository,
        token_issuer: TokenIssuer,
    ):
        self._credentials = credential_store
        self._refresh_repo = refresh_token_repository
        self._token_issuer = token_issuer

    def _issue_access_token(self, user: UserRecord) -> str:
        return self._token_issuer.issue_access_token(
            user_id=user.id,
            username=user.username,
            is_admin=user.is_admin,
        )

    async def register(
        self,
        username: str,
        password: str,
        is_admin: bool = False,
    ) -> PublicUser:
        return await self._credentials.register(username, password, is_admin)

    async def login(self, username: str, password: str) -> LoginResult:
        user = await self._credentials.find_by_username(username)

        # Runs a full bcrypt comparison whether or not the user exists
        password_ok = await self._credentials.check_password(user, password)
        if user is None or not password_ok:
            logger.info("Failed login attempt for username: %s", username)
            raise InvalidCredentialsError

        await self._credentials.upgrade_hash(user, password)

        access_token = self._issue_access_token(user)
        refresh = self._token_issuer.issue_refresh_token(user.id)
        await self._refresh_repo.persist(
            token=refresh.token,
            user_id=user.id,
            expires_at=refresh.expires_at,
        )

        logger.info("User logged in: %s", username)
        return LoginResult(
            user=user,
            access_token=access_token,
            refresh_token=refresh.token,
        )

    async def refresh(self, refresh_token: str | None) -> str:
        """Exchange a stored, valid refresh token for a new access token.

        Raises
        ------
        MissingTokenError
            No token supplied
        InvalidRefreshTokenError
            Token never issued, already revoked, badly signed or malformed.
            A stored token that fails signature checks is deleted.
        RefreshTokenExpiredError
            Token expired (the row is left for lazy expiry)
        UserNotFoundError
            The owning user no longer exists
        """
        if not refresh_token:
            raise MissingTokenError

        if not await self._refresh_repo.exists(refresh_token):
            raise InvalidRefreshTokenError

        try:
            payload = self._token_issuer.verify_refresh_token(refresh_token)
        except TokenExpiredError as e:
            logger.info("Refused expired refresh token")
            raise RefreshTokenExpiredError from e
        except TokenError as e:
            await self._refresh_repo.delete_by_token(refresh_token)
            logger.warning("Deleted untrusted refresh token: %s", e.message)
            raise InvalidRefreshTokenError from e

        user = await self._credentials.find_by_id(payload.user_id)
        if user is None:
            raise UserNotFoundError

        logger.debug("Access token refreshed for user: %s", user.username)
        return self._issue_access_token(user)

    async def logout(self, refresh_token: str | None) -> None:
        """Revoke a refresh token. Unknown or missing tokens are ignored."""
        if not refresh_token:
            return
        deleted = await self._refresh_repo.delete_by_token(refresh_token)
        if deleted:
            logger.debug("Refresh token revoked")
