"""Access-token guard for resource servers.

Any FastAPI service holding the access-signing secret can authenticate
requests with this dependency, without contacting the gateway or a
database at request time:

    authenticate = RequestAuthenticator(settings.access_token_secret)

    @app.get("/courses")
    async def list_courses(
        user: Annotated[AuthenticatedUser, Depends(authenticate)],
    ) -> list[Course]:
        ...

Outcomes:
- no bearer token          -> 401 "Missing authentication token"
- expired token            -> 401 "Token expired"
- bad signature/malformed  -> 403 "Invalid token"
- valid                    -> AuthenticatedUser on ``request.state.user``
"""

import logging
from collections.abc import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from techlearn_auth.exceptions import TokenError, TokenExpiredError
from techlearn_auth.schemas import ACCESS_TOKEN_TYPE, AuthenticatedUser
from techlearn_auth.services.token_issuer import verify_token

logger = logging.getLogger(__name__)

# Security scheme for JWT Bearer tokens
security = HTTPBearer(auto_error=False)


class RequestAuthenticator:
    """FastAPI dependency that admits requests carrying a valid access token.

    Parameters
    ----------
    secret_key
        The access-token signing secret, or a callable returning it (so the
        secret can be resolved from settings at request time).
    """

    def __init__(self, secret_key: str | Callable[[], str]):
        self._secret_key = secret_key

    def _resolve_secret(self) -> str:
        secret = self._secret_key() if callable(self._secret_key) else self._secret_key
        if not secret:
            msg = "Access token secret is not configured"
            raise RuntimeError(msg)
        return secret

    def authenticate(self, token: str | None) -> AuthenticatedUser:
        """Verify a raw token and return the identity it carries.

        Raises HTTPException with the status codes listed in the module
        docstring.
        """
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing authentication token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        try:
            payload = verify_token(token, self._resolve_secret(), ACCESS_TOKEN_TYPE)
        except TokenExpiredError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token expired",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e
        except TokenError as e:
            logger.warning("Rejected access token: %s", e.message)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid token",
            ) from e

        return AuthenticatedUser(
            user_id=payload.user_id,
            name=payload.username or "",
            is_admin=payload.is_admin,
        )

    async def __call__(
        self,
        request: Request,
        credentials: HTTPAuthorizationCredentials | None = Depends(security),
    ) -> AuthenticatedUser:
        token = credentials.credentials if credentials else None
        user = self.authenticate(token)
        request.state.user = user
        return user
