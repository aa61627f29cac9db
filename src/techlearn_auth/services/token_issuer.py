"""JWT token issuer.

Signs and verifies the two token kinds used by the gateway:

- access tokens (short-lived, signed with the access secret) carrying the
  user's id, username and admin flag, verified by resource servers without
  any database lookup;
- refresh tokens (long-lived, signed with a separate refresh secret)
  carrying only the user's id and a random token id.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import jwt

from techlearn_auth.clock import utc_now
from techlearn_auth.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
)
from techlearn_auth.schemas import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    IssuedToken,
    TokenPayload,
)

ALGORITHM = "HS256"


def verify_token(
    token: str,
    secret_key: str,
    expected_type: str | None = None,
) -> TokenPayload:
    """Verify and decode a token signed with ``secret_key``.

    Parameters
    ----------
    token
        The encoded JWT string
    secret_key
        Secret the token is expected to be signed with
    expected_type
        Optional token type ("access" or "refresh") the token must carry

    Returns
    -------
    TokenPayload containing the decoded claims

    Raises
    ------
    TokenExpiredError
        If the signature is valid but the expiry has passed
    InvalidSignatureError
        If the token was signed with a different secret
    MalformedTokenError
        If the token cannot be decoded, lacks required claims or has the
        wrong type
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "exp", "type"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError from e
    except jwt.InvalidSignatureError as e:
        raise InvalidSignatureError from e
    except jwt.InvalidTokenError as e:
        raise MalformedTokenError(f"Malformed token: {e}") from e

    try:
        token_type = payload["type"]
        token_payload = TokenPayload(
            user_id=UUID(payload["sub"]),
            token_type=token_type,
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            username=payload.get("name"),
            is_admin=bool(payload.get("is_admin", False)),
            token_id=payload.get("jti"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedTokenError(f"Malformed token payload: {e}") from e

    if expected_type is not None and token_type != expected_type:
        msg = f"Expected {expected_type} token, got {token_type}"
        raise MalformedTokenError(msg)
    if token_payload.is_access_token() and not token_payload.username:
        msg = "Access token carries no username"
        raise MalformedTokenError(msg)

    return token_payload


class TokenIssuer:
    """Service for signing and verifying access and refresh tokens.

    Access and refresh tokens are signed with different secrets, so a
    leaked refresh secret cannot forge access tokens and vice versa.

    Examples
    --------
    >>> issuer = TokenIssuer(access_secret="a" * 32, refresh_secret="r" * 32)
    >>> token = issuer.issue_access_token(user_id, "alice_01", is_admin=False)
    >>> payload = issuer.verify_access_token(token)
    >>> print(payload.username)
    alice_01
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 15
    DEFAULT_REFRESH_EXPIRE_DAYS = 7

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the token issuer.

        Parameters
        ----------
        access_secret
            Secret for signing access tokens
        refresh_secret
            Secret for signing refresh tokens. Must differ from access_secret.
        access_token_expire_minutes
            Minutes until an access token expires (default 15)
        refresh_token_expire_days
            Days until a refresh token expires (default 7)
        clock
            Source of the issuance time (default: current UTC time)
        """
        if not access_secret or not refresh_secret:
            msg = "Token signing secrets cannot be empty"
            raise ValueError(msg)
        if access_secret == refresh_secret:
            msg = "Access and refresh token secrets must differ"
            raise ValueError(msg)

        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._access_expire = timedelta(minutes=access_token_expire_minutes)
        self._refresh_expire = timedelta(days=refresh_token_expire_days)
        self._clock = clock

    @property
    def access_secret(self) -> str:
        return self._access_secret

    @property
    def refresh_secret(self) -> str:
        return self._refresh_secret

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return self._refresh_expire

    def issue_access_token(
        self,
        user_id: UUID,
        username: str,
        is_admin: bool = False,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived access token.

        Parameters
        ----------
        user_id
            The user's unique identifier
        username
            The user's login name
        is_admin
            Whether the user holds the admin flag
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "name": username,
            "is_admin": is_admin,
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + (expires_delta or self._access_expire),
        }
        return jwt.encode(payload, self._access_secret, algorithm=ALGORITHM)

    def issue_refresh_token(
        self,
        user_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> IssuedToken:
        """Create a long-lived refresh token.

        The random ``jti`` claim keeps token strings unique even when the
        same user logs in twice within one second.

        Parameters
        ----------
        user_id
            The user's unique identifier
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded token and the moment it expires
        """
        now = self._clock()
        expires_at = now + (expires_delta or self._refresh_expire)
        payload = {
            "sub": str(user_id),
            "type": REFRESH_TOKEN_TYPE,
            "jti": uuid4().hex,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._refresh_secret, algorithm=ALGORITHM)
        # JWT timestamps have second resolution
        return IssuedToken(token=token, expires_at=expires_at.replace(microsecond=0))

    def verify(
        self,
        token: str,
        secret: str,
        expected_type: str | None = None,
    ) -> TokenPayload:
        """Verify a token against an explicit secret."""
        return verify_token(token, secret, expected_type)

    def verify_access_token(self, token: str) -> TokenPayload:
        return verify_token(token, self._access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        return verify_token(token, self._refresh_secret, REFRESH_TOKEN_TYPE)
