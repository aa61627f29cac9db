"""Authentication exceptions and error codes.

These exceptions are raised by the techlearn_auth package and the gateway
application layer. The presentation layer maps each ``ErrorCode`` to an
HTTP status (see techlearn_gateway.presentation.api.exception_handlers).
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    # 400
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # 401
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    MISSING_TOKEN = "MISSING_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # 403
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"
    FORBIDDEN = "FORBIDDEN"

    # 404
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # 409
    DUPLICATE_USERNAME = "DUPLICATE_USERNAME"

    # 429
    RATE_LIMITED = "RATE_LIMITED"

    # 500
    REFRESH_TOKEN_CONFLICT = "REFRESH_TOKEN_CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AuthError(Exception):
    """Base exception for all authentication errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


# -----------------------------------------------------------------------------
# Registration input
# -----------------------------------------------------------------------------


class ValidationError(AuthError):
    """Raised when a username or password fails validation."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)


class InvalidUsernameError(ValidationError):
    """Raised when a username doesn't match the allowed pattern."""

    def __init__(
        self,
        message: str = (
            "Username must be 3-20 characters long and contain only "
            "letters, digits and underscores"
        ),
    ):
        super().__init__(message)


class WeakPasswordError(ValidationError):
    """Raised when a password doesn't meet strength requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


class DuplicateUsernameError(AuthError):
    """Username already registered."""

    code = ErrorCode.DUPLICATE_USERNAME

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Username already exists")


# -----------------------------------------------------------------------------
# Sign-in and sessions
# -----------------------------------------------------------------------------


class InvalidCredentialsError(AuthError):
    """Raised when username or password is incorrect during login.

    Deliberately carries the same message for both cases.
    """

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class MissingTokenError(AuthError):
    """Raised when a request carries no token at all."""

    code = ErrorCode.MISSING_TOKEN

    def __init__(self, message: str = "Missing authentication token"):
        super().__init__(message)


class InvalidRefreshTokenError(AuthError):
    """Raised when a refresh token is unknown, revoked or badly signed."""

    code = ErrorCode.INVALID_REFRESH_TOKEN

    def __init__(self, message: str = "Invalid refresh token"):
        super().__init__(message)


class RefreshTokenExpiredError(InvalidRefreshTokenError):
    """Raised when a stored refresh token has expired.

    Clients get the same message and code as for any other rejected
    refresh token.
    """


class RefreshTokenConflictError(AuthError):
    """Raised when a token string is already bound to another user's session."""

    code = ErrorCode.REFRESH_TOKEN_CONFLICT

    def __init__(self, message: str = "Refresh token already belongs to another session"):
        super().__init__(message)


class UserNotFoundError(AuthError):
    """Raised when a valid token references a user that no longer exists."""

    code = ErrorCode.USER_NOT_FOUND

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class RateLimitExceededError(AuthError):
    """Raised when a source address exceeds its attempt limit."""

    code = ErrorCode.RATE_LIMITED

    def __init__(
        self,
        message: str = "Too many attempts, please try again later",
        retry_after: int | None = None,
    ):
        self.retry_after = retry_after
        super().__init__(message)


class DevelopmentOnlyError(AuthError):
    """Raised when a development-only operation is called in production."""

    code = ErrorCode.FORBIDDEN

    def __init__(self, message: str = "Not available in production"):
        super().__init__(message)


# -----------------------------------------------------------------------------
# Token verification
# -----------------------------------------------------------------------------


class TokenError(AuthError):
    """Base class for token verification failures."""

    code = ErrorCode.INVALID_TOKEN

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpiredError(TokenError):
    """Raised when a token's signature is valid but its expiry has passed."""

    code = ErrorCode.TOKEN_EXPIRED

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class InvalidSignatureError(TokenError):
    """Raised when a token was not signed with the expected secret."""

    def __init__(self, message: str = "Token signature is invalid"):
        super().__init__(message)


class MalformedTokenError(TokenError):
    """Raised when a token cannot be decoded or lacks required claims."""

    def __init__(self, message: str = "Malformed token"):
        super().__init__(message)
