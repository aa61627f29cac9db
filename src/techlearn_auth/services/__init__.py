"""Authentication services.

Provides password hashing and JWT token management.
"""

from techlearn_auth.services.password_service import PasswordHashingService
from techlearn_auth.services.token_issuer import TokenIssuer, verify_token

__all__ = [
    "PasswordHashingService",
    "TokenIssuer",
    "verify_token",
]
