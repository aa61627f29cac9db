"""Application services for the auth gateway."""

from techlearn_gateway.application.services.auth_gateway import AuthGateway, LoginResult
from techlearn_gateway.application.services.credential_store import CredentialStore

__all__ = ["AuthGateway", "CredentialStore", "LoginResult"]
