"""Pydantic schemas for the gateway API."""

from techlearn_gateway.presentation.api.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    PublicUserResponse,
    RegisterRequest,
    RegisterResponse,
    SeedResponse,
    TokenRequest,
    TokenResponse,
)

__all__ = [
    "CurrentUserResponse",
    "LoginRequest",
    "LoginResponse",
    "PublicUserResponse",
    "RegisterRequest",
    "RegisterResponse",
    "SeedResponse",
    "TokenRequest",
    "TokenResponse",
]
