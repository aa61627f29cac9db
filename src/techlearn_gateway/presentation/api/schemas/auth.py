"""Authentication schemas for request/response models.

Field names on the wire are camelCase (``accessToken``, ``isAdmin``) to stay
compatible with the existing TechLearn clients; Python code uses the
snake_case attribute names.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(_CamelModel):
    """Request schema for user registration.

    Username and password rules are enforced by the credential store so
    that violations are reported as 400 with a precise message.
    """

    name: str = Field(default="", description="Username (3-20 letters, digits, _)")
    password: str = Field(
        default="",
        description="Password (8+ chars, upper, lower and digit)",
    )
    is_admin: bool = Field(default=False, alias="isAdmin")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "alice_01",
                "password": "Passw0rd!",
            },
        },
    )


class LoginRequest(_CamelModel):
    """Request schema for user login."""

    name: str = ""
    password: str = ""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "alice_01",
                "password": "Passw0rd!",
            },
        },
    )


class TokenRequest(_CamelModel):
    """Request schema carrying a refresh token (refresh and logout)."""

    token: str | None = Field(default=None, description="Refresh token")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
            },
        },
    )


class PublicUserResponse(_CamelModel):
    id: UUID
    name: str


class RegisterResponse(_CamelModel):
    """Response schema for a successful registration."""

    message: str = "User created successfully"
    user: PublicUserResponse


class LoginResponse(_CamelModel):
    """Response schema for a successful login."""

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")
    user_id: UUID = Field(alias="userId")
    name: str
    is_admin: bool = Field(alias="isAdmin")


class TokenResponse(_CamelModel):
    """Response schema for a refreshed access token."""

    access_token: str = Field(alias="accessToken")


class CurrentUserResponse(_CamelModel):
    """Identity carried by a verified access token."""

    user_id: UUID = Field(alias="userId")
    name: str
    is_admin: bool = Field(alias="isAdmin")


class SeedResponse(_CamelModel):
    """Response schema for the development seed endpoint."""

    message: str
    created: list[str]
