"""Authentication router for registration, login, token refresh and logout."""

from fastapi import APIRouter, Depends, status

from techlearn_auth import InvalidRefreshTokenError
from techlearn_gateway.presentation.api.dependencies import (
    AuthGatewayDep,
    CurrentUser,
    DBSession,
    rate_limited,
)
from techlearn_gateway.presentation.api.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    PublicUserResponse,
    RegisterRequest,
    RegisterResponse,
    TokenRequest,
    TokenResponse,
)

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    dependencies=[Depends(rate_limited("register"))],
    responses={
        201: {"description": "User registered successfully"},
        400: {"description": "Invalid username or weak password"},
        409: {"description": "Username already exists"},
        429: {"description": "Too many attempts from this address"},
    },
)
async def register(
    request: RegisterRequest,
    auth_gateway: AuthGatewayDep,
    session: DBSession,
) -> RegisterResponse:
    try:
        user = await auth_gateway.register(
            username=request.name,
            password=request.password,
            is_admin=request.is_admin,
        )
        await session.commit()

    except Exception:
        await session.rollback()
        raise

    return RegisterResponse(
        user=PublicUserResponse(id=user.id, name=user.username),
    )


@router.post(
    "/login",
    summary="Authenticate user",
    dependencies=[Depends(rate_limited("login"))],
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many attempts from this address"},
    },
)
async def login(
    request: LoginRequest,
    auth_gateway: AuthGatewayDep,
    session: DBSession,
) -> LoginResponse:
    """
    Authenticate with username and password.

    Returns an access token and a refresh token. The refresh token is
    stored server-side until logout or expiry.

    Unknown usernames and wrong passwords produce the same response.
    """
    try:
        result = await auth_gateway.login(
            username=request.name,
            password=request.password,
        )
        await session.commit()

    except Exception:
        await session.rollback()
        raise

    return LoginResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        user_id=result.user.id,
        name=result.user.username,
        is_admin=result.user.is_admin,
    )


@router.post(
    "/token",
    summary="Refresh access token",
    responses={
        200: {"description": "New access token issued"},
        401: {"description": "No refresh token provided"},
        403: {"description": "Refresh token unknown, revoked, invalid or expired"},
        404: {"description": "User no longer exists"},
    },
)
async def refresh_token(
    auth_gateway: AuthGatewayDep,
    session: DBSession,
    request: TokenRequest | None = None,
) -> TokenResponse:
    """
    Get a new access token using a stored refresh token.

    The refresh token itself is not rotated.
    """
    token = request.token if request else None

    try:
        access_token = await auth_gateway.refresh(token)

    except InvalidRefreshTokenError:
        # Keep the removal of an untrusted token
        await session.commit()
        raise
    except Exception:
        await session.rollback()
        raise

    return TokenResponse(access_token=access_token)


@router.delete(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout user",
    responses={
        204: {"description": "Refresh token revoked (or was never stored)"},
    },
)
async def logout(
    auth_gateway: AuthGatewayDep,
    session: DBSession,
    request: TokenRequest | None = None,
) -> None:
    """Revoke a refresh token. Always 204, whether or not it existed."""
    try:
        await auth_gateway.logout(request.token if request else None)
        await session.commit()

    except Exception:
        await session.rollback()
        raise


@router.get(
    "/me",
    summary="Get current user",
    responses={
        200: {"description": "Identity carried by the access token"},
        401: {"description": "Missing or expired token"},
        403: {"description": "Invalid token"},
    },
)
async def get_me(user: CurrentUser) -> CurrentUserResponse:
    """
    Get the identity attached by the request authenticator.

    Requires a valid access token in the Authorization header.
    """
    return CurrentUserResponse(
        user_id=user.user_id,
        name=user.name,
        is_admin=user.is_admin,
    )
