"""Development-only helpers. Every route here is refused outside development."""

import logging

from fastapi import APIRouter, Depends

from techlearn_auth import DevelopmentOnlyError, DuplicateUsernameError
from techlearn_gateway.presentation.api.dependencies import (
    AuthGatewayDep,
    DBSession,
    SettingsDep,
)
from techlearn_gateway.presentation.api.schemas.auth import SeedResponse

logger = logging.getLogger(__name__)

# (username, password, is_admin)
DEMO_USERS: tuple[tuple[str, str, bool], ...] = (
    ("demo_admin", "DemoAdmin123", True),
    ("demo_student", "DemoStudent123", False),
)


def require_development(settings: SettingsDep) -> None:
    if not settings.is_development:
        raise DevelopmentOnlyError


router = APIRouter(dependencies=[Depends(require_development)])


@router.post(
    "/seed",
    summary="Seed demo users",
    responses={
        200: {"description": "Demo users present"},
        403: {"description": "Not available in production"},
    },
)
async def seed(
    auth_gateway: AuthGatewayDep,
    session: DBSession,
) -> SeedResponse:
    """Create a demo admin and a demo user. Existing ones are left alone."""
    created: list[str] = []
    for username, password, is_admin in DEMO_USERS:
        # One transaction per user: a failed flush poisons the session
        try:
            await auth_gateway.register(username, password, is_admin=is_admin)
            await session.commit()
        except DuplicateUsernameError:
            await session.rollback()
            continue
        except Exception:
            await session.rollback()
            raise
        created.append(username)

    logger.info("Seeded demo users: %s", created or "none (already present)")
    return SeedResponse(message="Demo users ready", created=created)
