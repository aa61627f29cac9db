from techlearn_gateway.presentation.api.routers.auth import router as auth_router
from techlearn_gateway.presentation.api.routers.dev import router as dev_router

__all__ = [
    "auth_router",
    "dev_router",
]
