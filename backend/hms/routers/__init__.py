"""API routers."""
from hms.routers.health import router as health_router
from hms.routers.auth import router as auth_router
from hms.routers.users import router as users_router
from hms.routers.roles import router as roles_router
from hms.routers.companies import router as companies_router

__all__ = [
    "health_router",
    "auth_router",
    "users_router",
    "roles_router",
    "companies_router",
]
