"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter, so a file route can't be added without the
guard. Health and users routers are open; /users/me declares the
guard itself.
"""

from fastapi import APIRouter, Depends

from filekeep.api.files import router as files_router
from filekeep.api.health import router as health_router
from filekeep.api.users import router as users_router
from filekeep.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api/v1")

# Open routes, no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users"])

# Protected routes require a valid session cookie
api_router.include_router(files_router, tags=["files"], dependencies=_auth)
