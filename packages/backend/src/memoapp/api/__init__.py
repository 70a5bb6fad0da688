"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Health and auth routes are open. Note routes each take
get_current_user as a handler parameter (they need the claim to know
who is acting), so no router-level auth dependency is needed; FastAPI
runs the extraction once per request either way.
"""

from fastapi import APIRouter

from memoapp.api.auth import router as auth_router
from memoapp.api.health import router as health_router
from memoapp.api.notes import router as notes_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(notes_router, tags=["notes"])
