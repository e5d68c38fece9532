"""Main API router for v1."""
from fastapi import APIRouter

from groupshare.api.v1.endpoints import groups, checkins, members

api_router = APIRouter(prefix="/api/v1")

# Include all endpoint routers
api_router.include_router(groups.router, prefix="/groups", tags=["Groups"])
api_router.include_router(checkins.router, prefix="/groups", tags=["Check-ins"])
api_router.include_router(members.router, prefix="/groups", tags=["Members"])
