"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import applications, audit, clubs, leave_requests, members, sessions

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    clubs.router, prefix="/clubs", tags=["Clubs"]
)
api_router.include_router(
    applications.router, prefix="/applications", tags=["Membership applications"]
)
api_router.include_router(
    sessions.router, prefix="/sessions", tags=["Training sessions"]
)
api_router.include_router(
    leave_requests.router, prefix="/leave-requests", tags=["Leave requests"]
)
api_router.include_router(
    members.router, prefix="/members", tags=["Members"]
)
api_router.include_router(
    audit.router, prefix="/audit", tags=["Audit log"]
)
