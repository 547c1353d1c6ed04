"""
Main API router
"""
from fastapi import APIRouter

from app.api.v1 import (
    health,
    auth,
    users,
    roles,
    permissions,
    leave_types,
    leave_policies,
    leaves,
    holidays,
    attendance,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
api_router.include_router(leave_types.router, prefix="/leave-types", tags=["leave-types"])
api_router.include_router(leave_policies.router, prefix="/leave-policies", tags=["leave-policies"])
api_router.include_router(leaves.router, prefix="/leaves", tags=["leaves"])
api_router.include_router(holidays.router, prefix="/holidays", tags=["holidays"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])
