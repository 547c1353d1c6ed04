"""
Health check endpoint
"""
from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint

    Returns service status and the running version.
    """
    return {
        "status": "ok",
        "service": "hr-admin-backend",
        "version": settings.VERSION or "dev",
    }
