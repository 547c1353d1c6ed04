"""
Authentication schemas
"""
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from app.schemas.user import UserOut


class LoginRequest(BaseModel):
    """Login request schema"""
    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=1, description="Password")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(BaseModel):
    refresh_token: Optional[str] = Field(None, description="Also revoke this refresh token")


class TokenPair(BaseModel):
    """Token response schema"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class MeOut(UserOut):
    """Current user with the effective permission codes"""
    is_superuser: bool = False
    permissions: List[str] = []
