"""
User schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.security import validate_password
from app.schemas.role import RoleBrief


class UserCreate(BaseModel):
    """Schema for creating a user"""
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., pattern=r"^\d{10}$", description="10 digit phone number")
    avatar: Optional[str] = Field(None, max_length=255)
    email: EmailStr
    password: str
    roles: List[int] = Field(..., min_length=1, description="Role ids to assign")

    @field_validator("password")
    @classmethod
    def _check_password(cls, v: str) -> str:
        return validate_password(v)


class UserUpdate(BaseModel):
    """Schema for updating a user; omitted fields are left unchanged"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=r"^\d{10}$")
    avatar: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, description="Re-hashed only when non-blank")
    is_active: Optional[bool] = None
    roles: Optional[List[int]] = Field(None, description="When present, replaces the assigned roles")

    @field_validator("password")
    @classmethod
    def _check_password(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return validate_password(v)


class UserBrief(BaseModel):
    """Compact user reference embedded in other resources"""
    id: int
    first_name: str
    last_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserOut(BaseModel):
    id: int
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    email: str
    is_active: bool
    roles: List[RoleBrief] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
