"""
Role and permission schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict


class PermissionOut(BaseModel):
    """Permission output schema"""

    id: int
    code: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RoleCreate(BaseModel):
    """Schema for creating a role"""

    name: str = Field(..., min_length=1, max_length=100, description="Role name (case-insensitive unique)")
    description: Optional[str] = Field(default=None, max_length=255)
    is_superuser: bool = Field(
        default=False,
        description="A superuser role grants every permission",
    )
    permissions: List[int] = Field(default_factory=list, description="Permission ids to attach")


class RoleUpdate(BaseModel):
    """Schema for updating a role; omitted fields are left unchanged"""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)
    is_superuser: Optional[bool] = None
    permissions: Optional[List[int]] = Field(
        default=None,
        description="When present, replaces the attached permissions",
    )


class RoleBrief(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class RoleOut(BaseModel):
    """Role output schema"""

    id: int
    name: str
    description: Optional[str] = None
    is_superuser: bool
    permissions: List[PermissionOut] = []
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
