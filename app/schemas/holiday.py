"""
Holiday calendar schemas
"""
from datetime import date as date_type, datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class HolidayCreate(BaseModel):
    """Schema for creating a holiday"""
    title: str = Field(..., min_length=1, max_length=100, description="Holiday title")
    description: str = Field(..., max_length=255, description="Holiday description")
    date: date_type = Field(..., description="Holiday date")
    status: bool = Field(True, description="Whether the holiday is active")


class HolidayUpdate(BaseModel):
    """Schema for updating a holiday; omitted fields are left unchanged"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    date: Optional[date_type] = None
    status: Optional[bool] = None


class HolidayOut(BaseModel):
    id: int
    title: str
    description: str
    date: date_type
    status: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
