"""
Attendance schemas
"""
from datetime import date as date_type, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class PunchInRequest(BaseModel):
    in_note: Optional[str] = Field(None, max_length=100)


class PunchOutRequest(BaseModel):
    out_note: Optional[str] = Field(None, max_length=100)


class AttendanceOut(BaseModel):
    id: int
    user_id: int
    date: date_type
    clock_in: datetime
    clock_out: Optional[datetime] = None
    in_note: Optional[str] = None
    out_note: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
