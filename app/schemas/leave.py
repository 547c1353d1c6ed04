"""
Leave schemas: leave types, leave policies and leave requests
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from app.models.leave import LeaveDecision, LeaveStatus
from app.schemas.user import UserBrief


class LeaveTypeCreate(BaseModel):
    """Schema for creating or replacing a leave type"""
    name: str = Field(..., min_length=1, max_length=100)
    is_paid: bool = Field(..., description="Whether the leave is paid")
    description: Optional[str] = Field(None, max_length=255)


class LeaveTypeOut(BaseModel):
    id: int
    name: str
    is_paid: bool
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LeavePolicyCreate(BaseModel):
    """
    Schema for creating or replacing a leave policy.
    remaining_days defaults to total_days when omitted.
    """
    user_id: int
    leave_type_id: int
    policy_name: Optional[str] = Field(None, max_length=150)
    total_days: int = Field(..., ge=0)
    remaining_days: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def _remaining_within_total(self):
        if self.remaining_days is not None and self.remaining_days > self.total_days:
            raise ValueError("remaining_days cannot exceed total_days")
        return self


class LeaveTypeBrief(BaseModel):
    id: int
    name: str
    is_paid: bool

    model_config = ConfigDict(from_attributes=True)


class LeavePolicyOut(BaseModel):
    id: int
    user_id: int
    leave_type_id: int
    policy_name: Optional[str] = None
    total_days: int
    remaining_days: int
    user: Optional[UserBrief] = None
    leave_type: Optional[LeaveTypeBrief] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class _LeaveDates(BaseModel):
    from_date: date = Field(..., description="Start date of leave")
    to_date: date = Field(..., description="End date of leave (inclusive)")

    @model_validator(mode="after")
    def _check_date_order(self):
        if self.from_date > self.to_date:
            raise ValueError("to_date must be on or after from_date")
        return self


class LeaveCreate(_LeaveDates):
    """Schema for requesting leave"""
    user_id: int
    leave_type_id: int
    reason: Optional[str] = Field(None, max_length=255)


class LeaveUpdate(_LeaveDates):
    """Schema for editing a pending leave; the owner cannot change"""
    user_id: Optional[int] = None
    leave_type_id: int
    reason: Optional[str] = Field(None, max_length=255)


class LeaveDecisionRequest(BaseModel):
    action: LeaveDecision = Field(..., description="approved or rejected")


class LeaveOut(BaseModel):
    id: int
    user_id: int
    leave_type_id: int
    from_date: date
    to_date: date
    total_days: int
    reason: Optional[str] = None
    status: LeaveStatus
    approved_by_id: Optional[int] = None
    created_by_id: Optional[int] = None
    updated_by_id: Optional[int] = None
    user: Optional[UserBrief] = None
    approver: Optional[UserBrief] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
