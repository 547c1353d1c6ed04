"""
Leave request endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import PageParams, get_db, require, require_permissions
from app.models.leave import LeaveStatus
from app.models.user import User
from app.schemas.common import ApiResponse, Page, ok, paginated
from app.schemas.leave import LeaveCreate, LeaveDecisionRequest, LeaveOut, LeaveUpdate
from app.services import leave_service
from app.services.authorization_service import Requirement

router = APIRouter()

# Editors may open a leave without holding leaves.view
VIEW_OR_EDIT = Requirement.parse("any:leaves.view|leaves.update")


@router.get("", response_model=ApiResponse[Page[LeaveOut]])
async def list_leaves(
    user_id: Optional[int] = Query(None, description="Filter by leave owner"),
    status: Optional[LeaveStatus] = Query(None, description="Filter by status"),
    paging: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leaves.view")),
):
    rows, total = leave_service.list_leaves(
        db, paging.offset, paging.limit, user_id=user_id, status=status
    )
    return paginated(
        "Leaves list", paging.page, paging.limit, total,
        [LeaveOut.model_validate(leave) for leave in rows],
    )


@router.post("", response_model=ApiResponse[LeaveOut])
async def create_leave(
    data: LeaveCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leaves.create")),
):
    """
    Request leave for a user

    The leave starts pending. The balance is checked but not drawn; it
    is drawn when the leave is approved.
    """
    leave = leave_service.create_leave(
        db,
        user_id=data.user_id,
        leave_type_id=data.leave_type_id,
        from_date=data.from_date,
        to_date=data.to_date,
        reason=data.reason,
        actor_id=current_user.id,
    )
    return ok("Leave created successfully", LeaveOut.model_validate(leave))


@router.get("/{leave_id}", response_model=ApiResponse[LeaveOut])
async def get_leave(
    leave_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require(VIEW_OR_EDIT)),
):
    leave = leave_service.get_leave(db, leave_id)
    return ok("Leave details", LeaveOut.model_validate(leave))


@router.put("/{leave_id}", response_model=ApiResponse[LeaveOut])
async def update_leave(
    leave_id: int,
    data: LeaveUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leaves.update")),
):
    """Edit a pending leave"""
    leave = leave_service.update_leave(
        db,
        leave_id,
        leave_type_id=data.leave_type_id,
        from_date=data.from_date,
        to_date=data.to_date,
        reason=data.reason,
        actor_id=current_user.id,
        user_id=data.user_id,
    )
    return ok("Leave updated successfully", LeaveOut.model_validate(leave))


@router.post("/{leave_id}/decide", response_model=ApiResponse[LeaveOut])
async def decide_leave(
    leave_id: int,
    data: LeaveDecisionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leaves.decide")),
):
    """
    Approve or reject a pending leave

    Approval draws the leave's days from the user's policy; it fails with
    422 if the balance no longer covers them.
    """
    leave = leave_service.decide_leave(db, leave_id, data.action, current_user.id)
    return ok(f"Leave {leave.status.value}", LeaveOut.model_validate(leave))


@router.delete("/{leave_id}", response_model=ApiResponse[LeaveOut])
async def delete_leave(
    leave_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leaves.delete")),
):
    leave = leave_service.delete_leave(db, leave_id, current_user.id)
    return ok("Leave deleted successfully", LeaveOut.model_validate(leave))
