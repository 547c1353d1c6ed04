"""
Leave type master endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import PageParams, get_db, require_permissions
from app.models.user import User
from app.schemas.common import ApiResponse, Page, ok, paginated
from app.schemas.leave import LeaveTypeCreate, LeaveTypeOut
from app.services import leave_type_service

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[LeaveTypeOut]])
async def list_leave_types(
    paging: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_types.view")),
):
    rows, total = leave_type_service.list_leave_types(db, paging.offset, paging.limit)
    return paginated(
        "Leave types list", paging.page, paging.limit, total,
        [LeaveTypeOut.model_validate(t) for t in rows],
    )


@router.post("", response_model=ApiResponse[LeaveTypeOut])
async def create_leave_type(
    data: LeaveTypeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_types.create")),
):
    leave_type = leave_type_service.create_leave_type(db, data, current_user.id)
    return ok("Leave type created successfully", LeaveTypeOut.model_validate(leave_type))


@router.get("/{leave_type_id}", response_model=ApiResponse[LeaveTypeOut])
async def get_leave_type(
    leave_type_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_types.view")),
):
    leave_type = leave_type_service.get_leave_type(db, leave_type_id)
    return ok("Leave type details", LeaveTypeOut.model_validate(leave_type))


@router.put("/{leave_type_id}", response_model=ApiResponse[LeaveTypeOut])
async def update_leave_type(
    leave_type_id: int,
    data: LeaveTypeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_types.update")),
):
    leave_type = leave_type_service.update_leave_type(db, leave_type_id, data, current_user.id)
    return ok("Leave type updated successfully", LeaveTypeOut.model_validate(leave_type))


@router.delete("/{leave_type_id}", response_model=ApiResponse[LeaveTypeOut])
async def delete_leave_type(
    leave_type_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_types.delete")),
):
    """Delete a leave type no policy or leave refers to"""
    leave_type = leave_type_service.delete_leave_type(db, leave_type_id, current_user.id)
    return ok("Leave type deleted successfully", LeaveTypeOut.model_validate(leave_type))
