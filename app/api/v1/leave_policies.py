"""
Leave policy (balance ledger) endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import PageParams, get_db, require_permissions
from app.models.user import User
from app.schemas.common import ApiResponse, Page, ok, paginated
from app.schemas.leave import LeavePolicyCreate, LeavePolicyOut
from app.services import leave_policy_service

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[LeavePolicyOut]])
async def list_leave_policies(
    user_id: Optional[int] = Query(None),
    leave_type_id: Optional[int] = Query(None),
    paging: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_policies.view")),
):
    rows, total = leave_policy_service.list_policies(
        db, paging.offset, paging.limit, user_id=user_id, leave_type_id=leave_type_id
    )
    return paginated(
        "Leave policies list", paging.page, paging.limit, total,
        [LeavePolicyOut.model_validate(p) for p in rows],
    )


@router.post("", response_model=ApiResponse[LeavePolicyOut])
async def create_leave_policy(
    data: LeavePolicyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_policies.create")),
):
    """
    Create the allotment for one (user, leave type) pair.

    remaining_days defaults to total_days.
    """
    policy = leave_policy_service.create_policy(db, data, current_user.id)
    return ok("Leave policy created successfully", LeavePolicyOut.model_validate(policy))


@router.get("/{policy_id}", response_model=ApiResponse[LeavePolicyOut])
async def get_leave_policy(
    policy_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_policies.view")),
):
    policy = leave_policy_service.get_policy_by_id(db, policy_id)
    return ok("Leave policy details", LeavePolicyOut.model_validate(policy))


@router.put("/{policy_id}", response_model=ApiResponse[LeavePolicyOut])
async def update_leave_policy(
    policy_id: int,
    data: LeavePolicyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_policies.update")),
):
    policy = leave_policy_service.update_policy(db, policy_id, data, current_user.id)
    return ok("Leave policy updated successfully", LeavePolicyOut.model_validate(policy))


@router.delete("/{policy_id}", response_model=ApiResponse[LeavePolicyOut])
async def delete_leave_policy(
    policy_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("leave_policies.delete")),
):
    policy = leave_policy_service.delete_policy(db, policy_id, current_user.id)
    return ok("Leave policy deleted successfully", LeavePolicyOut.model_validate(policy))
