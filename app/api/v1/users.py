"""
User management endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import PageParams, get_db, require_permissions
from app.models.user import User
from app.schemas.common import ApiResponse, Page, ok, paginated
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services import user_service

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[UserOut]])
async def list_users(
    search: Optional[str] = Query(None, description="Match on name or email"),
    paging: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("users.view")),
):
    """List users other than the caller"""
    rows, total = user_service.list_users(
        db, paging.offset, paging.limit, exclude_user_id=current_user.id, search=search
    )
    return paginated(
        "Users list", paging.page, paging.limit, total,
        [UserOut.model_validate(u) for u in rows],
    )


@router.post("", response_model=ApiResponse[UserOut])
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("users.create")),
):
    user = user_service.create_user(db, user_data, current_user.id)
    return ok("User created successfully", UserOut.model_validate(user))


@router.get("/{user_id}", response_model=ApiResponse[UserOut])
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("users.view")),
):
    user = user_service.get_user(db, user_id)
    return ok("User details", UserOut.model_validate(user))


@router.put("/{user_id}", response_model=ApiResponse[UserOut])
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("users.update")),
):
    user = user_service.update_user(db, user_id, user_data, current_user.id)
    return ok("User updated successfully", UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=ApiResponse[UserOut])
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("users.delete")),
):
    user = user_service.delete_user(db, user_id, current_user.id)
    return ok("User deleted successfully", UserOut.model_validate(user))
