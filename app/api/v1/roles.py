"""
Role master endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import PageParams, get_db, require_permissions
from app.models.user import User
from app.schemas.common import ApiResponse, Page, ok, paginated
from app.schemas.role import RoleCreate, RoleOut, RoleUpdate
from app.services import role_service


router = APIRouter()


@router.get("", response_model=ApiResponse[Page[RoleOut]])
async def list_roles_endpoint(
    paging: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("roles.view")),
):
    """
    List roles with their permissions.
    """
    rows, total = role_service.list_roles(db, paging.offset, paging.limit)
    return paginated(
        "Roles list", paging.page, paging.limit, total,
        [RoleOut.model_validate(r) for r in rows],
    )


@router.post("", response_model=ApiResponse[RoleOut])
async def create_role_endpoint(
    role_data: RoleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("roles.create")),
):
    """
    Create a new role and attach permissions.
    """
    role = role_service.create_role(db, role_data, current_user.id)
    return ok("Role created successfully", RoleOut.model_validate(role))


@router.get("/{role_id}", response_model=ApiResponse[RoleOut])
async def get_role_endpoint(
    role_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("roles.view")),
):
    role = role_service.get_role(db, role_id)
    return ok("Role details", RoleOut.model_validate(role))


@router.put("/{role_id}", response_model=ApiResponse[RoleOut])
async def update_role_endpoint(
    role_id: int,
    role_data: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("roles.update")),
):
    """
    Update a role. A permissions list replaces the attached permissions.
    """
    role = role_service.update_role(db, role_id, role_data, current_user.id)
    return ok("Role updated successfully", RoleOut.model_validate(role))


@router.delete("/{role_id}", response_model=ApiResponse[RoleOut])
async def delete_role_endpoint(
    role_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("roles.delete")),
):
    """
    Delete a role. Refused while users hold it.
    """
    role = role_service.delete_role(db, role_id, current_user.id)
    return ok("Role deleted successfully", RoleOut.model_validate(role))
