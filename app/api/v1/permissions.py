"""
Permission catalogue endpoint
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import PageParams, get_db, require_permissions
from app.models.user import User
from app.schemas.common import ApiResponse, Page, paginated
from app.schemas.role import PermissionOut
from app.services import permission_service

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[PermissionOut]])
async def list_permissions(
    paging: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("permissions.view")),
):
    rows, total = permission_service.list_permissions(db, paging.offset, paging.limit)
    return paginated(
        "Permissions list", paging.page, paging.limit, total,
        [PermissionOut.model_validate(p) for p in rows],
    )
