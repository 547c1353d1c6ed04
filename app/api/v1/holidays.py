"""
Holiday calendar endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import PageParams, get_db, require_permissions
from app.models.user import User
from app.schemas.common import ApiResponse, Page, ok, paginated
from app.schemas.holiday import HolidayCreate, HolidayOut, HolidayUpdate
from app.services import holiday_service

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[HolidayOut]])
async def list_holidays(
    search: Optional[str] = Query(None, description="Match on title or description"),
    paging: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("holidays.view")),
):
    """List active holidays, latest first"""
    rows, total = holiday_service.list_holidays(db, paging.offset, paging.limit, search=search)
    return paginated(
        "Holidays list", paging.page, paging.limit, total,
        [HolidayOut.model_validate(h) for h in rows],
    )


@router.post("", response_model=ApiResponse[HolidayOut])
async def create_holiday(
    data: HolidayCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("holidays.create")),
):
    holiday = holiday_service.create_holiday(db, data, current_user.id)
    return ok("Holiday created successfully", HolidayOut.model_validate(holiday))


@router.get("/{holiday_id}", response_model=ApiResponse[HolidayOut])
async def get_holiday(
    holiday_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("holidays.view")),
):
    holiday = holiday_service.get_holiday(db, holiday_id)
    return ok("Holiday details", HolidayOut.model_validate(holiday))


@router.put("/{holiday_id}", response_model=ApiResponse[HolidayOut])
async def update_holiday(
    holiday_id: int,
    data: HolidayUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("holidays.update")),
):
    holiday = holiday_service.update_holiday(db, holiday_id, data, current_user.id)
    return ok("Holiday updated successfully", HolidayOut.model_validate(holiday))


@router.delete("/{holiday_id}", response_model=ApiResponse[HolidayOut])
async def delete_holiday(
    holiday_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("holidays.delete")),
):
    holiday = holiday_service.delete_holiday(db, holiday_id, current_user.id)
    return ok("Holiday deleted successfully", HolidayOut.model_validate(holiday))
