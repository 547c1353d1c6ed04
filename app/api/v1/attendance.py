"""
Attendance endpoints - punch in / punch out and the attendance register
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import PageParams, get_current_user, get_db, require_permissions
from app.models.user import User
from app.schemas.attendance import AttendanceOut, PunchInRequest, PunchOutRequest
from app.schemas.common import ApiResponse, Page, ok, paginated
from app.services import attendance_service

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[AttendanceOut]])
async def list_attendance(
    user_id: Optional[int] = Query(None),
    date_from: Optional[date] = Query(None, description="Inclusive start date"),
    date_to: Optional[date] = Query(None, description="Inclusive end date"),
    paging: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("attendance.view")),
):
    rows, total = attendance_service.list_attendance(
        db, paging.offset, paging.limit,
        user_id=user_id, date_from=date_from, date_to=date_to,
    )
    return paginated(
        "Attendance list", paging.page, paging.limit, total,
        [AttendanceOut.model_validate(a) for a in rows],
    )


@router.get("/check-attendance", response_model=ApiResponse[AttendanceOut])
async def check_attendance(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Today's attendance record of the caller; data is null if not punched in"""
    attendance = attendance_service.get_today(db, current_user.id)
    if attendance is None:
        return ok("Not punched in today")
    return ok("Attendance for today", AttendanceOut.model_validate(attendance))


@router.post("/punch-in", response_model=ApiResponse[AttendanceOut])
async def punch_in(
    body: Optional[PunchInRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    attendance = attendance_service.punch_in(
        db, current_user.id, in_note=body.in_note if body else None
    )
    return ok("Punched in successfully", AttendanceOut.model_validate(attendance))


@router.post("/punch-out", response_model=ApiResponse[AttendanceOut])
async def punch_out(
    body: Optional[PunchOutRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    attendance = attendance_service.punch_out(
        db, current_user.id, out_note=body.out_note if body else None
    )
    return ok("Punched out successfully", AttendanceOut.model_validate(attendance))
