"""
Attendance service - daily punch in / punch out
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BusinessRuleViolation, DuplicateEntity, NotFound
from app.models.attendance import Attendance
from app.services.audit_service import log_audit
from app.utils.datetime_utils import now_utc, today_utc

logger = logging.getLogger(__name__)


def get_today(db: Session, user_id: int) -> Optional[Attendance]:
    """Today's attendance record for the user, if punched in."""
    return (
        db.query(Attendance)
        .filter(Attendance.user_id == user_id, Attendance.date == today_utc())
        .first()
    )


def punch_in(db: Session, user_id: int, in_note: Optional[str] = None) -> Attendance:
    """
    Open today's attendance record.

    Raises:
        DuplicateEntity: already punched in today
    """
    if get_today(db, user_id):
        raise DuplicateEntity("Attendance already exists")

    now = now_utc()
    attendance = Attendance(
        user_id=user_id,
        date=now.date(),
        clock_in=now,
        in_note=in_note,
    )
    db.add(attendance)
    try:
        db.flush()
        log_audit(
            db=db,
            actor_id=user_id,
            action="ATTENDANCE_PUNCH_IN",
            entity_type="attendances",
            entity_id=attendance.id,
            meta={"date": attendance.date, "in_note": in_note},
            commit=False,
        )
        db.commit()
    except IntegrityError:
        # uq_attendance_user_date: a parallel punch-in won
        db.rollback()
        raise DuplicateEntity("Attendance already exists")
    db.refresh(attendance)

    logger.info("punch in: user_id=%s date=%s", user_id, attendance.date)
    return attendance


def punch_out(db: Session, user_id: int, out_note: Optional[str] = None) -> Attendance:
    """
    Close today's attendance record.

    Raises:
        NotFound: no punch-in today
        BusinessRuleViolation: already punched out
    """
    attendance = get_today(db, user_id)
    if not attendance:
        raise NotFound("Attendance not found for today")
    if attendance.clock_out is not None:
        raise BusinessRuleViolation("Already punched out for today")

    attendance.clock_out = now_utc()
    attendance.out_note = out_note
    log_audit(
        db=db,
        actor_id=user_id,
        action="ATTENDANCE_PUNCH_OUT",
        entity_type="attendances",
        entity_id=attendance.id,
        meta={"date": attendance.date, "out_note": out_note},
        commit=False,
    )
    db.commit()
    db.refresh(attendance)

    logger.info("punch out: user_id=%s date=%s", user_id, attendance.date)
    return attendance


def list_attendance(
    db: Session,
    offset: int,
    limit: int,
    user_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Tuple[List[Attendance], int]:
    """List attendance records, latest day first."""
    query = db.query(Attendance)
    if user_id is not None:
        query = query.filter(Attendance.user_id == user_id)
    if date_from is not None:
        query = query.filter(Attendance.date >= date_from)
    if date_to is not None:
        query = query.filter(Attendance.date <= date_to)

    total = query.count()
    rows = (
        query.order_by(Attendance.date.desc(), Attendance.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total
