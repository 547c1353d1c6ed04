"""
Holiday calendar service - business logic for holiday management
"""
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.errors import DuplicateEntity, NotFound
from app.models.holiday import Holiday
from app.schemas.holiday import HolidayCreate, HolidayUpdate
from app.services.audit_service import log_audit


def _ensure_date_free(db: Session, holiday_date: date, exclude_id: Optional[int] = None) -> None:
    """Only one active holiday may sit on a date."""
    query = db.query(Holiday.id).filter(Holiday.date == holiday_date, Holiday.status.is_(True))
    if exclude_id is not None:
        query = query.filter(Holiday.id != exclude_id)
    if query.first():
        raise DuplicateEntity("Date already exists")


def create_holiday(db: Session, data: HolidayCreate, actor_id: int) -> Holiday:
    """
    Create a new holiday

    Raises:
        DuplicateEntity: an active holiday already exists on the date
    """
    if data.status:
        _ensure_date_free(db, data.date)

    holiday = Holiday(
        title=data.title,
        description=data.description,
        date=data.date,
        status=data.status,
        created_by_id=actor_id,
        updated_by_id=actor_id,
    )
    db.add(holiday)
    db.commit()
    db.refresh(holiday)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="HOLIDAY_CREATE",
        entity_type="holidays",
        entity_id=holiday.id,
        meta=data.model_dump(),
    )
    return holiday


def list_holidays(
    db: Session,
    offset: int,
    limit: int,
    search: Optional[str] = None,
) -> Tuple[List[Holiday], int]:
    """
    List active holidays, latest date first

    search matches title or description, case-insensitively.
    """
    query = db.query(Holiday).filter(Holiday.status.is_(True))
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(Holiday.title.ilike(pattern) | Holiday.description.ilike(pattern))

    total = query.count()
    rows = query.order_by(Holiday.date.desc(), Holiday.id.desc()).offset(offset).limit(limit).all()
    return rows, total


def get_holiday(db: Session, holiday_id: int) -> Holiday:
    holiday = db.query(Holiday).filter(Holiday.id == holiday_id, Holiday.status.is_(True)).first()
    if not holiday:
        raise NotFound("Holiday not found")
    return holiday


def update_holiday(db: Session, holiday_id: int, data: HolidayUpdate, actor_id: int) -> Holiday:
    holiday = get_holiday(db, holiday_id)
    update_dict = data.model_dump(exclude_unset=True, exclude_none=True)

    new_date = update_dict.get("date", holiday.date)
    if update_dict.get("status", holiday.status):
        _ensure_date_free(db, new_date, exclude_id=holiday_id)

    for field, value in update_dict.items():
        setattr(holiday, field, value)
    holiday.updated_by_id = actor_id
    db.commit()
    db.refresh(holiday)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="HOLIDAY_UPDATE",
        entity_type="holidays",
        entity_id=holiday.id,
        meta=update_dict,
    )
    return holiday


def delete_holiday(db: Session, holiday_id: int, actor_id: int) -> Holiday:
    """Soft delete: status is switched off and the date becomes free again."""
    holiday = get_holiday(db, holiday_id)
    holiday.status = False
    holiday.updated_by_id = actor_id
    db.commit()
    db.refresh(holiday)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="HOLIDAY_DELETE",
        entity_type="holidays",
        entity_id=holiday_id,
        meta={"date": holiday.date, "title": holiday.title},
    )
    return holiday
