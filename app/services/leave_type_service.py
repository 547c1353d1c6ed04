"""
Leave type service - business logic for leave type master data
"""
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import EntityInUse, NotFound, ValidationFailed
from app.models.leave import Leave, LeavePolicy, LeaveType
from app.schemas.leave import LeaveTypeCreate
from app.services.audit_service import log_audit


def _ensure_unique_name(db: Session, name: str, exclude_id: int = None) -> None:
    query = db.query(LeaveType.id).filter(func.lower(LeaveType.name) == func.lower(name))
    if exclude_id is not None:
        query = query.filter(LeaveType.id != exclude_id)
    if query.first():
        raise ValidationFailed.for_field("name", "The name has already been taken.")


def create_leave_type(db: Session, data: LeaveTypeCreate, actor_id: int) -> LeaveType:
    _ensure_unique_name(db, data.name)

    leave_type = LeaveType(
        name=data.name,
        is_paid=data.is_paid,
        description=data.description,
        created_by_id=actor_id,
        updated_by_id=actor_id,
    )
    db.add(leave_type)
    db.commit()
    db.refresh(leave_type)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="LEAVE_TYPE_CREATE",
        entity_type="leave_types",
        entity_id=leave_type.id,
        meta=data.model_dump(),
    )
    return leave_type


def list_leave_types(db: Session, offset: int, limit: int) -> Tuple[List[LeaveType], int]:
    query = db.query(LeaveType)
    total = query.count()
    rows = query.order_by(LeaveType.name.asc()).offset(offset).limit(limit).all()
    return rows, total


def get_leave_type(db: Session, leave_type_id: int) -> LeaveType:
    leave_type = db.query(LeaveType).filter(LeaveType.id == leave_type_id).first()
    if not leave_type:
        raise NotFound("Leave type not found")
    return leave_type


def update_leave_type(db: Session, leave_type_id: int, data: LeaveTypeCreate, actor_id: int) -> LeaveType:
    leave_type = get_leave_type(db, leave_type_id)
    _ensure_unique_name(db, data.name, exclude_id=leave_type_id)

    leave_type.name = data.name
    leave_type.is_paid = data.is_paid
    leave_type.description = data.description
    leave_type.updated_by_id = actor_id
    db.commit()
    db.refresh(leave_type)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="LEAVE_TYPE_UPDATE",
        entity_type="leave_types",
        entity_id=leave_type.id,
        meta=data.model_dump(),
    )
    return leave_type


def delete_leave_type(db: Session, leave_type_id: int, actor_id: int) -> LeaveType:
    """Delete a leave type that no policy or leave refers to."""
    leave_type = get_leave_type(db, leave_type_id)

    in_use = (
        db.query(LeavePolicy.id).filter(LeavePolicy.leave_type_id == leave_type_id).first()
        or db.query(Leave.id).filter(Leave.leave_type_id == leave_type_id).first()
    )
    if in_use:
        raise EntityInUse("Cannot delete leave type because policies or leaves refer to it.")

    db.delete(leave_type)
    db.commit()

    log_audit(
        db=db,
        actor_id=actor_id,
        action="LEAVE_TYPE_DELETE",
        entity_type="leave_types",
        entity_id=leave_type_id,
        meta={"name": leave_type.name},
    )
    return leave_type
