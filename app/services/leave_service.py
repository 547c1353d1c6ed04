"""
Leave service - leave request lifecycle

    pending --approve--> approved   (draws the balance from the ledger)
    pending --reject---> rejected   (no ledger interaction)

approved and rejected are terminal. Balances are only checked, never
reserved, when a leave is created or edited; the binding reservation
happens at approval time under the ledger's atomic update.

Every write that depends on the leave's status re-reads the row locked and
is itself conditional on that status, so a request working from a stale
copy of the leave can never decide, edit or delete it twice.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import delete, update
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.errors import (
    AlreadyDecided,
    ApprovedLeaveNotDeletable,
    InsufficientBalance,
    LeaveNotPending,
    NotFound,
    ValidationFailed,
)
from app.models.leave import Leave, LeaveDecision, LeaveStatus
from app.services import leave_policy_service as ledger
from app.services.audit_service import log_audit
from app.utils.datetime_utils import inclusive_day_span

logger = logging.getLogger(__name__)


def _check_date_order(from_date: date, to_date: date) -> None:
    if from_date > to_date:
        raise ValidationFailed.for_field("to_date", "to_date must be on or after from_date")


def get_leave(db: Session, leave_id: int, lock: bool = False) -> Leave:
    """
    Fetch a leave.

    With lock=True the row is read with SELECT ... FOR UPDATE and
    populate_existing, so the status seen is the committed one rather than
    whatever the identity map holds.
    """
    query = db.query(Leave).filter(Leave.id == leave_id)
    if lock:
        # no outer joins here: FOR UPDATE cannot cover the nullable approver side
        query = query.options(
            selectinload(Leave.user), selectinload(Leave.approver)
        ).with_for_update().populate_existing()
    else:
        query = query.options(joinedload(Leave.user), joinedload(Leave.approver))
    leave = query.first()
    if not leave:
        raise NotFound("Leave not found")
    return leave


def transition_pending(db: Session, leave_id: int, **values) -> bool:
    """
    Write `values` onto the leave only if it is still pending.

    A single conditional UPDATE; does not commit.

    Returns:
        True if the leave was pending and has been updated
    """
    result = db.execute(
        update(Leave)
        .where(Leave.id == leave_id, Leave.status == LeaveStatus.PENDING)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def list_leaves(
    db: Session,
    offset: int,
    limit: int,
    user_id: Optional[int] = None,
    status: Optional[LeaveStatus] = None,
) -> Tuple[List[Leave], int]:
    """List leaves newest first, optionally filtered by user and status"""
    query = db.query(Leave)
    if user_id is not None:
        query = query.filter(Leave.user_id == user_id)
    if status is not None:
        query = query.filter(Leave.status == status)

    total = query.count()
    rows = (
        query.options(joinedload(Leave.user), joinedload(Leave.approver))
        .order_by(Leave.from_date.desc(), Leave.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total


def create_leave(
    db: Session,
    user_id: int,
    leave_type_id: int,
    from_date: date,
    to_date: date,
    reason: Optional[str],
    actor_id: int,
) -> Leave:
    """
    Create a pending leave request.

    Raises:
        ValidationFailed: bad date order or unknown user / leave type
        PolicyMissing: no policy for (user, leave type)
        InsufficientBalance: remaining_days < requested days
    """
    _check_date_order(from_date, to_date)
    ledger.check_references(db, user_id, leave_type_id)

    total_days = inclusive_day_span(from_date, to_date)
    ledger.ensure_feasible(db, user_id, leave_type_id, total_days)

    leave = Leave(
        user_id=user_id,
        leave_type_id=leave_type_id,
        from_date=from_date,
        to_date=to_date,
        total_days=total_days,
        reason=reason,
        status=LeaveStatus.PENDING,
        created_by_id=actor_id,
        updated_by_id=actor_id,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)

    logger.info(
        "leave created: leave_id=%s user_id=%s leave_type_id=%s total_days=%s",
        leave.id, user_id, leave_type_id, total_days,
    )
    log_audit(
        db=db,
        actor_id=actor_id,
        action="LEAVE_CREATE",
        entity_type="leaves",
        entity_id=leave.id,
        meta={
            "user_id": user_id,
            "leave_type_id": leave_type_id,
            "from_date": from_date,
            "to_date": to_date,
            "total_days": total_days,
        },
    )
    return leave


def update_leave(
    db: Session,
    leave_id: int,
    leave_type_id: int,
    from_date: date,
    to_date: date,
    reason: Optional[str],
    actor_id: int,
    user_id: Optional[int] = None,
) -> Leave:
    """
    Edit a pending leave. total_days is recomputed from the new range and
    the balance is re-checked the same way as on creation.

    Raises:
        NotFound, LeaveNotPending, ValidationFailed, PolicyMissing,
        InsufficientBalance
    """
    try:
        leave = get_leave(db, leave_id, lock=True)
        if leave.status != LeaveStatus.PENDING:
            raise LeaveNotPending()

        if user_id is not None and user_id != leave.user_id:
            raise ValidationFailed.for_field("user_id", "The owner of a leave cannot be changed.")

        _check_date_order(from_date, to_date)
        ledger.check_references(db, leave.user_id, leave_type_id)

        total_days = inclusive_day_span(from_date, to_date)
        ledger.ensure_feasible(db, leave.user_id, leave_type_id, total_days)

        if not transition_pending(
            db,
            leave_id,
            leave_type_id=leave_type_id,
            from_date=from_date,
            to_date=to_date,
            total_days=total_days,
            reason=reason,
            updated_by_id=actor_id,
        ):
            raise LeaveNotPending()

        log_audit(
            db=db,
            actor_id=actor_id,
            action="LEAVE_UPDATE",
            entity_type="leaves",
            entity_id=leave_id,
            meta={
                "leave_type_id": leave_type_id,
                "from_date": from_date,
                "to_date": to_date,
                "total_days": total_days,
            },
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(leave)
    return leave


def decide_leave(db: Session, leave_id: int, action: LeaveDecision, actor_id: int) -> Leave:
    """
    Approve or reject a pending leave.

    The status flip is conditional on the leave still being pending, so
    only one decision can ever land. Approval then reserves
    leave.total_days on the (user, leave type) policy in the same
    transaction; if the balance no longer covers the leave nothing is
    changed.

    Raises:
        NotFound: unknown leave
        AlreadyDecided: leave is not pending
        InsufficientBalance: approval could not be covered
    """
    new_status = LeaveStatus(action.value)

    try:
        leave = get_leave(db, leave_id, lock=True)
        if leave.status != LeaveStatus.PENDING:
            raise AlreadyDecided()

        if not transition_pending(
            db,
            leave_id,
            status=new_status,
            approved_by_id=actor_id,
            updated_by_id=actor_id,
        ):
            raise AlreadyDecided()

        if new_status == LeaveStatus.APPROVED:
            policy = ledger.get_policy(db, leave.user_id, leave.leave_type_id, lock=True)
            if policy is None or not ledger.reserve(db, leave.user_id, leave.leave_type_id, leave.total_days):
                raise InsufficientBalance("Insufficient remaining days at approval time")

        log_audit(
            db=db,
            actor_id=actor_id,
            action="LEAVE_APPROVE" if new_status == LeaveStatus.APPROVED else "LEAVE_REJECT",
            entity_type="leaves",
            entity_id=leave_id,
            meta={
                "user_id": leave.user_id,
                "leave_type_id": leave.leave_type_id,
                "total_days": leave.total_days,
            },
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(leave)
    logger.info(
        "leave status transition: leave_id=%s before=pending after=%s days=%s",
        leave_id, new_status.value, leave.total_days,
    )
    return leave


def delete_leave(db: Session, leave_id: int, actor_id: int) -> Leave:
    """
    Delete a pending or rejected leave. Approved leaves have drawn the
    balance and cannot be deleted.

    Returns the detached leave as it was before deletion.
    """
    try:
        leave = get_leave(db, leave_id, lock=True)
        if leave.status == LeaveStatus.APPROVED:
            raise ApprovedLeaveNotDeletable()

        # keep the loaded snapshot for the response out of the session
        db.expunge(leave)

        result = db.execute(
            delete(Leave)
            .where(Leave.id == leave_id, Leave.status != LeaveStatus.APPROVED)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ApprovedLeaveNotDeletable()

        log_audit(
            db=db,
            actor_id=actor_id,
            action="LEAVE_DELETE",
            entity_type="leaves",
            entity_id=leave_id,
            meta={"user_id": leave.user_id, "status": leave.status},
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    return leave
