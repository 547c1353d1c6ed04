"""
Leave policy service - the leave balance ledger

One LeavePolicy row per (user, leave type) holds the allotment and the
remaining balance. The balance only moves through reserve(), which the
approval workflow calls inside its own transaction.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from app.core.errors import (
    DuplicateEntity,
    InsufficientBalance,
    NotFound,
    PolicyMissing,
    ValidationFailed,
)
from app.models.leave import LeavePolicy, LeaveType
from app.models.user import User
from app.schemas.leave import LeavePolicyCreate
from app.services.audit_service import log_audit

logger = logging.getLogger(__name__)


def get_policy(
    db: Session,
    user_id: int,
    leave_type_id: int,
    lock: bool = False,
) -> Optional[LeavePolicy]:
    """
    Fetch the policy for a (user, leave type) pair.

    With lock=True the row is read with SELECT ... FOR UPDATE and
    populate_existing so the balance reflects the database, not the
    identity map. SQLite ignores FOR UPDATE; reserve() stays atomic there.
    """
    query = db.query(LeavePolicy).filter(
        LeavePolicy.user_id == user_id,
        LeavePolicy.leave_type_id == leave_type_id,
    )
    if lock:
        query = query.with_for_update().populate_existing()
    return query.first()


def ensure_feasible(db: Session, user_id: int, leave_type_id: int, days: int) -> LeavePolicy:
    """
    Check that a leave of `days` could be covered right now, without
    reserving anything.

    Raises:
        PolicyMissing: no policy for the pair
        InsufficientBalance: remaining_days < days
    """
    policy = get_policy(db, user_id, leave_type_id)
    if policy is None:
        raise PolicyMissing()
    if policy.remaining_days < days:
        raise InsufficientBalance()
    return policy


def reserve(db: Session, user_id: int, leave_type_id: int, days: int) -> bool:
    """
    Atomically draw `days` from the balance.

    Check and decrement are one conditional UPDATE, so two concurrent
    approvals can never overdraw the same policy. Does not commit; the
    caller commits together with the leave status change.

    Returns:
        True if the balance covered `days` and was decremented
    """
    result = db.execute(
        update(LeavePolicy)
        .where(
            LeavePolicy.user_id == user_id,
            LeavePolicy.leave_type_id == leave_type_id,
            LeavePolicy.remaining_days >= days,
        )
        .values(remaining_days=LeavePolicy.remaining_days - days)
        .execution_options(synchronize_session=False)
    )
    reserved = result.rowcount == 1
    logger.info(
        "ledger reserve: user_id=%s leave_type_id=%s days=%s reserved=%s",
        user_id, leave_type_id, days, reserved,
    )
    return reserved


def check_references(db: Session, user_id: int, leave_type_id: int) -> None:
    """Field errors for an unknown (or deleted) user or an unknown leave type."""
    errors = {}
    if not db.query(User.id).filter(User.id == user_id, User.deleted_at.is_(None)).first():
        errors["user_id"] = ["The selected user id is invalid."]
    if not db.query(LeaveType.id).filter(LeaveType.id == leave_type_id).first():
        errors["leave_type_id"] = ["The selected leave type id is invalid."]
    if errors:
        raise ValidationFailed(errors=errors)


def create_policy(db: Session, data: LeavePolicyCreate, actor_id: int) -> LeavePolicy:
    """Create a policy; one per (user, leave type)."""
    check_references(db, data.user_id, data.leave_type_id)

    if get_policy(db, data.user_id, data.leave_type_id):
        raise DuplicateEntity("Policy already exists for this user and leave type")

    remaining = data.total_days if data.remaining_days is None else data.remaining_days
    policy = LeavePolicy(
        user_id=data.user_id,
        leave_type_id=data.leave_type_id,
        policy_name=data.policy_name,
        total_days=data.total_days,
        remaining_days=remaining,
        created_by_id=actor_id,
        updated_by_id=actor_id,
    )
    db.add(policy)
    db.commit()
    db.refresh(policy)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="LEAVE_POLICY_CREATE",
        entity_type="leave_policies",
        entity_id=policy.id,
        meta=data.model_dump(),
    )
    return policy


def list_policies(
    db: Session,
    offset: int,
    limit: int,
    user_id: Optional[int] = None,
    leave_type_id: Optional[int] = None,
) -> Tuple[List[LeavePolicy], int]:
    query = db.query(LeavePolicy)
    if user_id is not None:
        query = query.filter(LeavePolicy.user_id == user_id)
    if leave_type_id is not None:
        query = query.filter(LeavePolicy.leave_type_id == leave_type_id)

    total = query.count()
    rows = (
        query.options(joinedload(LeavePolicy.user), joinedload(LeavePolicy.leave_type))
        .order_by(LeavePolicy.id)
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total


def get_policy_by_id(db: Session, policy_id: int) -> LeavePolicy:
    policy = (
        db.query(LeavePolicy)
        .options(joinedload(LeavePolicy.user), joinedload(LeavePolicy.leave_type))
        .filter(LeavePolicy.id == policy_id)
        .first()
    )
    if not policy:
        raise NotFound("Leave policy not found")
    return policy


def update_policy(db: Session, policy_id: int, data: LeavePolicyCreate, actor_id: int) -> LeavePolicy:
    """
    Replace a policy's fields. Omitting remaining_days resets the balance
    to total_days.
    """
    policy = get_policy_by_id(db, policy_id)
    check_references(db, data.user_id, data.leave_type_id)

    if (data.user_id, data.leave_type_id) != (policy.user_id, policy.leave_type_id):
        clash = get_policy(db, data.user_id, data.leave_type_id)
        if clash and clash.id != policy.id:
            raise DuplicateEntity("Policy already exists for this user and leave type")

    policy.user_id = data.user_id
    policy.leave_type_id = data.leave_type_id
    policy.policy_name = data.policy_name
    policy.total_days = data.total_days
    policy.remaining_days = data.total_days if data.remaining_days is None else data.remaining_days
    policy.updated_by_id = actor_id
    db.commit()
    db.refresh(policy)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="LEAVE_POLICY_UPDATE",
        entity_type="leave_policies",
        entity_id=policy.id,
        meta=data.model_dump(),
    )
    return policy


def delete_policy(db: Session, policy_id: int, actor_id: int) -> LeavePolicy:
    policy = get_policy_by_id(db, policy_id)
    db.delete(policy)
    db.commit()

    log_audit(
        db=db,
        actor_id=actor_id,
        action="LEAVE_POLICY_DELETE",
        entity_type="leave_policies",
        entity_id=policy_id,
        meta={"user_id": policy.user_id, "leave_type_id": policy.leave_type_id},
    )
    return policy
