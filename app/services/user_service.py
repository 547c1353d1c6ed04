"""
User service - business logic for user accounts and role assignment
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.core.errors import NotFound, ValidationFailed
from app.core.security import hash_password
from app.models.role import Role
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.services.audit_service import log_audit
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


def _load_roles(db: Session, role_ids: List[int]) -> List[Role]:
    ids = list(dict.fromkeys(role_ids))
    roles = db.query(Role).filter(Role.id.in_(ids)).all() if ids else []
    if not roles or len(roles) != len(ids):
        raise ValidationFailed.for_field("roles", "The selected roles are invalid.")
    return roles


def _ensure_unique_email(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    # Soft-deleted accounts keep their address reserved
    query = db.query(User.id).filter(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first():
        raise ValidationFailed.for_field("email", "The email has already been taken.")


def create_user(db: Session, data: UserCreate, actor_id: int) -> User:
    """
    Create a user with at least one role.

    Raises:
        ValidationFailed: email taken or unknown role ids
    """
    _ensure_unique_email(db, data.email)
    roles = _load_roles(db, data.roles)

    user = User(
        first_name=data.first_name,
        middle_name=data.middle_name,
        last_name=data.last_name,
        phone=data.phone,
        avatar=data.avatar,
        email=data.email.lower(),
        password_hash=hash_password(data.password),
        is_active=True,
        created_by_id=actor_id,
        updated_by_id=actor_id,
    )
    user.roles = roles
    db.add(user)
    db.commit()
    db.refresh(user)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="USER_CREATE",
        entity_type="users",
        entity_id=user.id,
        meta={"email": user.email, "roles": [r.id for r in roles]},
    )
    return user


def list_users(
    db: Session,
    offset: int,
    limit: int,
    exclude_user_id: Optional[int] = None,
    search: Optional[str] = None,
) -> Tuple[List[User], int]:
    """List live users newest first; the caller is left out of the list."""
    query = db.query(User).filter(User.deleted_at.is_(None))
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            User.first_name.ilike(pattern)
            | User.last_name.ilike(pattern)
            | User.email.ilike(pattern)
        )

    total = query.count()
    rows = (
        query.options(selectinload(User.roles))
        .order_by(User.created_at.desc(), User.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total


def get_user(db: Session, user_id: int) -> User:
    user = (
        db.query(User)
        .options(selectinload(User.roles))
        .filter(User.id == user_id, User.deleted_at.is_(None))
        .first()
    )
    if not user:
        raise NotFound("User not found")
    return user


def update_user(db: Session, user_id: int, data: UserUpdate, actor_id: int) -> User:
    user = get_user(db, user_id)
    update_dict = data.model_dump(exclude_unset=True)

    password = update_dict.pop("password", None)
    role_ids = update_dict.pop("roles", None)

    if update_dict.get("email"):
        _ensure_unique_email(db, update_dict["email"], exclude_id=user_id)
        update_dict["email"] = update_dict["email"].lower()

    for field, value in update_dict.items():
        if value is None and field in ("first_name", "last_name", "email", "is_active"):
            continue
        setattr(user, field, value)

    if password:
        user.password_hash = hash_password(password)
    if role_ids is not None:
        user.roles = _load_roles(db, role_ids)
    user.updated_by_id = actor_id

    db.commit()
    db.refresh(user)

    meta = dict(update_dict)
    if role_ids is not None:
        meta["roles"] = role_ids
    if password:
        meta["password_changed"] = True
    log_audit(
        db=db,
        actor_id=actor_id,
        action="USER_UPDATE",
        entity_type="users",
        entity_id=user.id,
        meta=meta,
    )
    return user


def delete_user(db: Session, user_id: int, actor_id: int) -> User:
    """Soft delete: the row stays for leave and audit history."""
    if user_id == actor_id:
        raise ValidationFailed.for_field("id", "You cannot delete your own account.")

    user = get_user(db, user_id)
    user.deleted_at = now_utc()
    user.is_active = False
    user.updated_by_id = actor_id
    db.commit()
    db.refresh(user)

    logger.info("user soft-deleted: user_id=%s actor_id=%s", user_id, actor_id)
    log_audit(
        db=db,
        actor_id=actor_id,
        action="USER_DELETE",
        entity_type="users",
        entity_id=user_id,
        meta={"email": user.email},
    )
    return user
