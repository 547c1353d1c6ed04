"""
Role service - business logic for roles and their permissions
"""
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.core.errors import DuplicateEntity, EntityInUse, NotFound, ValidationFailed
from app.models.role import Permission, Role, role_user
from app.schemas.role import RoleCreate, RoleUpdate
from app.services.audit_service import log_audit


def _load_permissions(db: Session, permission_ids: List[int]) -> List[Permission]:
    """Resolve permission ids, rejecting unknown ones."""
    ids = list(dict.fromkeys(permission_ids))
    if not ids:
        return []
    permissions = db.query(Permission).filter(Permission.id.in_(ids)).all()
    if len(permissions) != len(ids):
        found = {p.id for p in permissions}
        missing = [i for i in ids if i not in found]
        raise ValidationFailed.for_field("permissions", f"Unknown permission ids: {missing}")
    return permissions


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Role.id).filter(func.lower(Role.name) == func.lower(name))
    if exclude_id is not None:
        query = query.filter(Role.id != exclude_id)
    if query.first():
        raise DuplicateEntity(f"Role with name '{name}' already exists")


def create_role(
    db: Session,
    role_data: RoleCreate,
    actor_id: int,
) -> Role:
    """
    Create a new role with its permissions attached.

    Name is treated as case-insensitive unique.
    """
    _ensure_unique_name(db, role_data.name)
    permissions = _load_permissions(db, role_data.permissions)

    role = Role(
        name=role_data.name,
        description=role_data.description,
        is_superuser=role_data.is_superuser,
    )
    role.permissions = permissions
    db.add(role)
    db.commit()
    db.refresh(role)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="ROLE_CREATE",
        entity_type="roles",
        entity_id=role.id,
        meta={
            "name": role.name,
            "is_superuser": role.is_superuser,
            "permissions": [p.code for p in permissions],
        },
    )

    return role


def list_roles(db: Session, offset: int, limit: int) -> Tuple[List[Role], int]:
    """List roles newest first, with permissions."""
    query = db.query(Role)
    total = query.count()
    rows = (
        query.options(selectinload(Role.permissions))
        .order_by(Role.created_at.desc(), Role.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total


def get_role(db: Session, role_id: int) -> Role:
    """Get a role by ID."""
    role = (
        db.query(Role)
        .options(selectinload(Role.permissions))
        .filter(Role.id == role_id)
        .first()
    )
    if not role:
        raise NotFound("Role not found")
    return role


def update_role(
    db: Session,
    role_id: int,
    role_data: RoleUpdate,
    actor_id: int,
) -> Role:
    """
    Update a role. A supplied permission list replaces the attached set.
    """
    role = get_role(db, role_id)
    update_dict = role_data.model_dump(exclude_unset=True)

    if update_dict.get("name") is not None:
        _ensure_unique_name(db, update_dict["name"], exclude_id=role_id)
        role.name = update_dict["name"]

    if "description" in update_dict:
        role.description = update_dict["description"]

    if update_dict.get("is_superuser") is not None:
        role.is_superuser = update_dict["is_superuser"]

    if update_dict.get("permissions") is not None:
        role.permissions = _load_permissions(db, update_dict["permissions"])

    db.commit()
    db.refresh(role)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="ROLE_UPDATE",
        entity_type="roles",
        entity_id=role.id,
        meta=update_dict,
    )

    return role


def delete_role(db: Session, role_id: int, actor_id: int) -> Role:
    """Delete a role that is not assigned to any user."""
    role = get_role(db, role_id)

    users_count = (
        db.query(func.count())
        .select_from(role_user)
        .filter(role_user.c.role_id == role_id)
        .scalar()
    )
    if users_count:
        raise EntityInUse(
            f"Cannot delete role because it is assigned to {users_count} user(s)."
        )

    role.permissions = []
    db.delete(role)
    db.commit()

    log_audit(
        db=db,
        actor_id=actor_id,
        action="ROLE_DELETE",
        entity_type="roles",
        entity_id=role_id,
        meta={"name": role.name},
    )
    return role
