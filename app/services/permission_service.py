"""
Permission service - permission catalogue and startup seeding
"""
import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models.role import Permission, Role
from app.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_PERMISSIONS = [
    ("users.create", "Can create users"),
    ("users.view", "Can view users and user list"),
    ("users.update", "Can update users"),
    ("users.delete", "Can delete users"),
    ("roles.create", "Can create roles"),
    ("roles.view", "Can view roles and role list"),
    ("roles.update", "Can update roles"),
    ("roles.delete", "Can delete roles"),
    ("permissions.view", "Can view permissions and permissions list"),
    ("holidays.create", "Can create holidays"),
    ("holidays.view", "Can view holidays and holiday list"),
    ("holidays.update", "Can update holidays"),
    ("holidays.delete", "Can delete holidays"),
    ("leave_types.create", "Can create leave types"),
    ("leave_types.view", "Can view leave types"),
    ("leave_types.update", "Can update leave types"),
    ("leave_types.delete", "Can delete leave types"),
    ("leave_policies.create", "Can create leave policies"),
    ("leave_policies.view", "Can view leave policies"),
    ("leave_policies.update", "Can update leave policies"),
    ("leave_policies.delete", "Can delete leave policies"),
    ("leaves.create", "Can create leaves"),
    ("leaves.decide", "Can decide leaves"),
    ("leaves.view", "Can view leaves and leaves list"),
    ("leaves.update", "Can update leaves"),
    ("leaves.delete", "Can delete leaves"),
    ("attendance.view", "Can view attendance of all users"),
]

SUPERUSER_ROLE_NAME = "Super Admin"


def list_permissions(db: Session, offset: int, limit: int) -> Tuple[List[Permission], int]:
    query = db.query(Permission)
    total = query.count()
    rows = query.order_by(Permission.code.asc()).offset(offset).limit(limit).all()
    return rows, total


def seed_permissions(db: Session) -> int:
    """Insert missing default permissions and refresh descriptions. Returns rows added."""
    existing = {p.code: p for p in db.query(Permission).all()}
    added = 0
    for code, description in DEFAULT_PERMISSIONS:
        permission = existing.get(code)
        if permission is None:
            db.add(Permission(code=code, description=description))
            added += 1
        elif permission.description != description:
            permission.description = description
    db.commit()
    return added


def bootstrap_superuser(db: Session, email: str, password: str) -> None:
    """
    Ensure a superuser role exists and is held by at least one user,
    creating the initial admin account when nobody holds it.
    """
    role = db.query(Role).filter(Role.is_superuser.is_(True)).first()
    if role is None:
        role = Role(
            name=SUPERUSER_ROLE_NAME,
            description="Grants every permission",
            is_superuser=True,
        )
        db.add(role)
        db.flush()
        logger.info("Created superuser role '%s'", role.name)

    if role.users:
        logger.info("Superuser already exists, skipping initial bootstrap")
        db.commit()
        return

    admin = db.query(User).filter(User.email == email).first()
    if admin is None:
        admin = User(
            first_name="System",
            last_name="Administrator",
            email=email,
            password_hash=hash_password(password),
            is_active=True,
        )
        db.add(admin)
        logger.info("Initial admin user created: %s", email)
        logger.info("Password: [set via INITIAL_ADMIN_PASSWORD environment variable]")
    admin.roles.append(role)
    db.commit()
