"""
Tests for permission seeding and superuser bootstrap
"""
from app.core.security import verify_password
from app.models.role import Permission, Role
from app.models.user import User
from app.services.permission_service import DEFAULT_PERMISSIONS, bootstrap_superuser, seed_permissions


def test_seeding_is_idempotent(db):
    assert seed_permissions(db) == 0
    assert db.query(Permission).count() == len(DEFAULT_PERMISSIONS)


def test_bootstrap_creates_role_and_admin_once(db):
    bootstrap_superuser(db, "root@example.com", "rootpass1")
    bootstrap_superuser(db, "root@example.com", "rootpass1")

    role = db.query(Role).filter(Role.is_superuser.is_(True)).one()
    admin = db.query(User).filter(User.email == "root@example.com").one()
    assert [r.id for r in admin.roles] == [role.id]
    assert verify_password("rootpass1", admin.password_hash)


def test_bootstrap_skips_when_superuser_exists(db, admin):
    bootstrap_superuser(db, "root@example.com", "rootpass1")
    assert db.query(User).filter(User.email == "root@example.com").first() is None
