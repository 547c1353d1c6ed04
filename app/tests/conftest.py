"""
Pytest configuration and fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-the-hr-admin-backend")
os.environ.setdefault("APP_ENV", "local")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.core.deps import get_db
from app.core.security import create_access_token, hash_password
from app.models import LeavePolicy, LeaveType, Permission, Role, User  # noqa: F401  registers all models
from app.services.permission_service import seed_permissions


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        seed_permissions(db)
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def other_session(db):
    """A second session on the same database, standing in for a concurrent request"""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_role(db, name, codes=(), is_superuser=False):
    role = Role(name=name, is_superuser=is_superuser)
    role.permissions = db.query(Permission).filter(Permission.code.in_(list(codes))).all() if codes else []
    db.add(role)
    db.commit()
    db.refresh(role)
    return role


def make_user(db, email, roles=(), password="secret123", first_name="Test", last_name="User", is_active=True):
    user = User(
        first_name=first_name,
        last_name=last_name,
        phone="9876543210",
        email=email,
        password_hash=hash_password(password),
        is_active=is_active,
    )
    user.roles = list(roles)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def superuser_role(db):
    return make_role(db, "Super Admin", is_superuser=True)


@pytest.fixture
def admin(db, superuser_role):
    return make_user(db, "admin@example.com", roles=[superuser_role], first_name="Ada", last_name="Admin")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def employee(db):
    """A user with no roles at all"""
    return make_user(db, "employee@example.com", first_name="Eve", last_name="Employee")


@pytest.fixture
def sick_leave(db):
    leave_type = LeaveType(name="Sick", is_paid=True)
    db.add(leave_type)
    db.commit()
    db.refresh(leave_type)
    return leave_type


@pytest.fixture
def sick_policy(db, employee, sick_leave):
    """Policy(total=10, remaining=10) for (employee, Sick)"""
    policy = LeavePolicy(
        user_id=employee.id,
        leave_type_id=sick_leave.id,
        policy_name="Sick 2025",
        total_days=10,
        remaining_days=10,
    )
    db.add(policy)
    db.commit()
    db.refresh(policy)
    return policy


@pytest.fixture
def role_factory(db):
    def _make(name, codes=(), is_superuser=False):
        return make_role(db, name, codes=codes, is_superuser=is_superuser)
    return _make


@pytest.fixture
def user_factory(db):
    def _make(email, roles=(), **kwargs):
        return make_user(db, email, roles=roles, **kwargs)
    return _make


@pytest.fixture
def headers_for():
    return auth_headers
