"""
Dependencies and guards for FastAPI endpoints
"""
import logging
from typing import Generator, Optional

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session, selectinload

from app.core.config import settings
from app.core.errors import Forbidden, Unauthenticated
from app.core.security import TOKEN_TYPE_ACCESS, decode_token
from app.db.session import SessionLocal
from app.models.role import Role
from app.models.token import RevokedToken
from app.models.user import User
from app.services.authorization_service import CapabilityMode, Requirement, authorize

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Decode the bearer token; any failure is an authentication failure"""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    try:
        payload = decode_token(credentials.credentials)
    except ValueError:
        raise Unauthenticated("Invalid authentication credentials")
    if payload.get("type") != TOKEN_TYPE_ACCESS:
        raise Unauthenticated("Invalid token type")
    return payload


async def get_current_user(
    payload: dict = Depends(get_token_payload),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the authenticated principal from the access token, with its
    roles and their permissions preloaded for the authorization evaluator
    """
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthenticated("Invalid authentication credentials")

    jti = payload.get("jti")
    if jti and db.query(RevokedToken.id).filter(RevokedToken.jti == jti).first():
        raise Unauthenticated("Token has been revoked")

    user = (
        db.query(User)
        .options(selectinload(User.roles).selectinload(Role.permissions))
        .filter(User.id == user_id, User.deleted_at.is_(None))
        .first()
    )
    if user is None:
        raise Unauthenticated("User not found")
    if not user.is_active:
        raise Unauthenticated("Inactive user")

    return user


def require_permissions(*codes: str, mode: CapabilityMode = CapabilityMode.ALL):
    """
    Dependency factory for capability-based access control

    The Requirement is built once, when the route is declared.

    Usage:
        @router.get("")
        async def list_roles(user: User = Depends(require_permissions("roles.view"))):
            ...
    """
    requirement = Requirement.of(*codes, mode=mode)
    return require(requirement)


def require(requirement: Requirement):
    """Dependency factory taking an already-built Requirement"""
    def permission_checker(current_user: User = Depends(get_current_user)) -> User:
        if not authorize(current_user.roles, requirement):
            logger.warning(
                "permission denied: user_id=%s required=%s mode=%s",
                current_user.id, list(requirement.codes), requirement.mode.value,
            )
            raise Forbidden()
        return current_user
    return permission_checker


class PageParams:
    """Pagination query parameters (?page=&limit=)"""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number (1-based)"),
        limit: Optional[int] = Query(None, ge=1, description="Rows per page"),
    ):
        self.page = page
        self.limit = min(limit or settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
