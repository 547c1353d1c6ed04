"""
Authentication service - login, token refresh and logout
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.errors import Unauthenticated
from app.core.security import (
    TOKEN_TYPE_REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from app.models.role import Permission
from app.models.token import RevokedToken
from app.models.user import User
from app.services.authorization_service import ALL_PERMISSIONS, resolve_grants

logger = logging.getLogger(__name__)


def _issue_pair(user_id: int) -> Dict[str, str]:
    return {
        "access_token": create_access_token(user_id),
        "refresh_token": create_refresh_token(user_id),
        "token_type": "bearer",
    }


def _is_revoked(db: Session, jti: Optional[str]) -> bool:
    return bool(jti) and db.query(RevokedToken.id).filter(RevokedToken.jti == jti).first() is not None


def _revoke(db: Session, payload: dict) -> None:
    jti = payload.get("jti")
    if not jti or _is_revoked(db, jti):
        return
    db.add(
        RevokedToken(
            jti=jti,
            token_type=payload.get("type", ""),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    )


def login(db: Session, email: str, password: str) -> Dict[str, str]:
    """
    Authenticate by email and password.

    Raises:
        Unauthenticated: unknown email, wrong password or inactive account
    """
    user = (
        db.query(User)
        .filter(User.email == email.lower(), User.deleted_at.is_(None))
        .first()
    )
    if not user or not verify_password(password, user.password_hash):
        logger.info("login failed: email=%s", email)
        raise Unauthenticated("Invalid email or password")
    if not user.is_active:
        raise Unauthenticated("User account is inactive")

    logger.info("login: user_id=%s", user.id)
    return _issue_pair(user.id)


def refresh(db: Session, refresh_token: str) -> Dict[str, str]:
    """
    Exchange a refresh token for a new pair. The presented refresh token
    is revoked, so each one can be used once.
    """
    try:
        payload = decode_token(refresh_token)
    except ValueError:
        raise Unauthenticated("Invalid refresh token")
    if payload.get("type") != TOKEN_TYPE_REFRESH:
        raise Unauthenticated("Invalid token type")
    if _is_revoked(db, payload.get("jti")):
        raise Unauthenticated("Token has been revoked")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthenticated("Invalid refresh token")

    user = db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()
    if not user or not user.is_active:
        raise Unauthenticated("User not found")

    _revoke(db, payload)
    db.commit()
    return _issue_pair(user.id)


def logout(db: Session, access_payload: dict, refresh_token: Optional[str] = None) -> None:
    """Revoke the access token in use and, if given, a refresh token."""
    _revoke(db, access_payload)
    if refresh_token:
        try:
            refresh_payload = decode_token(refresh_token)
        except ValueError:
            refresh_payload = None
        if refresh_payload and refresh_payload.get("sub") == access_payload.get("sub"):
            _revoke(db, refresh_payload)
    db.commit()
    logger.info("logout: user_id=%s", access_payload.get("sub"))


def effective_permissions(db: Session, user: User) -> Tuple[bool, List[str]]:
    """
    (is_superuser, permission codes) for a user. A superuser is reported
    with every known code.
    """
    grants = resolve_grants(user.roles)
    if grants is ALL_PERMISSIONS:
        return True, [code for (code,) in db.query(Permission.code).order_by(Permission.code)]
    return False, sorted(grants)
