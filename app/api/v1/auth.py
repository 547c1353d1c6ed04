"""
Authentication endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, get_token_payload
from app.models.user import User
from app.schemas.auth import LoginRequest, LogoutRequest, MeOut, RefreshRequest, TokenPair
from app.schemas.common import ApiResponse, ok
from app.services import auth_service

router = APIRouter()


@router.post("/login", response_model=ApiResponse[TokenPair])
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
):
    """
    Login with email and password

    Returns an access token and a refresh token.
    """
    tokens = auth_service.login(db, login_data.email, login_data.password)
    return ok("Login successful", tokens)


@router.post("/refresh", response_model=ApiResponse[TokenPair])
async def refresh(
    body: RefreshRequest,
    db: Session = Depends(get_db),
):
    """Exchange a refresh token for a new token pair"""
    tokens = auth_service.refresh(db, body.refresh_token)
    return ok("Token refreshed", tokens)


@router.get("/me", response_model=ApiResponse[MeOut])
async def me(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Current user with roles and effective permissions"""
    is_superuser, permissions = auth_service.effective_permissions(db, current_user)
    profile = MeOut.model_validate(current_user).model_copy(
        update={"is_superuser": is_superuser, "permissions": permissions}
    )
    return ok("Profile", profile)


@router.post("/logout", response_model=ApiResponse[None])
async def logout(
    body: Optional[LogoutRequest] = None,
    payload: dict = Depends(get_token_payload),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Revoke the current access token (and the refresh token, if sent)"""
    auth_service.logout(db, payload, body.refresh_token if body else None)
    return ok("Logged out")
