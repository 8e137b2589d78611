"""
backend/routes_auth.py

Authentication and account endpoints.

The session token travels in an HTTP-only cookie named "session"; clients
that cannot hold cookies may send it as Authorization: Bearer <token>.
Responses never include the password hash.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from backend import accounts
from backend.auth_context import AuthContext, get_storage, require_auth_context
from backend.config import IS_PROD, SESSION_COOKIE_NAME, SESSION_DAYS
from backend.models import Session, UserPublic
from backend.schemas_auth import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UpdateProfileRequest,
    UserResponse,
)
from backend.security import get_session_from_request
from backend.storage import Storage

router = APIRouter(tags=["auth"])


def set_session_cookie(response: Response, session: Session) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.id,
        max_age=SESSION_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=IS_PROD,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME, httponly=True, secure=IS_PROD, samesite="lax")


@router.post("/api/auth/register", response_model=UserResponse, status_code=201)
def register(
    req: RegisterRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    user, session = accounts.register_user(storage, req)
    set_session_cookie(response, session)
    return UserResponse(user=user)


@router.post("/api/auth/login", response_model=UserResponse)
def login(
    req: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    user, session = accounts.login_user(storage, req.email, req.password)
    set_session_cookie(response, session)
    return UserResponse(user=user)


@router.post("/api/auth/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    ctx: AuthContext = Depends(require_auth_context),
    storage: Storage = Depends(get_storage),
) -> MessageResponse:
    accounts.logout(storage, get_session_from_request(request))
    clear_session_cookie(response)
    print(f"[LOGOUT] Session revoked: user_id={ctx.user_id}")
    return MessageResponse(message="Logged out successfully")


@router.get("/api/auth/me", response_model=UserPublic)
def me(ctx: AuthContext = Depends(require_auth_context)) -> UserPublic:
    return ctx.user


@router.put("/api/account/profile", response_model=UserResponse)
def update_profile(
    req: UpdateProfileRequest,
    ctx: AuthContext = Depends(require_auth_context),
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    user = accounts.update_profile(storage, ctx.user_id, req)
    return UserResponse(user=user)


@router.put("/api/account/password", response_model=MessageResponse)
def change_password(
    req: ChangePasswordRequest,
    ctx: AuthContext = Depends(require_auth_context),
    storage: Storage = Depends(get_storage),
) -> MessageResponse:
    accounts.change_password(storage, ctx.user_id, req.current_password, req.new_password)
    return MessageResponse(message="Password updated successfully")
