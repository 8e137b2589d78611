"""
backend/auth_context.py

Shared authentication context primitives for FastAPI dependency injection.

Contains:
- get_storage: the app-wide Storage instance
- AuthContext: authenticated user + session for the current request
- require_auth_context: FastAPI dependency for protected routes

This module MUST NOT import backend.main to avoid circular dependencies.
"""

from __future__ import annotations

from fastapi import Depends, Request
from pydantic import BaseModel

from backend.accounts import authenticate
from backend.config import IS_DEV
from backend.models import Session, UserPublic
from backend.security import get_session_from_request
from backend.storage import Storage


def get_storage(request: Request) -> Storage:
    """Storage is created once in backend.main and attached to app.state."""
    return request.app.state.storage


class AuthContext(BaseModel):
    """
    Identity of the caller, derived server-side from the session token.
    Never trust a user id from request bodies or query params.
    """
    user: UserPublic
    session: Session

    @property
    def user_id(self) -> str:
        return self.user.id


def require_auth_context(request: Request, storage: Storage = Depends(get_storage)) -> AuthContext:
    """
    Dependency for protected routes.

    Token lookup order: Authorization: Bearer header, then the session cookie.

    Raises:
        AuthError(401): token missing, unknown or expired, or user gone
    """
    token = get_session_from_request(request)
    user, session = authenticate(storage, token)

    if IS_DEV:
        print(f"[AUTH] Authenticated: user_id={user.id}, role={user.selected_role.value}")

    return AuthContext(user=user.to_public(), session=session)
