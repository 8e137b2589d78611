"""
backend/accounts.py

Account and session lifecycle:

    Anonymous -> Registering -> Authenticated -> (Expired | LoggedOut) -> Anonymous

Request schemas are already validated when these functions run. Each
operation either fully applies or leaves storage untouched.
"""

from __future__ import annotations

from typing import Optional, Tuple

from backend.config import IS_DEV
from backend.errors import AuthError, ConflictError, NotFoundError
from backend.models import Session, User, UserPublic
from backend.schemas_auth import RegisterRequest, UpdateProfileRequest
from backend.security import hash_password, verify_password
from backend.storage import Storage

INVALID_CREDENTIALS = "Invalid email or password"


def register_user(storage: Storage, req: RegisterRequest) -> Tuple[UserPublic, Session]:
    # Read-then-write pre-check; the UNIQUE constraint catches the race
    if storage.get_user_by_email(req.email) is not None:
        raise ConflictError("User with this email already exists")

    user = storage.create_user(
        email=req.email,
        first_name=req.first_name,
        last_name=req.last_name,
        phone_number=req.phone_number,
        password_hash=hash_password(req.password),
        selected_role=req.selected_role,
    )
    session = storage.create_session(user.id)
    print(f"[REGISTER] User registered: user_id={user.id}, role={user.selected_role.value}")
    return user.to_public(), session


def login_user(storage: Storage, email: str, password: str) -> Tuple[UserPublic, Session]:
    """
    Verify credentials and issue a new session.

    Unknown email and wrong password raise the same AuthError so callers
    cannot tell which emails are registered. Existing sessions stay valid.
    """
    user = storage.get_user_by_email(email)
    if user is None:
        if IS_DEV:
            print("[LOGIN] User not found by email")
        raise AuthError(INVALID_CREDENTIALS)

    if not verify_password(password, user.password_hash):
        if IS_DEV:
            print(f"[LOGIN] Password mismatch for user_id={user.id}")
        raise AuthError(INVALID_CREDENTIALS)

    session = storage.create_session(user.id)
    print(f"[LOGIN] Session created: user_id={user.id}")
    return user.to_public(), session


def logout(storage: Storage, token: Optional[str]) -> None:
    """Delete the session behind token; no-op if it is already gone."""
    if token:
        storage.delete_session(token)


def authenticate(storage: Storage, token: Optional[str]) -> Tuple[User, Session]:
    """Resolve a session token to its user; fails closed on anything unexpected."""
    if not token:
        raise AuthError("Not authenticated")

    session = storage.get_valid_session(token)
    if session is None:
        raise AuthError("Not authenticated")

    user = storage.get_user(session.user_id)
    if user is None:
        # Sessions are not cascade-deleted with users
        if IS_DEV:
            print(f"[AUTH] Session points at missing user_id={session.user_id}")
        raise AuthError("Not authenticated")

    return user, session


def update_profile(storage: Storage, user_id: str, req: UpdateProfileRequest) -> UserPublic:
    fields = req.model_dump(exclude_unset=True)
    # Required columns cannot be cleared with an explicit null
    for key in ("email", "first_name", "last_name", "selected_role", "email_notifications"):
        if key in fields and fields[key] is None:
            del fields[key]

    if "email" in fields:
        existing = storage.get_user_by_email(fields["email"])
        if existing is not None and existing.id != user_id:
            raise ConflictError("User with this email already exists")

    user = storage.update_user(user_id, **fields)
    if user is None:
        raise NotFoundError("User not found")

    if IS_DEV:
        print(f"[ACCOUNT] Profile updated: user_id={user_id}, fields={sorted(fields)}")
    return user.to_public()


def change_password(storage: Storage, user_id: str, current_password: str, new_password: str) -> None:
    user = storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    if not verify_password(current_password, user.password_hash):
        raise AuthError("Current password is incorrect")

    storage.update_user_password(user_id, hash_password(new_password))
    print(f"[ACCOUNT] Password changed: user_id={user_id}")
