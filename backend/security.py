"""
backend/security.py

Password hashing and session token helpers.
Tokens and hashes are never logged.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from starlette.requests import Request

from backend import config
from backend.models import utc_now


def hash_password(password: str) -> str:
    """Hash a password with bcrypt at the configured cost factor."""
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash; malformed hashes never verify."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def generate_session_id() -> str:
    """256-bit random session token, hex encoded (64 chars)."""
    return secrets.token_hex(32)


def get_session_expiry(now: Optional[datetime] = None) -> datetime:
    return (now or utc_now()) + timedelta(days=config.SESSION_DAYS)


def get_session_from_request(request: Request) -> Optional[str]:
    """
    Extract the session token from a request.

    Order: Authorization: Bearer <token> header, then the session cookie.
    """
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[len("Bearer "):].strip()
        if token:
            return token
    return request.cookies.get(config.SESSION_COOKIE_NAME) or None
