"""
backend/schemas_auth.py

Pydantic schemas for registration, login, account and preference requests.
All validation happens here, before any storage access.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from backend.models import CamelModel, UserPublic, UserRole

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72
# bcrypt refuses passwords longer than 72 bytes once encoded
PASSWORD_MAX_BYTES = 72


def _strip(v):
    if isinstance(v, str):
        return v.strip()
    return v


def _check_password_bytes(v: str) -> str:
    if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return v


class RegisterRequest(CamelModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=30)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    confirm_password: str
    selected_role: UserRole

    @field_validator("first_name", "last_name", "phone_number", mode="before")
    @classmethod
    def trim_names(cls, v):
        return _strip(v)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateProfileRequest(CamelModel):
    """Partial profile update; omitted fields are left unchanged."""
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=30)
    selected_role: Optional[UserRole] = None
    email_notifications: Optional[bool] = None

    @field_validator("first_name", "last_name", "phone_number", mode="before")
    @classmethod
    def trim_names(cls, v):
        return _strip(v)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class UserResponse(CamelModel):
    user: UserPublic


class MessageResponse(CamelModel):
    message: str


class PreferencesRequest(CamelModel):
    session_id: str = Field(..., min_length=1, max_length=200)
    selected_role: Optional[UserRole] = None
    saved_searches: Optional[List[str]] = None
    favorite_projects: Optional[List[int]] = None
