"""
backend/routes_preferences.py

Per-browser preferences keyed by an opaque client-supplied sessionId.
This id is unrelated to the auth session token and no user is attached.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.auth_context import get_storage
from backend.config import IS_DEV
from backend.errors import NotFoundError
from backend.models import UserPreferences
from backend.schemas_auth import PreferencesRequest
from backend.storage import Storage

router = APIRouter(
    prefix="/api/preferences",
    tags=["preferences"],
)


@router.post("", response_model=UserPreferences)
def save_preferences(req: PreferencesRequest, storage: Storage = Depends(get_storage)) -> UserPreferences:
    """Create preferences for sessionId, or patch only the fields supplied."""
    patch = req.model_dump(exclude_unset=True, exclude={"session_id"})
    preferences = storage.upsert_user_preferences(req.session_id, **patch)
    if IS_DEV:
        print(f"[PREFERENCES] Saved: fields={sorted(patch)}")
    return preferences


@router.get("/{session_id}", response_model=UserPreferences)
def get_preferences(session_id: str, storage: Storage = Depends(get_storage)) -> UserPreferences:
    preferences = storage.get_user_preferences(session_id)
    if preferences is None:
        raise NotFoundError("Preferences not found")
    return preferences
