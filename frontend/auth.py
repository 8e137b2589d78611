"""
frontend/auth.py
Authentication state for the Streamlit client.

Streamlit reruns the whole script on every interaction, so auth state lives in
st.session_state and init_auth_state() must run at the top of every rerun.

The backend issues an opaque session token. A browser would hold it in the
HTTP-only "session" cookie; the Streamlit server process talks to the API on
the user's behalf, so it keeps the token here and sends it as
Authorization: Bearer <token>.
"""

from typing import Any, Dict, Optional

import streamlit as st


def init_auth_state() -> None:
    """Ensure auth keys exist. Idempotent; safe to call on every rerun."""
    ss = st.session_state

    ss.setdefault("auth_token", None)
    ss.setdefault("current_user", None)
    ss.setdefault("is_authenticated", False)

    # Keep the flag in sync with token presence
    ss["is_authenticated"] = bool(ss["auth_token"])


def set_auth(auth_token: str, current_user: Dict[str, Any]) -> None:
    """
    Store auth state after login or registration.

    Args:
        auth_token: Session token from the backend "session" cookie
        current_user: Public user object (no password hash)
    """
    ss = st.session_state
    ss["auth_token"] = auth_token
    ss["current_user"] = current_user
    ss["is_authenticated"] = True

    # Signed-in users get their own persona unless they already picked one
    role = current_user.get("selectedRole") if isinstance(current_user, dict) else None
    if role and not ss.get("selected_role"):
        ss["selected_role"] = role


def update_current_user(current_user: Dict[str, Any]) -> None:
    st.session_state["current_user"] = current_user


def clear_auth() -> None:
    """Clear auth state (logout or session expiry). Safe to call repeatedly."""
    ss = st.session_state
    ss["auth_token"] = None
    ss["current_user"] = None
    ss["is_authenticated"] = False


def is_authenticated() -> bool:
    return bool(st.session_state.get("auth_token"))


def get_current_user() -> Optional[Dict[str, Any]]:
    return st.session_state.get("current_user")


def get_auth_header() -> Dict[str, str]:
    """{"Authorization": "Bearer <token>"} if authenticated, {} otherwise."""
    token = st.session_state.get("auth_token")
    if token:
        return {"Authorization": f"Bearer {token}"}
    return {}


def require_auth(redirect_to_login: bool = True) -> bool:
    """
    Guard for protected pages.

    Usage at top of page render functions:
        if not require_auth():
            return
    """
    if is_authenticated():
        return True

    st.warning("⚠️ You must be logged in to access this page.")
    if redirect_to_login and st.button("Go to Login", type="primary"):
        st.session_state["nav_page"] = "Login"
        st.rerun()
    return False
