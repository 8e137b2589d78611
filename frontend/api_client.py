"""
frontend/api_client.py
Centralized API client for all backend requests.

This module ensures:
1. Protected calls carry the session token as a Bearer header
2. A 401 on a protected call clears local auth (session expired or revoked)
3. Connection problems become UI messages instead of tracebacks
"""

import time
from typing import Any, Dict, Literal, Optional

import requests
import streamlit as st

# Import config (robust fallback for different run contexts)
try:
    from frontend.config import API_TIMEOUT_SECONDS, IS_DEV, get_api_base_url
except ModuleNotFoundError:
    from config import API_TIMEOUT_SECONDS, IS_DEV, get_api_base_url

try:
    from frontend.auth import clear_auth, get_auth_header
except ModuleNotFoundError:
    from auth import clear_auth, get_auth_header


__all__ = [
    "api_request",
    "get_api_base_url",
    "error_message",
    "extract_session_token",
    "is_protected_endpoint",
    "is_session_rejected",
]

SESSION_COOKIE_NAME = "session"
NOT_AUTHENTICATED = "Not authenticated"

PROTECTED_PREFIXES = ("/api/auth/me", "/api/auth/logout", "/api/account/")


def is_protected_endpoint(path: str) -> bool:
    """Account and session endpoints need a token; project discovery is public."""
    return path.startswith(PROTECTED_PREFIXES)


def extract_session_token(resp: requests.Response) -> Optional[str]:
    """Session token set by login/register, read from the Set-Cookie header."""
    return resp.cookies.get(SESSION_COOKIE_NAME)


def is_session_rejected(resp: requests.Response) -> bool:
    """
    True when a 401 means the session itself is gone.

    A wrong current password on /api/account/password is also a 401 but the
    session is still valid, so it must not log the user out.
    """
    try:
        body = resp.json()
    except ValueError:
        return True
    return not isinstance(body, dict) or body.get("message") == NOT_AUTHENTICATED


def error_message(resp: Optional[requests.Response], default: str = "Request failed") -> str:
    """The backend's {"message": ...} body, falling back to the status code."""
    if resp is None:
        return default
    try:
        body = resp.json()
    except ValueError:
        return f"{default} ({resp.status_code})"
    if isinstance(body, dict) and body.get("message"):
        details = body.get("errors") or []
        extra = "; ".join(e.get("message", "") for e in details if isinstance(e, dict) and e.get("message"))
        return f"{body['message']}: {extra}" if extra else body["message"]
    return f"{default} ({resp.status_code})"


def api_request(
    method: Literal["GET", "POST", "PUT", "DELETE"],
    path: str,
    json: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[int] = None,
) -> Optional[requests.Response]:
    """
    Make an API request. This is the ONLY function that should call the backend.

    Returns:
        Response object, or None on connection/config errors (a UI message is shown)

    Security:
        Never logs tokens or auth headers.
    """
    try:
        base_url = get_api_base_url()
    except (RuntimeError, ValueError) as e:
        st.error(f"⚙️ Configuration error: {e}")
        return None

    url = f"{base_url}{path}"
    timeout = timeout or API_TIMEOUT_SECONDS
    headers = {"Accept": "application/json"}

    protected = is_protected_endpoint(path)
    if protected:
        auth_headers = get_auth_header()
        if not auth_headers:
            st.error("🔒 Authentication required. Please log in.")
            return None
        headers.update(auth_headers)

    try:
        resp = requests.request(method, url, json=json, params=params, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout:
        if IS_DEV:
            print(f"[API] Timeout on {method} {path}")
        st.error(f"⏱️ Request timed out after {timeout}s. Please try again.")
        _update_backend_status("timeout")
        return None
    except requests.exceptions.ConnectionError:
        if IS_DEV:
            print(f"[API] Connection error on {method} {path}")
        st.error(f"🔌 Cannot connect to backend at {base_url}. Please check your connection.")
        _update_backend_status("connection_error")
        return None
    except requests.exceptions.RequestException as e:
        if IS_DEV:
            print(f"[API] Request error on {method} {path}: {type(e).__name__}")
        st.error("❌ Unexpected error talking to the backend.")
        _update_backend_status("error")
        return None

    _update_backend_status("ok")

    if resp.status_code == 401 and protected and is_session_rejected(resp):
        if IS_DEV:
            print(f"[API] 401 on {path}, clearing local session")
        _handle_session_expired()
        return resp

    if IS_DEV:
        print(f"[API] {method} {path} -> {resp.status_code}")
    return resp


def _handle_session_expired() -> None:
    st.warning("🔒 Your session has expired. Please log in again.")
    clear_auth()
    st.session_state["nav_page"] = "Login"


def _update_backend_status(status: str) -> None:
    ss = st.session_state
    ss["_backend_status"] = status
    ss["_backend_last_ping_time"] = time.time()
