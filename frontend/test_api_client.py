# frontend/test_api_client.py
# Unit tests for the API client's pure helpers (no network, no Streamlit context)

import json

import pytest
import requests

from frontend.api_client import error_message, extract_session_token, is_protected_endpoint, is_session_rejected


def make_response(status_code, body=None, set_cookie=None):
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = json.dumps(body).encode("utf-8") if body is not None else b"<html>oops</html>"
    if set_cookie:
        resp.cookies.set(*set_cookie)
    return resp


@pytest.mark.parametrize("path,protected", [
    ("/api/auth/me", True),
    ("/api/auth/logout", True),
    ("/api/account/profile", True),
    ("/api/account/password", True),
    ("/api/auth/login", False),
    ("/api/auth/register", False),
    ("/api/projects", False),
    ("/api/preferences", False),
])
def test_protected_paths(path, protected):
    assert is_protected_endpoint(path) is protected


def test_session_rejection_only_for_not_authenticated():
    assert is_session_rejected(make_response(401, {"message": "Not authenticated"}))
    assert not is_session_rejected(make_response(401, {"message": "Current password is incorrect"}))


def test_session_token_read_from_cookie():
    resp = make_response(200, {"user": {}}, set_cookie=("session", "a" * 64))
    assert extract_session_token(resp) == "a" * 64
    assert extract_session_token(make_response(200, {"user": {}})) is None


def test_error_message_uses_backend_body():
    resp = make_response(400, {"message": "Invalid request",
                               "errors": [{"field": "", "message": "Value error, Passwords don't match"}]})
    assert error_message(resp) == "Invalid request: Value error, Passwords don't match"
    assert error_message(make_response(404, {"message": "Project not found"})) == "Project not found"


def test_error_message_fallbacks():
    assert error_message(None, "Login failed") == "Login failed"
    assert error_message(make_response(502), "Login failed") == "Login failed (502)"
