# frontend/config.py
# Environment-aware configuration for the Sector Intelligence frontend

import os
from typing import Literal

# Environment detection - normalize to lowercase
_raw_env = os.environ.get("ENV", "local").lower()
ENV: Literal["local", "staging", "production"] = _raw_env if _raw_env in ("local", "staging", "production") else "production"  # type: ignore

IS_LOCAL = (ENV == "local")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "production")

IS_DEV = IS_LOCAL


def get_env() -> Literal["local", "staging", "production"]:
    return ENV


def validate_api_url(url: str, env: str) -> None:
    """
    Validate API base URL according to environment security rules.

    Raises:
        ValueError: If URL violates security constraints for the environment
    """
    if not url:
        raise ValueError("API base URL cannot be empty")

    # Session tokens travel in headers: staging/production must use HTTPS and never localhost
    if env in ("staging", "production"):
        if not url.startswith("https://"):
            raise ValueError(f"Production/staging must use HTTPS. Got: {url}")
        if "127.0.0.1" in url or "localhost" in url:
            raise ValueError(f"Production/staging cannot use localhost URLs. Got: {url}")


def get_api_base_url() -> str:
    """
    Get API base URL with strict priority and validation.

    Priority:
    1. BACKEND_URL environment variable
    2. API_BASE_URL environment variable
    3. Local dev default (http://127.0.0.1:8000) ONLY if ENV == "local"

    Raises:
        RuntimeError: If staging/production has no configured URL
    """
    for var in ("BACKEND_URL", "API_BASE_URL"):
        value = os.environ.get(var, "").strip()
        if value:
            url = value.rstrip("/")
            validate_api_url(url, ENV)
            return url

    if ENV == "local":
        return "http://127.0.0.1:8000"

    raise RuntimeError(
        f"Backend URL not configured for {ENV.upper()} environment. "
        f"Set BACKEND_URL to the backend service URL (HTTPS, no localhost)."
    )


try:
    BACKEND_URL = get_api_base_url()
except RuntimeError as e:
    print(f"[CONFIG] CRITICAL: {e}")
    BACKEND_URL = ""  # API calls will fail loudly

# Session lifetime (display only; backend enforces)
SESSION_DAYS = int(os.environ.get("SESSION_DAYS", "30"))

# Request timeout in seconds for backend calls
API_TIMEOUT_SECONDS = int(os.environ.get("API_TIMEOUT_SECONDS", "20"))

ENABLE_DEBUG_UI = IS_DEV

print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Backend URL: {BACKEND_URL}")
print(f"[CONFIG] Debug UI: {'enabled' if ENABLE_DEBUG_UI else 'disabled'}")
