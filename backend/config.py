# backend/config.py
# Environment-aware configuration for the Sector Intelligence backend

import os
from typing import Literal

# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")

# Session configuration
SESSION_COOKIE_NAME = "session"
SESSION_DAYS = int(os.environ.get("SESSION_DAYS", "30"))

# bcrypt cost factor for password hashes
BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

# Database configuration
# Users, sessions and preferences live in SQLite; projects are in-memory seed data.
# Relative paths resolve next to this package.
DATABASE_PATH = os.environ.get("DATABASE_PATH", "sector_intel.db")

# CORS origins (expand for staging/prod)
CORS_ORIGINS = [
    "http://localhost:8501",  # Streamlit default
    "http://127.0.0.1:8501",
]

if IS_STAGING or IS_PROD:
    extra_origins = os.environ.get("CORS_ORIGINS", "")
    if extra_origins:
        CORS_ORIGINS.extend(o.strip() for o in extra_origins.split(",") if o.strip())

print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Database: SQLite ({DATABASE_PATH})")
print(f"[CONFIG] Session lifetime: {SESSION_DAYS} days")
