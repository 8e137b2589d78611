# ---------------------------------------------------------
# backend/main.py
# Sector Intelligence - Project Discovery Backend
#
# Run: uvicorn backend.main:app --reload (from repo root)
#
# - FastAPI + SQLite (users, sessions, preferences)
# - In-memory seeded projects and market indicators
# - /api/projects            : filtered project listing
# - /api/filter-options      : dropdown values + location hierarchy
# - /api/auth/*              : register / login / logout / me (session cookie)
# - /api/account/*           : profile and password updates
# - /api/preferences         : per-browser preferences
# ---------------------------------------------------------

from __future__ import annotations

from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import CORS_ORIGINS, DATABASE_PATH, IS_PROD
from backend.errors import register_error_handlers
from backend.routes_auth import router as auth_router
from backend.routes_preferences import router as preferences_router
from backend.routes_projects import router as projects_router
from backend.seed import SEED_MARKET_INDICATORS, SEED_PROJECTS
from backend.storage import ProjectStore, SqliteStorage, Storage


def build_storage(db_path: Optional[str] = None) -> SqliteStorage:
    """Seeded project store + SQLite identity tables."""
    project_store = ProjectStore(SEED_PROJECTS, SEED_MARKET_INDICATORS)
    storage = SqliteStorage(db_path or DATABASE_PATH, project_store=project_store)
    print(f"[STARTUP] Seeded {len(project_store.get_projects())} projects")
    return storage


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    app = FastAPI(title="Sector Intelligence Backend", version="0.1")
    app.state.storage = storage if storage is not None else build_storage()

    # Cookies need credentials; restrict origins in production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS if IS_PROD else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(projects_router)
    app.include_router(auth_router)
    app.include_router(preferences_router)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
