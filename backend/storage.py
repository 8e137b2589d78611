"""
backend/storage.py

Storage layer.

One interface (Storage) with one backing per entity type:
- Projects and market indicators: in-memory reference data, seeded once at
  startup and read-only afterwards (safe to share across requests).
- Users, sessions and preferences: SQLite tables, one connection per operation.

Concurrent profile/password updates to the same user are last-writer-wins.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from backend.config import IS_DEV
from backend.db import get_db_connection, init_db, resolve_db_path, row_to_dict
from backend.errors import ConflictError
from backend.filters import ProjectFilters, filter_projects
from backend.models import (
    MarketIndicator,
    MarketIndicatorCreate,
    Project,
    ProjectCreate,
    Session,
    User,
    UserPreferences,
    utc_now,
)
from backend.security import generate_session_id, get_session_expiry


class Storage(ABC):
    # Projects
    @abstractmethod
    def get_projects(self, filters: Optional[ProjectFilters] = None) -> List[Project]: ...

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]: ...

    @abstractmethod
    def create_project(self, data: ProjectCreate) -> Project: ...

    # Market indicators
    @abstractmethod
    def get_market_indicators(self) -> List[MarketIndicator]: ...

    @abstractmethod
    def create_market_indicator(self, data: MarketIndicatorCreate) -> MarketIndicator: ...

    # Users
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(
        self,
        email: str,
        first_name: str,
        last_name: str,
        password_hash: str,
        selected_role: str,
        phone_number: Optional[str] = None,
        email_notifications: bool = True,
    ) -> User: ...

    @abstractmethod
    def update_user(self, user_id: str, **fields: Any) -> Optional[User]: ...

    @abstractmethod
    def update_user_password(self, user_id: str, password_hash: str) -> bool: ...

    # Sessions
    @abstractmethod
    def create_session(self, user_id: str) -> Session: ...

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[Session]: ...

    @abstractmethod
    def delete_session(self, session_id: str) -> None: ...

    def get_valid_session(self, session_id: str) -> Optional[Session]:
        """Return the session if unexpired; an expired session is deleted on sight."""
        session = self.get_session(session_id)
        if session is None:
            return None
        if session.is_expired():
            self.delete_session(session_id)
            if IS_DEV:
                print(f"[AUTH] Removed expired session for user_id={session.user_id}")
            return None
        return session

    # Preferences
    @abstractmethod
    def get_user_preferences(self, session_id: str) -> Optional[UserPreferences]: ...

    @abstractmethod
    def create_user_preferences(self, session_id: str, **fields: Any) -> UserPreferences: ...

    @abstractmethod
    def update_user_preferences(self, session_id: str, **fields: Any) -> Optional[UserPreferences]: ...

    def upsert_user_preferences(self, session_id: str, **fields: Any) -> UserPreferences:
        """Create preferences for session_id if absent, otherwise patch the given fields."""
        if self.get_user_preferences(session_id) is None:
            return self.create_user_preferences(session_id, **fields)
        return self.update_user_preferences(session_id, **fields)


class ProjectStore:
    """Insertion-ordered in-memory store for projects and market indicators."""

    def __init__(
        self,
        projects: Iterable[ProjectCreate] = (),
        indicators: Iterable[MarketIndicatorCreate] = (),
    ):
        self._projects: Dict[int, Project] = {}
        self._indicators: Dict[int, MarketIndicator] = {}
        self._next_project_id = 1
        self._next_indicator_id = 1
        for project in projects:
            self.create_project(project)
        for indicator in indicators:
            self.create_market_indicator(indicator)

    def get_projects(self, filters: Optional[ProjectFilters] = None) -> List[Project]:
        return filter_projects(self._projects.values(), filters)

    def get_project(self, project_id: int) -> Optional[Project]:
        return self._projects.get(project_id)

    def create_project(self, data: ProjectCreate) -> Project:
        project_id = self._next_project_id
        self._next_project_id += 1
        project = Project(id=project_id, created_at=utc_now(), **data.model_dump())
        self._projects[project_id] = project
        return project

    def get_market_indicators(self) -> List[MarketIndicator]:
        return [i for i in self._indicators.values() if i.is_active]

    def create_market_indicator(self, data: MarketIndicatorCreate) -> MarketIndicator:
        indicator_id = self._next_indicator_id
        self._next_indicator_id += 1
        indicator = MarketIndicator(id=indicator_id, created_at=utc_now(), **data.model_dump())
        self._indicators[indicator_id] = indicator
        return indicator


# Column name -> User field for partial updates
USER_UPDATE_COLUMNS = {
    "email": "email",
    "first_name": "first_name",
    "last_name": "last_name",
    "phone_number": "phone_number",
    "selected_role": "selected_role",
    "email_notifications": "email_notifications",
}

PREFERENCE_COLUMNS = ("selected_role", "saved_searches", "favorite_projects")


def _iso(value: datetime) -> str:
    return value.isoformat()


def _row_to_user(row: sqlite3.Row) -> User:
    data = row_to_dict(row)
    return User(
        id=data["id"],
        email=data["email"],
        first_name=data["first_name"],
        last_name=data["last_name"],
        phone_number=data.get("phone_number"),
        password_hash=data["password_hash"],
        selected_role=data["selected_role"],
        email_notifications=bool(data.get("email_notifications", 1)),
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


def _row_to_session(row: sqlite3.Row) -> Session:
    return Session(
        id=row["id"],
        user_id=row["user_id"],
        expires_at=datetime.fromisoformat(row["expires_at"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _row_to_preferences(row: sqlite3.Row) -> UserPreferences:
    return UserPreferences(
        id=row["id"],
        session_id=row["session_id"],
        selected_role=row["selected_role"],
        saved_searches=json.loads(row["saved_searches_json"] or "[]"),
        favorite_projects=json.loads(row["favorite_projects_json"] or "[]"),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _role_value(role: Any) -> Optional[str]:
    if role is None:
        return None
    return role.value if hasattr(role, "value") else str(role)


class SqliteStorage(Storage):
    """Projects from an in-memory ProjectStore; identity data in SQLite."""

    def __init__(self, db_path: Optional[str] = None, project_store: Optional[ProjectStore] = None):
        self.db_path = resolve_db_path(db_path)
        self.projects = project_store if project_store is not None else ProjectStore()
        init_db(self.db_path)

    # ---- Projects (in-memory) -------------------------------------------

    def get_projects(self, filters: Optional[ProjectFilters] = None) -> List[Project]:
        return self.projects.get_projects(filters)

    def get_project(self, project_id: int) -> Optional[Project]:
        return self.projects.get_project(project_id)

    def create_project(self, data: ProjectCreate) -> Project:
        return self.projects.create_project(data)

    def get_market_indicators(self) -> List[MarketIndicator]:
        return self.projects.get_market_indicators()

    def create_market_indicator(self, data: MarketIndicatorCreate) -> MarketIndicator:
        return self.projects.create_market_indicator(data)

    # ---- Users ------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[User]:
        with get_db_connection(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return _row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        email_norm = email.strip().lower()
        with get_db_connection(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email_norm,)).fetchone()
        return _row_to_user(row) if row else None

    def create_user(
        self,
        email: str,
        first_name: str,
        last_name: str,
        password_hash: str,
        selected_role: str,
        phone_number: Optional[str] = None,
        email_notifications: bool = True,
    ) -> User:
        user_id = str(uuid.uuid4())
        now = _iso(utc_now())
        email_norm = email.strip().lower()
        try:
            with get_db_connection(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO users (
                        id, email, first_name, last_name, phone_number, password_hash,
                        selected_role, email_notifications, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user_id,
                        email_norm,
                        first_name,
                        last_name,
                        phone_number,
                        password_hash,
                        _role_value(selected_role),
                        1 if email_notifications else 0,
                        now,
                        now,
                    ),
                )
        except sqlite3.IntegrityError:
            # Lost the race against a concurrent registration with the same email
            raise ConflictError("User with this email already exists")

        if IS_DEV:
            print(f"[DB] Created user_id={user_id}")
        return self.get_user(user_id)

    def update_user(self, user_id: str, **fields: Any) -> Optional[User]:
        updates = {USER_UPDATE_COLUMNS[k]: v for k, v in fields.items() if k in USER_UPDATE_COLUMNS}
        if "email" in updates:
            updates["email"] = updates["email"].strip().lower()
        if "selected_role" in updates:
            updates["selected_role"] = _role_value(updates["selected_role"])
        if "email_notifications" in updates:
            updates["email_notifications"] = 1 if updates["email_notifications"] else 0
        updates["updated_at"] = _iso(utc_now())

        assignments = ", ".join(f"{column} = ?" for column in updates)
        try:
            with get_db_connection(self.db_path) as conn:
                cur = conn.execute(
                    f"UPDATE users SET {assignments} WHERE id = ?",
                    (*updates.values(), user_id),
                )
                if cur.rowcount == 0:
                    return None
        except sqlite3.IntegrityError:
            raise ConflictError("User with this email already exists")
        return self.get_user(user_id)

    def update_user_password(self, user_id: str, password_hash: str) -> bool:
        with get_db_connection(self.db_path) as conn:
            cur = conn.execute(
                "UPDATE users SET password_hash = ?, updated_at = ? WHERE id = ?",
                (password_hash, _iso(utc_now()), user_id),
            )
            return cur.rowcount > 0

    # ---- Sessions ---------------------------------------------------------

    def create_session(self, user_id: str) -> Session:
        now = utc_now()
        session = Session(
            id=generate_session_id(),
            user_id=user_id,
            expires_at=get_session_expiry(now),
            created_at=now,
        )
        self.insert_session(session)
        return session

    def insert_session(self, session: Session) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute(
                "INSERT INTO sessions (id, user_id, expires_at, created_at) VALUES (?, ?, ?, ?)",
                (session.id, session.user_id, _iso(session.expires_at), _iso(session.created_at)),
            )

    def get_session(self, session_id: str) -> Optional[Session]:
        with get_db_connection(self.db_path) as conn:
            row = conn.execute("SELECT * FROM sessions WHERE id = ?", (session_id,)).fetchone()
        return _row_to_session(row) if row else None

    def delete_session(self, session_id: str) -> None:
        with get_db_connection(self.db_path) as conn:
            conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))

    # ---- Preferences ------------------------------------------------------

    def get_user_preferences(self, session_id: str) -> Optional[UserPreferences]:
        with get_db_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT * FROM user_preferences WHERE session_id = ?", (session_id,)
            ).fetchone()
        return _row_to_preferences(row) if row else None

    def create_user_preferences(self, session_id: str, **fields: Any) -> UserPreferences:
        try:
            with get_db_connection(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO user_preferences (
                        session_id, selected_role, saved_searches_json, favorite_projects_json, created_at
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        session_id,
                        _role_value(fields.get("selected_role")),
                        json.dumps(list(fields.get("saved_searches") or [])),
                        json.dumps(list(fields.get("favorite_projects") or [])),
                        _iso(utc_now()),
                    ),
                )
        except sqlite3.IntegrityError:
            # A concurrent first save created the row; apply ours on top of it
            return self.update_user_preferences(session_id, **fields)
        return self.get_user_preferences(session_id)

    def update_user_preferences(self, session_id: str, **fields: Any) -> Optional[UserPreferences]:
        updates: Dict[str, Any] = {}
        if "selected_role" in fields:
            updates["selected_role"] = _role_value(fields["selected_role"])
        if "saved_searches" in fields:
            updates["saved_searches_json"] = json.dumps(list(fields["saved_searches"] or []))
        if "favorite_projects" in fields:
            updates["favorite_projects_json"] = json.dumps(list(fields["favorite_projects"] or []))

        if updates:
            assignments = ", ".join(f"{column} = ?" for column in updates)
            with get_db_connection(self.db_path) as conn:
                conn.execute(
                    f"UPDATE user_preferences SET {assignments} WHERE session_id = ?",
                    (*updates.values(), session_id),
                )
        return self.get_user_preferences(session_id)
