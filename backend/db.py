# backend/db.py
# SQLite connection helpers and idempotent schema setup for identity tables

import sqlite3
from contextlib import contextmanager
from pathlib import Path as FsPath
from typing import Generator, Optional

from backend.config import DATABASE_PATH, IS_DEV


def resolve_db_path(db_path: Optional[str] = None) -> str:
    """Resolve a database path; relative paths are anchored beside this package."""
    path = db_path or DATABASE_PATH
    if path == ":memory:":
        raise ValueError("In-memory SQLite is not supported: connections are opened per operation")
    fs_path = FsPath(path)
    if not fs_path.is_absolute():
        fs_path = FsPath(__file__).resolve().parent / fs_path
    return str(fs_path)


def get_db(db_path: str) -> sqlite3.Connection:
    """
    Create and return a SQLite connection with Row factory.
    Callers own the connection and must close it.
    """
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db_connection(db_path: str) -> Generator[sqlite3.Connection, None, None]:
    """Context manager that commits on success, rolls back on error and always closes."""
    conn = get_db(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def row_to_dict(row) -> dict:
    """
    Safely convert a sqlite3.Row to dict.
    Returns {} for None so callers can use .get().
    """
    if row is None:
        return {}
    return dict(row)


def get_table_columns(conn: sqlite3.Connection, table_name: str) -> set[str]:
    cur = conn.execute(f"PRAGMA table_info({table_name})")
    return {row["name"] for row in cur.fetchall()}


def ensure_column(conn: sqlite3.Connection, table_name: str, column_name: str, ddl_fragment: str) -> bool:
    """
    Add a column to an existing table if it is missing.

    Returns True when the column was added.
    """
    if column_name in get_table_columns(conn, table_name):
        return False
    conn.execute(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl_fragment}")
    print(f"[MIGRATION] Added column {table_name}.{column_name}")
    return True


def init_db(db_path: str) -> None:
    """Create identity tables and indexes (idempotent)."""
    with get_db_connection(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL UNIQUE,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                password_hash TEXT NOT NULL,
                selected_role TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        # Columns added after the first schema version
        ensure_column(conn, "users", "phone_number", "TEXT NULL")
        ensure_column(conn, "users", "email_notifications", "INTEGER NOT NULL DEFAULT 1")

        # Sessions reference users by id only; no cascade on user removal
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS sessions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                expires_at TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_sessions_user_id ON sessions(user_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_sessions_expires_at ON sessions(expires_at)")

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS user_preferences (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id TEXT NOT NULL UNIQUE,
                selected_role TEXT NULL,
                saved_searches_json TEXT NOT NULL DEFAULT '[]',
                favorite_projects_json TEXT NOT NULL DEFAULT '[]',
                created_at TEXT NOT NULL
            )
            """
        )

    if IS_DEV:
        print(f"[DB] Identity schema ready at {db_path}")
