"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
import threading
from typing import Iterable, Set

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS interview_sessions (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  role TEXT NOT NULL,
  mode TEXT NOT NULL,
  status TEXT NOT NULL,
  started_at TEXT NOT NULL,
  completed_at TEXT,
  payload_json TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_sessions_user_status ON interview_sessions (user_id, status);
""",
    """
CREATE TABLE IF NOT EXISTS interview_exchanges (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  session_id TEXT NOT NULL,
  type TEXT NOT NULL,
  text TEXT NOT NULL,
  timestamp TEXT NOT NULL,
  question_number INTEGER NOT NULL,
  score INTEGER,
  feedback TEXT
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_exchanges_session ON interview_exchanges (session_id, timestamp);
""",
    """
CREATE TABLE IF NOT EXISTS interview_evaluations (
  session_id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  overall_score INTEGER NOT NULL,
  decision TEXT NOT NULL,
  created_at TEXT NOT NULL,
  payload_json TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS interview_schedules (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  status TEXT NOT NULL,
  scheduled_time TEXT,
  session_id TEXT,
  payload_json TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS user_profiles (
  user_id TEXT PRIMARY KEY,
  interview_readiness REAL NOT NULL DEFAULT 0,
  updated_at TEXT NOT NULL
);
""",
]

_MIGRATED: Set[str] = set()
_MIGRATE_LOCK = threading.Lock()


def migrate(db_path: str = "data/interview.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    with _MIGRATE_LOCK:
        if db_path in _MIGRATED and os.path.exists(db_path):
            return
        conn = sqlite3.connect(db_path)
        try:
            cur = conn.cursor()
            for stmt in SCHEMA:
                cur.execute(stmt)
            conn.commit()
        finally:
            conn.close()
        _MIGRATED.add(db_path)


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)
