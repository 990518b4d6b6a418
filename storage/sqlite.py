"""SQLite helpers for the persistence layer."""
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from config.settings import settings


@contextmanager
def get_conn(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Yield a SQLite connection, ensuring the data directory exists."""

    path = db_path or settings.DB_PATH
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


class SqliteStore:  # Base for stores bound to one database file
    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path

    @property
    def db_path(self) -> str:
        return str(self._path) if self._path is not None else settings.DB_PATH

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        from .migrate import migrate

        migrate(self.db_path)
        with get_conn(self.db_path) as conn:
            yield conn
