from __future__ import annotations  # Interview session persistence

from typing import List, Optional

from interview_session.models import Session, SessionStatus

from .sqlite import SqliteStore


def _stamp(value) -> Optional[str]:
    return value.isoformat(timespec="microseconds") if value is not None else None


class SessionStore(SqliteStore):  # SQLite-backed session storage; the Q/A list lives in the payload
    def save(self, session: Session) -> Session:  # Insert or replace the full session record
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO interview_sessions (id, user_id, role, mode, status, started_at, completed_at, payload_json)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                  user_id=excluded.user_id,
                  role=excluded.role,
                  mode=excluded.mode,
                  status=excluded.status,
                  started_at=excluded.started_at,
                  completed_at=excluded.completed_at,
                  payload_json=excluded.payload_json
                """,
                (
                    session.id,
                    session.user_id,
                    session.role.value,
                    session.mode.value,
                    session.status.value,
                    _stamp(session.started_at),
                    _stamp(session.completed_at),
                    session.model_dump_json(),
                ),
            )
        return session

    def get(self, session_id: str) -> Optional[Session]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json FROM interview_sessions WHERE id = ?",
                (session_id,),
            ).fetchone()
        if row is None:
            return None
        return Session.model_validate_json(row["payload_json"])

    def find_active(self, user_id: str) -> Optional[Session]:  # Newest in-progress session of a user
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT payload_json FROM interview_sessions
                WHERE user_id = ? AND status = ?
                ORDER BY started_at DESC
                LIMIT 1
                """,
                (user_id, SessionStatus.IN_PROGRESS.value),
            ).fetchone()
        if row is None:
            return None
        return Session.model_validate_json(row["payload_json"])

    def list_for_user(self, user_id: str) -> List[Session]:  # Newest first
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT payload_json FROM interview_sessions
                WHERE user_id = ?
                ORDER BY started_at DESC, id DESC
                """,
                (user_id,),
            ).fetchall()
        return [Session.model_validate_json(row["payload_json"]) for row in rows]

    def delete(self, session_id: str) -> bool:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM interview_sessions WHERE id = ?", (session_id,))
            return cur.rowcount > 0


__all__ = ["SessionStore"]
