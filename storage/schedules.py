"""Interview schedules booked by users, persisted as JSON payloads."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from interview_session.models import utcnow

from .sqlite import SqliteStore


class ScheduleStatus(str, Enum):  # SCHEDULED -> IN_PROGRESS -> COMPLETED, or CANCELLED
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Schedule(BaseModel):  # Booked live interview
    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    company: str
    role: str = ""
    position: str
    round_type: str = "HR"
    difficulty: str = "MEDIUM"
    resume_id: Optional[str] = None
    resume_text: Optional[str] = None
    scheduled_time: Optional[datetime] = None
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    session_id: Optional[str] = None
    questions_asked: int = 0
    average_score: Optional[float] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None


def _row_values(schedule: Schedule):
    return (
        schedule.id,
        schedule.user_id,
        schedule.status.value,
        schedule.scheduled_time.isoformat() if schedule.scheduled_time else None,
        schedule.session_id,
        schedule.model_dump_json(),
    )


class ScheduleStore(SqliteStore):
    def save(self, schedule: Schedule) -> Schedule:
        """Insert or update a schedule, refreshing ``updated_at``."""

        schedule.updated_at = utcnow()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO interview_schedules (id, user_id, status, scheduled_time, session_id, payload_json)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                  user_id=excluded.user_id,
                  status=excluded.status,
                  scheduled_time=excluded.scheduled_time,
                  session_id=excluded.session_id,
                  payload_json=excluded.payload_json
                """,
                _row_values(schedule),
            )
        return schedule

    def get(self, schedule_id: str) -> Optional[Schedule]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json FROM interview_schedules WHERE id = ?",
                (schedule_id,),
            ).fetchone()
        return Schedule.model_validate_json(row["payload_json"]) if row else None

    def find_by_session(self, session_id: str) -> Optional[Schedule]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json FROM interview_schedules WHERE session_id = ?",
                (session_id,),
            ).fetchone()
        return Schedule.model_validate_json(row["payload_json"]) if row else None

    def list_for_user(self, user_id: str, status: Optional[ScheduleStatus] = None) -> List[Schedule]:
        """Schedules of a user, latest scheduled time first, optionally filtered by status."""

        query = "SELECT payload_json FROM interview_schedules WHERE user_id = ?"
        params: list = [user_id]
        if status is not None:
            query += " AND status = ?"
            params.append(status.value)
        query += " ORDER BY scheduled_time DESC, id DESC"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [Schedule.model_validate_json(row["payload_json"]) for row in rows]

    def delete(self, schedule_id: str) -> bool:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM interview_schedules WHERE id = ?", (schedule_id,))
            return cur.rowcount > 0


__all__ = ["Schedule", "ScheduleStatus", "ScheduleStore"]
