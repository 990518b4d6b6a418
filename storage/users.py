from __future__ import annotations  # User profile readiness storage

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from interview_session.models import utcnow

from .sqlite import SqliteStore


class UserProfile(BaseModel):  # Latest interview readiness of a user
    user_id: str
    interview_readiness: float = Field(default=0.0, ge=0.0, le=100.0)
    updated_at: datetime = Field(default_factory=utcnow)


class UserProfileStore(SqliteStore):
    def get(self, user_id: str) -> Optional[UserProfile]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT user_id, interview_readiness, updated_at FROM user_profiles WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return UserProfile(
            user_id=row["user_id"],
            interview_readiness=row["interview_readiness"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def update_readiness(self, user_id: str, readiness: float) -> UserProfile:  # Upsert readiness
        profile = UserProfile(user_id=user_id, interview_readiness=readiness)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO user_profiles (user_id, interview_readiness, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                  interview_readiness=excluded.interview_readiness,
                  updated_at=excluded.updated_at
                """,
                (user_id, profile.interview_readiness, profile.updated_at.isoformat()),
            )
        return profile


__all__ = ["UserProfile", "UserProfileStore"]
