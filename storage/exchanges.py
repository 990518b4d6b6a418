"""Append-only log of live interview questions and answers."""
from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from interview_session.models import utcnow

from .sqlite import SqliteStore

logger = logging.getLogger(__name__)


class ExchangeType(str, Enum):
    QUESTION = "question"
    ANSWER = "answer"


class Exchange(BaseModel):  # One logged question or answer of a live session
    id: Optional[int] = None
    session_id: str
    type: ExchangeType
    text: str
    timestamp: datetime = Field(default_factory=utcnow)
    question_number: int = Field(ge=1)
    score: Optional[int] = Field(default=None, ge=0, le=10)
    feedback: Optional[str] = None


def _row_to_exchange(row) -> Exchange:
    return Exchange(
        id=row["id"],
        session_id=row["session_id"],
        type=ExchangeType(row["type"]),
        text=row["text"],
        timestamp=datetime.fromisoformat(row["timestamp"]),
        question_number=row["question_number"],
        score=row["score"],
        feedback=row["feedback"],
    )


class ExchangeStore(SqliteStore):
    def append(self, exchange: Exchange) -> Exchange:
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO interview_exchanges (session_id, type, text, timestamp, question_number, score, feedback)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    exchange.session_id,
                    exchange.type.value,
                    exchange.text,
                    exchange.timestamp.isoformat(timespec="microseconds"),
                    exchange.question_number,
                    exchange.score,
                    exchange.feedback,
                ),
            )
            exchange_id = cur.lastrowid
        return exchange.model_copy(update={"id": exchange_id})

    def list_for_session(self, session_id: str) -> List[Exchange]:  # Ordered by timestamp, then insertion
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, session_id, type, text, timestamp, question_number, score, feedback
                FROM interview_exchanges
                WHERE session_id = ?
                ORDER BY timestamp ASC, id ASC
                """,
                (session_id,),
            ).fetchall()
        return [_row_to_exchange(row) for row in rows]

    def backfill_answer_score(self, session_id: str, answer_text: str, score: int, feedback: str) -> bool:
        """Attach a score to the answer exchange whose text matches exactly.

        Prefers the earliest unscored match; falls back to the earliest match.
        """

        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, score FROM interview_exchanges
                WHERE session_id = ? AND type = ? AND text = ?
                ORDER BY timestamp ASC, id ASC
                """,
                (session_id, ExchangeType.ANSWER.value, answer_text),
            ).fetchall()
            if not rows:
                logger.warning("No answer exchange to back-fill for session %s", session_id)
                return False
            target = next((row for row in rows if row["score"] is None), rows[0])
            conn.execute(
                "UPDATE interview_exchanges SET score = ?, feedback = ? WHERE id = ?",
                (score, feedback, target["id"]),
            )
        return True

    def delete_for_session(self, session_id: str) -> int:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM interview_exchanges WHERE session_id = ?", (session_id,))
            return cur.rowcount


__all__ = ["Exchange", "ExchangeStore", "ExchangeType"]
