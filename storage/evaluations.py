from __future__ import annotations  # Evaluation persistence

from typing import List, Optional

from interview_evaluation.models import Evaluation

from .sqlite import SqliteStore


class EvaluationStore(SqliteStore):  # One evaluation per session
    def save(self, evaluation: Evaluation) -> Evaluation:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO interview_evaluations (session_id, user_id, overall_score, decision, created_at, payload_json)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(session_id) DO UPDATE SET
                  user_id=excluded.user_id,
                  overall_score=excluded.overall_score,
                  decision=excluded.decision,
                  payload_json=excluded.payload_json
                """,
                (
                    evaluation.session_id,
                    evaluation.user_id,
                    evaluation.overall_score,
                    evaluation.decision.value,
                    evaluation.created_at.isoformat(timespec="microseconds"),
                    evaluation.model_dump_json(),
                ),
            )
        return evaluation

    def get(self, session_id: str) -> Optional[Evaluation]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json FROM interview_evaluations WHERE session_id = ?",
                (session_id,),
            ).fetchone()
        return Evaluation.model_validate_json(row["payload_json"]) if row else None

    def list_for_user(self, user_id: str) -> List[Evaluation]:  # Newest first
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT payload_json FROM interview_evaluations
                WHERE user_id = ?
                ORDER BY created_at DESC, session_id DESC
                """,
                (user_id,),
            ).fetchall()
        return [Evaluation.model_validate_json(row["payload_json"]) for row in rows]

    def delete(self, session_id: str) -> bool:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM interview_evaluations WHERE session_id = ?", (session_id,))
            return cur.rowcount > 0


__all__ = ["EvaluationStore"]
