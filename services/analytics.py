"""Per-user aggregates over stored live interview evaluations."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from interview_evaluation import Decision, Evaluation
from storage.evaluations import EvaluationStore


class InterviewAnalytics(BaseModel):  # Totals, decision counts and rates for one user
    total_interviews: int = 0
    selected_count: int = 0
    rejected_count: int = 0
    waitlisted_count: int = 0
    average_score: float = 0.0
    success_rate: float = 0.0
    interviews: List[Evaluation] = Field(default_factory=list)


def _round1(value: float) -> float:
    """Round a float to one decimal place with stable formatting."""
    return float(f"{value:.1f}")


def interview_analytics(evaluations: EvaluationStore, user_id: str) -> InterviewAnalytics:
    items = evaluations.list_for_user(user_id)
    total = len(items)
    if total == 0:
        return InterviewAnalytics()
    selected = sum(1 for item in items if item.decision == Decision.SELECTED)
    return InterviewAnalytics(
        total_interviews=total,
        selected_count=selected,
        rejected_count=sum(1 for item in items if item.decision == Decision.REJECTED),
        waitlisted_count=sum(1 for item in items if item.decision == Decision.WAITLISTED),
        average_score=_round1(sum(item.overall_score for item in items) / total),
        success_rate=_round1(selected * 100.0 / total),
        interviews=items,
    )


__all__ = ["InterviewAnalytics", "interview_analytics"]
