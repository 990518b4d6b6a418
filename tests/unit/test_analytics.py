from __future__ import annotations

from interview_evaluation import Decision, Evaluation
from services.analytics import interview_analytics
from storage.evaluations import EvaluationStore


def _save(store, session_id, score, decision, user_id="u1"):
    store.save(
        Evaluation(
            session_id=session_id,
            user_id=user_id,
            overall_score=score,
            decision=decision,
            detailed_feedback="-",
        )
    )


def test_analytics_counts_and_rates(tmp_db):
    store = EvaluationStore(tmp_db)
    _save(store, "s1", 80, Decision.SELECTED)
    _save(store, "s2", 55, Decision.WAITLISTED)
    _save(store, "s3", 40, Decision.REJECTED)
    _save(store, "other", 99, Decision.SELECTED, user_id="u2")

    result = interview_analytics(store, "u1")

    assert result.total_interviews == 3
    assert (result.selected_count, result.rejected_count, result.waitlisted_count) == (1, 1, 1)
    assert result.average_score == 58.3
    assert result.success_rate == 33.3
    assert {e.session_id for e in result.interviews} == {"s1", "s2", "s3"}


def test_analytics_empty_user(tmp_db):
    result = interview_analytics(EvaluationStore(tmp_db), "nobody")
    assert result.total_interviews == 0
    assert result.average_score == 0.0
    assert result.success_rate == 0.0
