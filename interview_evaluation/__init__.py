from .evaluation import (
    FALLBACK_DECISION,
    FALLBACK_SCORE,
    average_question_score,
    build_final_evaluation,
    evaluate_live_session,
    fallback_evaluation,
    is_non_answer,
    question_scores,
    synthesize_session_feedback,
)
from .models import Decision, Evaluation, QuestionScore

__all__ = [
    "Decision",
    "Evaluation",
    "FALLBACK_DECISION",
    "FALLBACK_SCORE",
    "QuestionScore",
    "average_question_score",
    "build_final_evaluation",
    "evaluate_live_session",
    "fallback_evaluation",
    "is_non_answer",
    "question_scores",
    "synthesize_session_feedback",
]
