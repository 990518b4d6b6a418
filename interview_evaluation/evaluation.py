from __future__ import annotations  # End-of-session evaluation for text and live interviews

import json
import logging
from typing import Callable, List, Optional, Sequence

from interview_session.models import Session
from observability import log_event
from prompts import final_report_prompt, render_transcript, session_feedback_prompt
from response_normalizer import FinalReport, SessionFeedback, decode
from storage.exchanges import Exchange, ExchangeType
from storage.schedules import Schedule

from .models import Decision, Evaluation, QuestionScore

logger = logging.getLogger(__name__)

Completion = Callable[[str], str]

FALLBACK_SCORE = 70
FALLBACK_DECISION = Decision.WAITLISTED
FALLBACK_STRENGTHS = ["Good communication", "Clear responses"]
FALLBACK_WEAKNESSES = ["Could provide more examples"]
FALLBACK_IMPROVEMENTS = ["Practice STAR method", "Prepare specific examples"]
FALLBACK_FEEDBACK = "Overall good performance. Continue practicing interview skills."

NO_ANSWER_TEXT = "No answer provided"
NO_FEEDBACK_TEXT = "No feedback available"
NON_ANSWER_MARKERS = ("i don't know", "no answer")


def session_data(session: Session) -> str:  # Q/A list serialised for the feedback prompt
    return json.dumps(
        [qa.model_dump(mode="json", by_alias=True) for qa in session.question_answers],
        ensure_ascii=False,
    )


def synthesize_session_feedback(session: Session, complete: Completion) -> SessionFeedback:
    """Ask the AI for readiness, strengths and improvements of a text session.

    Failures propagate; text mode has no fallback report.
    """

    prompt = session_feedback_prompt(session.role.value, session_data(session))
    return decode(complete(prompt), SessionFeedback)


def is_non_answer(answer: Optional[str]) -> bool:
    if answer is None or not answer.strip():
        return True
    lowered = answer.lower()
    return any(marker in lowered for marker in NON_ANSWER_MARKERS)


def _answer_exchange(exchanges: Sequence[Exchange], question_number: int) -> Optional[Exchange]:
    for exchange in exchanges:
        if exchange.type == ExchangeType.ANSWER and exchange.question_number == question_number:
            return exchange
    return None


def question_scores(session: Session, exchanges: Sequence[Exchange]) -> List[QuestionScore]:
    """Per-question scores, read from the answer exchange logged for each question.

    Non-answers score 0 regardless of what the background scorer recorded.
    """

    scores: List[QuestionScore] = []
    for index, qa in enumerate(session.question_answers):
        exchange = _answer_exchange(exchanges, index + 1)
        if is_non_answer(qa.answer):
            score = 0
        else:
            score = exchange.score if exchange is not None and exchange.score is not None else 0
        feedback = exchange.feedback if exchange is not None and exchange.feedback else NO_FEEDBACK_TEXT
        scores.append(
            QuestionScore(
                question=qa.question,
                answer=qa.answer if qa.answer is not None else NO_ANSWER_TEXT,
                score=score,
                feedback=feedback,
            )
        )
    return scores


def build_final_evaluation(
    session: Session,
    schedule: Schedule,
    exchanges: Sequence[Exchange],
    complete: Completion,
) -> Evaluation:
    """Request the final report for a live session; raises on any AI or shape failure."""

    prompt = final_report_prompt(
        company=schedule.company,
        position=schedule.position,
        round_type=schedule.round_type,
        difficulty=schedule.difficulty,
        transcript=render_transcript(exchanges),
        question_count=len(session.question_answers),
    )
    report = decode(complete(prompt), FinalReport)
    return Evaluation(
        session_id=session.id,
        user_id=session.user_id,
        overall_score=report.overall_score,
        decision=Decision(report.decision),
        strengths=report.strengths,
        weaknesses=report.weaknesses,
        improvements=report.improvements,
        detailed_feedback=report.detailed_feedback,
        question_scores=question_scores(session, exchanges),
    )


def fallback_evaluation(session: Session) -> Evaluation:  # Neutral report used when synthesis fails
    return Evaluation(
        session_id=session.id,
        user_id=session.user_id,
        overall_score=FALLBACK_SCORE,
        decision=FALLBACK_DECISION,
        strengths=list(FALLBACK_STRENGTHS),
        weaknesses=list(FALLBACK_WEAKNESSES),
        improvements=list(FALLBACK_IMPROVEMENTS),
        detailed_feedback=FALLBACK_FEEDBACK,
        question_scores=[],
    )


def evaluate_live_session(
    session: Session,
    schedule: Schedule,
    exchanges: Sequence[Exchange],
    complete: Completion,
) -> Evaluation:
    """Final report for a live session, falling back to a neutral report on any failure."""

    try:
        return build_final_evaluation(session, schedule, exchanges, complete)
    except Exception as exc:
        logger.exception("Failed to generate final report for session %s, using fallback", session.id)
        log_event("live_report_fallback", session.id, reason=type(exc).__name__)
        return fallback_evaluation(session)


def average_question_score(evaluation: Evaluation) -> Optional[float]:
    if not evaluation.question_scores:
        return None
    total = sum(item.score for item in evaluation.question_scores)
    return round(total / len(evaluation.question_scores), 1)


__all__ = [
    "FALLBACK_DECISION",
    "FALLBACK_FEEDBACK",
    "FALLBACK_IMPROVEMENTS",
    "FALLBACK_SCORE",
    "FALLBACK_STRENGTHS",
    "FALLBACK_WEAKNESSES",
    "average_question_score",
    "build_final_evaluation",
    "evaluate_live_session",
    "fallback_evaluation",
    "is_non_answer",
    "question_scores",
    "session_data",
    "synthesize_session_feedback",
]
