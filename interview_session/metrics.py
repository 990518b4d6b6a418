"""Running score metrics and difficulty adaptation for a session."""
from __future__ import annotations

from .models import Session

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5
DIFFICULTY_DROP_BELOW = 5.0

# Stand-in until emotion variance across answers is scored; not derived from answers.
EMOTIONAL_STABILITY_PLACEHOLDER = 7.5


def next_difficulty(current: int, *, increase: bool, score: float) -> int:
    """Step difficulty up on an increase signal, down on a weak answer, else hold."""

    if increase:
        return min(current + 1, MAX_DIFFICULTY)
    if score < DIFFICULTY_DROP_BELOW:
        return max(current - 1, MIN_DIFFICULTY)
    return max(MIN_DIFFICULTY, min(current, MAX_DIFFICULTY))


def update_running_metrics(session: Session, communication_clarity: float) -> None:
    """Fold the latest answered question into the session's running metrics.

    Must be called after the newest answer, score and sentiment have been attached.
    """

    answered = session.answered()
    count = len(answered)
    if count == 0:
        return

    score_total = sum(qa.score for qa in answered if qa.score is not None)
    session.technical_score = score_total / count

    session.communication_score = (session.communication_score * (count - 1) + communication_clarity) / count

    confidence_total = sum(qa.sentiment.confidence_level for qa in answered if qa.sentiment is not None)
    session.confidence_score = (confidence_total / count) * 10

    session.emotion_stability_score = EMOTIONAL_STABILITY_PLACEHOLDER


__all__ = [
    "DIFFICULTY_DROP_BELOW",
    "EMOTIONAL_STABILITY_PLACEHOLDER",
    "MAX_DIFFICULTY",
    "MIN_DIFFICULTY",
    "next_difficulty",
    "update_running_metrics",
]
