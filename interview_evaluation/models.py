from __future__ import annotations  # Evaluation domain models

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from interview_session.models import utcnow


class Decision(str, Enum):  # Hiring outcome of a live interview
    SELECTED = "SELECTED"
    REJECTED = "REJECTED"
    WAITLISTED = "WAITLISTED"


class QuestionScore(BaseModel):  # Per-question line of an evaluation
    question: str
    answer: str
    score: int = Field(ge=0, le=10)
    feedback: str


class Evaluation(BaseModel):  # Final report of a live session, keyed by session id
    session_id: str
    user_id: str
    overall_score: int = Field(ge=0, le=100)
    decision: Decision
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    detailed_feedback: str
    question_scores: List[QuestionScore] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


__all__ = ["Decision", "Evaluation", "QuestionScore"]
