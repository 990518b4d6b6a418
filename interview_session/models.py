from __future__ import annotations  # Interview session domain models

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InterviewRole(str, Enum):  # Interview track
    SDE = "SDE"
    DATA_ANALYST = "DATA_ANALYST"
    HR = "HR"
    SYSTEM_DESIGN = "SYSTEM_DESIGN"


class InterviewMode(str, Enum):  # Delivery channel
    TEXT = "TEXT"
    VOICE = "VOICE"


class SessionStatus(str, Enum):  # Lifecycle state; COMPLETED and ABANDONED are terminal
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"


class SentimentAnalysis(BaseModel):  # Sentiment read of a single answer
    overall_sentiment: str = "NEUTRAL"
    confidence_level: float = Field(default=0.0, ge=0.0, le=1.0)
    filler_word_count: int = Field(default=0, ge=0)
    detected_emotions: List[str] = Field(default_factory=list)


class QuestionAnswer(BaseModel):  # One question and its (possibly pending) answer
    question: str
    answer: Optional[str] = None
    difficulty_level: int = Field(default=1, ge=1, le=5)
    expected_key_points: List[str] = Field(default_factory=list)
    score: Optional[float] = None
    feedback: Optional[str] = None
    technical_accuracy: Optional[float] = None
    communication_clarity: Optional[float] = None
    sentiment: Optional[SentimentAnalysis] = None
    answered_at: Optional[datetime] = None

    @property
    def answered(self) -> bool:
        return self.answer is not None


class Session(BaseModel):  # One interview attempt
    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    role: InterviewRole
    mode: InterviewMode = InterviewMode.TEXT
    question_answers: List[QuestionAnswer] = Field(default_factory=list)
    current_difficulty_level: int = Field(default=1, ge=1, le=5)

    technical_score: float = 0.0
    communication_score: float = 0.0
    confidence_score: float = 0.0
    emotion_stability_score: float = 0.0
    overall_readiness: float = 0.0

    detailed_feedback: Optional[str] = None
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)

    status: SessionStatus = SessionStatus.IN_PROGRESS
    started_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.IN_PROGRESS

    def current_question(self) -> Optional[QuestionAnswer]:
        return self.question_answers[-1] if self.question_answers else None

    def answered(self) -> List[QuestionAnswer]:
        return [qa for qa in self.question_answers if qa.answered]


__all__ = [
    "InterviewMode",
    "InterviewRole",
    "QuestionAnswer",
    "SentimentAnalysis",
    "Session",
    "SessionStatus",
    "utcnow",
]
