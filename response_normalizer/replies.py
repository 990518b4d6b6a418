"""Typed shapes of the JSON replies requested from the AI provider."""
from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .normalizer import coerce_string_list


class _Reply(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GeneratedQuestion(_Reply):  # Text-mode question generation reply
    question: str = Field(min_length=1)
    expected_key_points: List[str] = Field(default_factory=list, alias="expectedKeyPoints")

    @field_validator("expected_key_points", mode="before")
    @classmethod
    def _points(cls, value: Any) -> List[str]:
        return coerce_string_list(value)


class AnswerAssessment(_Reply):  # Text-mode per-answer evaluation reply
    score: float = Field(ge=0.0, le=10.0)
    feedback: str = ""
    sentiment: str = "NEUTRAL"
    confidence_level: float = Field(ge=0.0, le=1.0, alias="confidenceLevel")
    filler_word_count: int = Field(default=0, ge=0, alias="fillerWordCount")
    detected_emotions: List[str] = Field(default_factory=list, alias="detectedEmotions")
    technical_accuracy: Optional[float] = Field(default=None, ge=0.0, le=10.0, alias="technicalAccuracy")
    communication_clarity: float = Field(ge=0.0, le=10.0, alias="communicationClarity")
    should_increase_difficulty: bool = Field(alias="shouldIncreaseDifficulty")

    @field_validator("detected_emotions", mode="before")
    @classmethod
    def _emotions(cls, value: Any) -> List[str]:
        return coerce_string_list(value)

    @field_validator("sentiment", mode="before")
    @classmethod
    def _sentiment(cls, value: Any) -> str:
        return str(value or "NEUTRAL").strip().upper()


class SessionFeedback(_Reply):  # Text-mode end-of-session synthesis reply
    overall_readiness: float = Field(ge=0.0, le=100.0, alias="overallReadiness")
    detailed_feedback: str = Field(alias="detailedFeedback")
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)

    @field_validator("strengths", "improvements", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return coerce_string_list(value)


class LiveAnswerScore(_Reply):  # Live-mode background answer scoring reply
    score: int = Field(ge=0, le=10)
    feedback: str = ""

    @field_validator("score", mode="before")
    @classmethod
    def _round(cls, value: Any) -> Any:
        if isinstance(value, float):
            return int(round(value))
        return value


class FinalReport(_Reply):  # Live-mode final report reply
    overall_score: int = Field(ge=0, le=100, alias="overallScore")
    decision: Literal["SELECTED", "REJECTED", "WAITLISTED"]
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    detailed_feedback: str = Field(alias="detailedFeedback")

    @field_validator("overall_score", mode="before")
    @classmethod
    def _round(cls, value: Any) -> Any:
        if isinstance(value, float):
            return int(round(value))
        return value

    @field_validator("decision", mode="before")
    @classmethod
    def _decision(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("strengths", "weaknesses", "improvements", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> List[str]:
        return coerce_string_list(value)


__all__ = [
    "AnswerAssessment",
    "FinalReport",
    "GeneratedQuestion",
    "LiveAnswerScore",
    "SessionFeedback",
]
