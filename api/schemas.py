"""Pydantic schemas for the interview API."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from interview_session.models import InterviewMode, InterviewRole
from storage.schedules import ScheduleStatus


class StartReq(BaseModel):
    user_id: str = Field(min_length=1)
    role: InterviewRole
    mode: InterviewMode = InterviewMode.TEXT


class AnswerReq(BaseModel):
    session_id: str
    answer: str


class LiveStartReq(BaseModel):
    schedule_id: str


class NextQuestionReq(BaseModel):
    session_id: str
    previous_answer: Optional[str] = None


class NextQuestionResp(BaseModel):
    session_id: str
    question: str


class LiveEndReq(BaseModel):
    session_id: str


class ScheduleReq(BaseModel):
    user_id: str = Field(min_length=1)
    company: str = Field(min_length=1)
    role: str = ""
    position: str = Field(min_length=1)
    round_type: str = "HR"
    difficulty: str = "MEDIUM"
    scheduled_time: Optional[datetime] = None
    resume_id: Optional[str] = None
    resume_text: Optional[str] = None


class ScheduleStatusReq(BaseModel):
    status: ScheduleStatus


class CanStartResp(BaseModel):
    schedule_id: str
    can_start: bool


class SuggestionsResp(BaseModel):
    suggestions: List[str] = Field(default_factory=list)


class DeletedResp(BaseModel):
    deleted: str
