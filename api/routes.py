"""FastAPI routes for text interviews, live interviews, scheduling and analytics."""
from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from api.schemas import (
    AnswerReq,
    CanStartResp,
    DeletedResp,
    LiveEndReq,
    LiveStartReq,
    NextQuestionReq,
    NextQuestionResp,
    ScheduleReq,
    ScheduleStatusReq,
    StartReq,
    SuggestionsResp,
)
from config.settings import settings
from interview_evaluation import Evaluation
from interview_evaluation.pdf import generate_evaluation_pdf
from interview_session.engine import InterviewEngine
from interview_session.models import Session
from live_interview.background import ScoringTasks
from live_interview.service import LiveInterviewService
from services.analytics import InterviewAnalytics, interview_analytics
from services.schedules import ScheduleService
from storage.evaluations import EvaluationStore
from storage.exchanges import ExchangeStore
from storage.schedules import Schedule, ScheduleStatus, ScheduleStore
from storage.sessions import SessionStore
from storage.users import UserProfileStore

router = APIRouter(prefix="/api")

scoring_tasks = ScoringTasks()


def _db() -> Path:
    return Path(settings.DB_PATH)


def interview_engine() -> InterviewEngine:
    return InterviewEngine(SessionStore(_db()), UserProfileStore(_db()))


def live_service(engine: InterviewEngine = Depends(interview_engine)) -> LiveInterviewService:
    return LiveInterviewService(
        engine,
        SessionStore(_db()),
        ScheduleStore(_db()),
        ExchangeStore(_db()),
        EvaluationStore(_db()),
        scoring_tasks,
    )


def schedule_service() -> ScheduleService:
    return ScheduleService(ScheduleStore(_db()))


def _safe_slug(value: str) -> str:  # Sanitize value for filenames
    slug = re.sub(r"[^A-Za-z0-9._-]+", "-", value).strip("-")
    return slug or "interview"


@router.post("/interview/start", response_model=Session)
def start_interview(req: StartReq, engine: InterviewEngine = Depends(interview_engine)) -> Session:
    return engine.start_session(req.user_id, req.role, req.mode)


@router.post("/interview/submit-answer", response_model=Session)
def submit_answer(req: AnswerReq, engine: InterviewEngine = Depends(interview_engine)) -> Session:
    return engine.submit_answer(req.session_id, req.answer)


@router.post("/interview/complete/{session_id}", response_model=Session)
def complete_interview(session_id: str, engine: InterviewEngine = Depends(interview_engine)) -> Session:
    return engine.complete_session(session_id)


@router.get("/interview/history/{user_id}", response_model=List[Session])
def interview_history(user_id: str, engine: InterviewEngine = Depends(interview_engine)) -> List[Session]:
    return engine.history(user_id)


@router.get("/interview/session/{session_id}", response_model=Session)
def get_session(session_id: str, engine: InterviewEngine = Depends(interview_engine)) -> Session:
    return engine.get_session(session_id)


@router.get("/interview/active/{user_id}", response_model=Optional[Session])
def active_session(user_id: str, engine: InterviewEngine = Depends(interview_engine)) -> Optional[Session]:
    return engine.active_session(user_id)


@router.post("/interview/live/start", response_model=Session)
def start_live(req: LiveStartReq, service: LiveInterviewService = Depends(live_service)) -> Session:
    return service.start_live_session(req.schedule_id)


@router.post("/interview/live/next-question", response_model=NextQuestionResp)
def next_question(req: NextQuestionReq, service: LiveInterviewService = Depends(live_service)) -> NextQuestionResp:
    question = service.get_next_question(req.session_id, req.previous_answer)
    return NextQuestionResp(session_id=req.session_id, question=question)


@router.post("/interview/live/end", response_model=Evaluation)
def end_live(req: LiveEndReq, service: LiveInterviewService = Depends(live_service)) -> Evaluation:
    return service.end_live_session(req.session_id)


@router.get("/interview/live/report/{session_id}.pdf")
def live_report_pdf(session_id: str, service: LiveInterviewService = Depends(live_service)) -> Response:
    evaluation = service.get_evaluation_report(session_id)
    schedule = ScheduleStore(_db()).find_by_session(session_id)
    payload = generate_evaluation_pdf(
        evaluation,
        company=schedule.company if schedule else None,
        position=schedule.position if schedule else None,
        round_type=schedule.round_type if schedule else None,
    )
    filename = _safe_slug(f"evaluation-{session_id}") + ".pdf"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=payload, media_type="application/pdf", headers=headers)


@router.get("/interview/live/report/{session_id}", response_model=Evaluation)
def live_report(session_id: str, service: LiveInterviewService = Depends(live_service)) -> Evaluation:
    return service.get_evaluation_report(session_id)


@router.delete("/interview/live/evaluation/{session_id}", response_model=DeletedResp)
def delete_evaluation(session_id: str, service: LiveInterviewService = Depends(live_service)) -> DeletedResp:
    service.delete_evaluation(session_id)
    return DeletedResp(deleted=session_id)


@router.post("/interview/schedule", response_model=Schedule, status_code=201)
def create_schedule(req: ScheduleReq, service: ScheduleService = Depends(schedule_service)) -> Schedule:
    return service.schedule_interview(**req.model_dump())


@router.get("/interview/schedules/{user_id}", response_model=List[Schedule])
def list_schedules(
    user_id: str,
    status: Optional[ScheduleStatus] = None,
    service: ScheduleService = Depends(schedule_service),
) -> List[Schedule]:
    return service.list_schedules(user_id, status)


@router.put("/interview/schedule/{schedule_id}/status", response_model=Schedule)
def update_schedule_status(
    schedule_id: str,
    req: ScheduleStatusReq,
    service: ScheduleService = Depends(schedule_service),
) -> Schedule:
    return service.update_status(schedule_id, req.status)


@router.get("/interview/can-start/{schedule_id}", response_model=CanStartResp)
def can_start(schedule_id: str, service: ScheduleService = Depends(schedule_service)) -> CanStartResp:
    return CanStartResp(schedule_id=schedule_id, can_start=service.can_start(schedule_id))


@router.delete("/interview/schedule/{schedule_id}", response_model=DeletedResp)
def delete_schedule(schedule_id: str, service: ScheduleService = Depends(schedule_service)) -> DeletedResp:
    service.delete_schedule(schedule_id)
    return DeletedResp(deleted=schedule_id)


@router.get("/interview/suggest-companies", response_model=SuggestionsResp)
def suggest_companies(query: str = "", service: ScheduleService = Depends(schedule_service)) -> SuggestionsResp:
    return SuggestionsResp(suggestions=service.suggest_companies(query))


@router.get("/interview/suggest-roles", response_model=SuggestionsResp)
def suggest_roles(
    query: str = "",
    company: Optional[str] = None,
    service: ScheduleService = Depends(schedule_service),
) -> SuggestionsResp:
    return SuggestionsResp(suggestions=service.suggest_roles(query, company))


@router.get("/interview/suggest-positions", response_model=SuggestionsResp)
def suggest_positions(
    role: Optional[str] = None,
    company: Optional[str] = None,
    service: ScheduleService = Depends(schedule_service),
) -> SuggestionsResp:
    return SuggestionsResp(suggestions=service.suggest_positions(role, company))


@router.get("/analytics/interviews/{user_id}", response_model=InterviewAnalytics)
def user_interview_analytics(user_id: str) -> InterviewAnalytics:
    return interview_analytics(EvaluationStore(_db()), user_id)
