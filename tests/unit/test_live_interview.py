"""Live interview flow: schedules, exchanges, background scoring and the final report."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from interview_evaluation import Decision, FALLBACK_SCORE
from interview_session.engine import InterviewEngine
from interview_session.errors import (
    EvaluationNotFoundError,
    ScheduleNotFoundError,
    SessionNotActiveError,
    SessionNotFoundError,
)
from interview_session.models import InterviewMode, InterviewRole, SessionStatus
from live_interview.background import ScoringTasks
from live_interview.service import LiveInterviewService, map_to_interview_role
from llm_gateway import AiUnavailableError
from prompts import live_introduction
from storage.evaluations import EvaluationStore
from storage.exchanges import ExchangeStore, ExchangeType
from storage.schedules import Schedule, ScheduleStatus, ScheduleStore
from storage.sessions import SessionStore
from storage.users import UserProfileStore


@pytest.fixture
def tasks():
    pool = ScoringTasks(max_workers=2)
    yield pool
    pool.shutdown()


@pytest.fixture
def stores(tmp_db):
    return {
        "sessions": SessionStore(tmp_db),
        "schedules": ScheduleStore(tmp_db),
        "exchanges": ExchangeStore(tmp_db),
        "evaluations": EvaluationStore(tmp_db),
        "users": UserProfileStore(tmp_db),
    }


@pytest.fixture
def service(stores, tasks, fake_ai):
    engine = InterviewEngine(stores["sessions"], stores["users"], complete=fake_ai)
    return LiveInterviewService(
        engine,
        stores["sessions"],
        stores["schedules"],
        stores["exchanges"],
        stores["evaluations"],
        tasks,
        complete=fake_ai,
    )


@pytest.fixture
def schedule(stores):
    return stores["schedules"].save(
        Schedule(
            user_id="u1",
            company="Acme",
            role="Engineering",
            position="Senior Backend Engineer",
            round_type="CODING",
            difficulty="MEDIUM",
            resume_text="Built payment APIs in Go.",
            scheduled_time=datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc),
        )
    )


@pytest.mark.parametrize(
    "position, role",
    [
        ("Senior Data Engineer", InterviewRole.DATA_ANALYST),
        ("Business Analyst", InterviewRole.DATA_ANALYST),
        ("HR Generalist", InterviewRole.HR),
        ("Human Resources Partner", InterviewRole.HR),
        ("Distributed Systems Engineer", InterviewRole.SYSTEM_DESIGN),
        ("Product Designer", InterviewRole.SYSTEM_DESIGN),
        ("Backend Engineer", InterviewRole.SDE),
        (None, InterviewRole.SDE),
    ],
)
def test_role_from_position_keywords(position, role):
    assert map_to_interview_role(position) == role


def test_start_links_schedule_and_session(service, schedule, stores):
    session = service.start_live_session(schedule.id)

    assert session.mode == InterviewMode.VOICE
    assert session.role == InterviewRole.SDE
    assert session.question_answers == []
    stored = stores["schedules"].get(schedule.id)
    assert stored.status == ScheduleStatus.IN_PROGRESS
    assert stored.session_id == session.id


def test_start_unknown_schedule(service):
    with pytest.raises(ScheduleNotFoundError):
        service.start_live_session("missing")


def test_start_abandons_open_text_session(service, schedule, stores, fake_ai):
    engine = InterviewEngine(stores["sessions"], stores["users"], complete=fake_ai)
    text_session = engine.start_session("u1", InterviewRole.HR)
    live = service.start_live_session(schedule.id)

    assert stores["sessions"].get(text_session.id).status == SessionStatus.ABANDONED
    assert stores["sessions"].find_active("u1").id == live.id


def test_first_question_is_fixed_welcome(service, schedule, stores, fake_ai):
    session = service.start_live_session(schedule.id)
    question = service.get_next_question(session.id, "ignored, nothing asked yet")

    assert question == live_introduction("Senior Backend Engineer", "Acme")
    assert fake_ai.prompts == []
    exchanges = stores["exchanges"].list_for_session(session.id)
    assert [(e.type, e.question_number) for e in exchanges] == [(ExchangeType.QUESTION, 1)]


def test_answer_logged_scored_and_history_sent(service, schedule, stores, tasks, fake_ai):
    session = service.start_live_session(schedule.id)
    service.get_next_question(session.id)
    question = service.get_next_question(session.id, "I build payment systems.")
    tasks.drain()

    assert question == "Tell me about a project you are proud of."
    prompt = fake_ai.calls("live_question")[0]
    assert "question #2" in prompt
    assert "A: I build payment systems." in prompt
    assert "Built payment APIs in Go." in prompt

    exchanges = stores["exchanges"].list_for_session(session.id)
    assert [(e.type, e.question_number) for e in exchanges] == [
        (ExchangeType.QUESTION, 1),
        (ExchangeType.ANSWER, 1),
        (ExchangeType.QUESTION, 2),
    ]
    answer = exchanges[1]
    assert answer.score == 8
    assert answer.feedback == "Good example"

    stored = stores["sessions"].get(session.id)
    assert stored.question_answers[0].answer == "I build payment systems."
    assert stored.question_answers[1].answer is None


def test_blank_previous_answer_is_ignored(service, schedule, stores, tasks, fake_ai):
    session = service.start_live_session(schedule.id)
    service.get_next_question(session.id)
    service.get_next_question(session.id, "   ")
    tasks.drain()

    assert fake_ai.calls("live_answer") == []
    kinds = [e.type for e in stores["exchanges"].list_for_session(session.id)]
    assert kinds == [ExchangeType.QUESTION, ExchangeType.QUESTION]


def test_background_scoring_failure_is_swallowed(service, schedule, stores, tasks, fake_ai):
    fake_ai.replies["live_answer"] = "no json"
    session = service.start_live_session(schedule.id)
    service.get_next_question(session.id)
    service.get_next_question(session.id, "An answer")
    tasks.drain()

    answer = [e for e in stores["exchanges"].list_for_session(session.id) if e.type == ExchangeType.ANSWER][0]
    assert answer.score is None


def test_question_failure_surfaces_and_keeps_state(service, schedule, stores, tasks, fake_ai):
    session = service.start_live_session(schedule.id)
    service.get_next_question(session.id)
    fake_ai.replies["live_question"] = AiUnavailableError("All AI services are currently unavailable")

    with pytest.raises(AiUnavailableError):
        service.get_next_question(session.id, "An answer")
    tasks.drain()

    assert len(stores["exchanges"].list_for_session(session.id)) == 1
    assert stores["sessions"].get(session.id).question_answers[0].answer is None


def _run_interview(service, session_id, answers):
    service.get_next_question(session_id)
    for answer in answers:
        service.get_next_question(session_id, answer)


def test_end_session_builds_report_and_closes_records(service, schedule, stores, tasks, fake_ai):
    session = service.start_live_session(schedule.id)
    _run_interview(service, session.id, ["I build payment systems.", "I don't know, honestly"])
    tasks.drain()

    evaluation = service.end_live_session(session.id)

    assert evaluation.overall_score == 82
    assert evaluation.decision == Decision.SELECTED
    assert evaluation.user_id == "u1"
    scores = evaluation.question_scores
    assert [s.score for s in scores] == [8, 0, 0]
    assert scores[1].feedback == "Good example"
    assert scores[2].answer == "No answer provided"
    assert scores[2].feedback == "No feedback available"

    report_prompt = fake_ai.calls("final_report")[0]
    assert "Questions Asked: 3" in report_prompt
    assert "] ANSWER: I build payment systems." in report_prompt

    assert stores["sessions"].get(session.id).status == SessionStatus.COMPLETED
    closed = stores["schedules"].get(schedule.id)
    assert closed.status == ScheduleStatus.COMPLETED
    assert closed.completed_at is not None
    assert closed.questions_asked == 3
    assert closed.average_score == pytest.approx(2.7)
    assert service.get_evaluation_report(session.id).overall_score == 82

    with pytest.raises(SessionNotActiveError):
        service.get_next_question(session.id, "late")
    with pytest.raises(SessionNotActiveError):
        service.end_live_session(session.id)


def test_end_session_falls_back_when_report_fails(service, schedule, tasks, fake_ai):
    fake_ai.replies["final_report"] = AiUnavailableError("All AI services are currently unavailable")
    session = service.start_live_session(schedule.id)
    _run_interview(service, session.id, ["An answer"])
    tasks.drain()

    evaluation = service.end_live_session(session.id)

    assert evaluation.overall_score == FALLBACK_SCORE
    assert evaluation.decision == Decision.WAITLISTED
    assert evaluation.strengths == ["Good communication", "Clear responses"]
    assert evaluation.question_scores == []


def test_end_session_falls_back_on_malformed_report(service, schedule, fake_ai):
    fake_ai.replies["final_report"] = '{"overallScore": "great"}'
    session = service.start_live_session(schedule.id)
    evaluation = service.end_live_session(session.id)
    assert evaluation.overall_score == FALLBACK_SCORE


def test_lookup_errors(service, stores):
    with pytest.raises(SessionNotFoundError):
        service.get_next_question("missing")
    with pytest.raises(EvaluationNotFoundError):
        service.get_evaluation_report("missing")
    with pytest.raises(EvaluationNotFoundError):
        service.delete_evaluation("missing")


def test_session_without_schedule(service, stores, fake_ai):
    engine = InterviewEngine(stores["sessions"], stores["users"], complete=fake_ai)
    text_session = engine.start_session("u2", InterviewRole.SDE)
    with pytest.raises(ScheduleNotFoundError):
        service.get_next_question(text_session.id)


def test_delete_evaluation_removes_session(service, schedule, stores):
    session = service.start_live_session(schedule.id)
    service.end_live_session(session.id)

    service.delete_evaluation(session.id)

    assert stores["evaluations"].get(session.id) is None
    assert stores["sessions"].get(session.id) is None
    assert stores["exchanges"].list_for_session(session.id) == []
