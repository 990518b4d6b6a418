"""Tests for the SQLite migration and stores."""
from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone

from interview_evaluation import Decision, Evaluation, QuestionScore
from interview_session.models import InterviewRole, QuestionAnswer, Session, SessionStatus
from storage.evaluations import EvaluationStore
from storage.exchanges import Exchange, ExchangeStore, ExchangeType
from storage.migrate import migrate
from storage.schedules import Schedule, ScheduleStatus, ScheduleStore
from storage.sessions import SessionStore
from storage.users import UserProfileStore


def test_migrate_creates_tables(tmp_db):
    migrate(str(tmp_db))
    conn = sqlite3.connect(tmp_db)
    try:
        names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    finally:
        conn.close()
    assert {
        "interview_sessions",
        "interview_exchanges",
        "interview_evaluations",
        "interview_schedules",
        "user_profiles",
    } <= names


def test_store_defaults_to_settings_path(tmp_db):
    store = SessionStore()
    assert store.db_path == str(tmp_db)


def test_session_store_active_and_history(tmp_db):
    store = SessionStore(tmp_db)
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    old = Session(user_id="u1", role=InterviewRole.HR, status=SessionStatus.COMPLETED, started_at=base)
    new = Session(
        user_id="u1",
        role=InterviewRole.SDE,
        started_at=base + timedelta(hours=1),
        question_answers=[QuestionAnswer(question="Q", answer="A", score=6.5)],
    )
    store.save(old)
    store.save(new)

    assert store.find_active("u1").id == new.id
    assert [s.id for s in store.list_for_user("u1")] == [new.id, old.id]
    assert store.get(new.id).question_answers[0].score == 6.5
    assert store.find_active("nobody") is None

    assert store.delete(old.id) is True
    assert store.delete(old.id) is False


def test_exchange_backfill_prefers_unscored_match(tmp_db):
    store = ExchangeStore(tmp_db)
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    first = store.append(
        Exchange(session_id="s1", type=ExchangeType.ANSWER, text="Same", question_number=1, timestamp=base, score=5)
    )
    second = store.append(
        Exchange(
            session_id="s1",
            type=ExchangeType.ANSWER,
            text="Same",
            question_number=2,
            timestamp=base + timedelta(seconds=1),
        )
    )
    assert first.id is not None and second.id > first.id

    assert store.backfill_answer_score("s1", "Same", 9, "Better") is True
    rows = store.list_for_session("s1")
    assert [(e.score, e.feedback) for e in rows] == [(5, None), (9, "Better")]

    assert store.backfill_answer_score("s1", "Same", 3, "Again") is True
    assert store.list_for_session("s1")[0].score == 3
    assert store.backfill_answer_score("s1", "Different", 1, "x") is False


def test_exchanges_ordered_by_timestamp(tmp_db):
    store = ExchangeStore(tmp_db)
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    store.append(Exchange(session_id="s1", type=ExchangeType.ANSWER, text="later", question_number=1, timestamp=base + timedelta(microseconds=5)))
    store.append(Exchange(session_id="s1", type=ExchangeType.QUESTION, text="earlier", question_number=1, timestamp=base))
    assert [e.text for e in store.list_for_session("s1")] == ["earlier", "later"]
    assert store.delete_for_session("s1") == 2


def test_evaluation_store_round_trip(tmp_db):
    store = EvaluationStore(tmp_db)
    evaluation = Evaluation(
        session_id="s1",
        user_id="u1",
        overall_score=55,
        decision=Decision.WAITLISTED,
        detailed_feedback="ok",
        question_scores=[QuestionScore(question="Q", answer="A", score=4, feedback="f")],
    )
    store.save(evaluation)
    loaded = store.get("s1")
    assert loaded.model_dump() == evaluation.model_dump()
    assert [e.session_id for e in store.list_for_user("u1")] == ["s1"]
    assert store.delete("s1") is True
    assert store.get("s1") is None


def test_schedule_store_filters_and_links(tmp_db):
    store = ScheduleStore(tmp_db)
    early = store.save(
        Schedule(user_id="u1", company="A", position="SDE", scheduled_time=datetime(2024, 1, 1, tzinfo=timezone.utc))
    )
    late = store.save(
        Schedule(user_id="u1", company="B", position="SDE", scheduled_time=datetime(2024, 2, 1, tzinfo=timezone.utc))
    )
    late.status = ScheduleStatus.IN_PROGRESS
    late.session_id = "sess"
    store.save(late)

    assert [s.id for s in store.list_for_user("u1")] == [late.id, early.id]
    assert [s.id for s in store.list_for_user("u1", ScheduleStatus.SCHEDULED)] == [early.id]
    assert store.find_by_session("sess").company == "B"
    assert store.delete(early.id) is True
    assert store.get(early.id) is None


def test_user_profile_upsert(tmp_db):
    store = UserProfileStore(tmp_db)
    assert store.get("u1") is None
    store.update_readiness("u1", 40)
    store.update_readiness("u1", 85.5)
    assert store.get("u1").interview_readiness == 85.5
