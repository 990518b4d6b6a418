from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from interview_session.errors import ScheduleNotFoundError
from llm_gateway import AiUnavailableError
from services.schedules import DEFAULT_COMPANIES, DEFAULT_ROLES, ScheduleService
from storage.schedules import ScheduleStatus, ScheduleStore


@pytest.fixture
def service(tmp_db, fake_ai):
    return ScheduleService(ScheduleStore(tmp_db), complete=fake_ai)


def _book(service, when=None, user_id="u1"):
    return service.schedule_interview(
        user_id=user_id,
        company="Acme",
        role="Engineering",
        position="Backend Engineer",
        round_type="CODING",
        difficulty="HARD",
        scheduled_time=when,
    )


def test_schedule_and_list(service):
    booked = _book(service, datetime(2024, 3, 1, 10, tzinfo=timezone.utc))
    assert booked.status == ScheduleStatus.SCHEDULED
    assert [s.id for s in service.list_schedules("u1")] == [booked.id]
    assert service.list_schedules("u1", ScheduleStatus.COMPLETED) == []


def test_update_status_sets_completion_time(service):
    booked = _book(service)
    running = service.update_status(booked.id, ScheduleStatus.IN_PROGRESS)
    assert running.completed_at is None
    done = service.update_status(booked.id, ScheduleStatus.COMPLETED)
    assert done.completed_at is not None
    assert service.get_schedule(booked.id).status == ScheduleStatus.COMPLETED


def test_update_status_unknown(service):
    with pytest.raises(ScheduleNotFoundError):
        service.update_status("missing", ScheduleStatus.CANCELLED)


def test_can_start_window(service):
    at = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    booked = _book(service, at)
    assert service.can_start(booked.id, now=at - timedelta(minutes=6)) is False
    assert service.can_start(booked.id, now=at - timedelta(minutes=4)) is True
    assert service.can_start(booked.id, now=at + timedelta(hours=1)) is True
    assert service.can_start("missing") is False


def test_can_start_treats_naive_times_as_utc(service):
    booked = _book(service, datetime(2024, 3, 1, 10, 0))
    assert service.can_start(booked.id, now=datetime(2024, 3, 1, 9, 56, tzinfo=timezone.utc)) is True


def test_delete_schedule(service):
    booked = _book(service)
    service.delete_schedule(booked.id)
    with pytest.raises(ScheduleNotFoundError):
        service.delete_schedule(booked.id)


def test_suggestions_decode_ai_lists(service, fake_ai):
    assert service.suggest_companies("pay") == ["Stripe", "Shopify"]
    assert service.suggest_roles("back", "Stripe") == ["Backend Engineer"]
    assert "'pay'" in fake_ai.calls("companies")[0]


def test_suggestions_fall_back_to_defaults(service, fake_ai):
    assert service.suggest_positions("Data Scientist") == [
        "Junior Data Scientist",
        "Mid-Level Data Scientist",
        "Senior Data Scientist",
        "Lead Data Scientist",
    ]
    fake_ai.replies["companies"] = AiUnavailableError("down")
    fake_ai.replies["roles"] = "garbage"
    assert service.suggest_companies("x") == DEFAULT_COMPANIES
    assert service.suggest_roles("x") == DEFAULT_ROLES
