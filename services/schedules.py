"""Interview scheduling and AI-backed company/role/position suggestions."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from config.registry import COMPLETION_KEY, get_model
from config.settings import settings
from interview_session.errors import ScheduleNotFoundError
from interview_session.models import utcnow
from prompts import suggest_companies_prompt, suggest_positions_prompt, suggest_roles_prompt
from response_normalizer import parse_string_list
from storage.schedules import Schedule, ScheduleStatus, ScheduleStore

logger = logging.getLogger(__name__)

Completion = Callable[[str], str]

DEFAULT_COMPANIES = ["Google", "Microsoft", "Amazon", "Apple", "Meta"]
DEFAULT_ROLES = ["Software Engineer", "Data Scientist", "Product Manager", "DevOps Engineer", "QA Engineer"]
SENIORITY_LEVELS = ("Junior", "Mid-Level", "Senior", "Lead")


def default_positions(role: Optional[str]) -> List[str]:
    return [f"{level} {role or ''}".strip() for level in SENIORITY_LEVELS]


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class ScheduleService:  # Booking, status transitions and suggestion lookups
    def __init__(self, schedules: ScheduleStore, complete: Optional[Completion] = None) -> None:
        self._schedules = schedules
        self._completion = complete

    def _complete(self, prompt: str) -> str:
        completion = self._completion or get_model(COMPLETION_KEY)
        return completion(prompt)

    def schedule_interview(
        self,
        *,
        user_id: str,
        company: str,
        role: str,
        position: str,
        round_type: str,
        difficulty: str,
        scheduled_time: Optional[datetime],
        resume_id: Optional[str] = None,
        resume_text: Optional[str] = None,
    ) -> Schedule:
        schedule = Schedule(
            user_id=user_id,
            company=company,
            role=role,
            position=position,
            round_type=round_type,
            difficulty=difficulty,
            scheduled_time=scheduled_time,
            resume_id=resume_id,
            resume_text=resume_text,
        )
        self._schedules.save(schedule)
        logger.info("Scheduled %s interview %s for user %s", round_type, schedule.id, user_id)
        return schedule

    def get_schedule(self, schedule_id: str) -> Schedule:
        schedule = self._schedules.get(schedule_id)
        if schedule is None:
            raise ScheduleNotFoundError(schedule_id)
        return schedule

    def list_schedules(self, user_id: str, status: Optional[ScheduleStatus] = None) -> List[Schedule]:
        return self._schedules.list_for_user(user_id, status)

    def update_status(self, schedule_id: str, status: ScheduleStatus) -> Schedule:
        schedule = self.get_schedule(schedule_id)
        schedule.status = status
        if status == ScheduleStatus.COMPLETED:
            schedule.completed_at = utcnow()
        return self._schedules.save(schedule)

    def can_start(self, schedule_id: str, now: Optional[datetime] = None) -> bool:
        """True once the clock is within the early-start window of the scheduled time.

        Unknown schedules cannot be started; unscheduled ones can start any time.
        """

        schedule = self._schedules.get(schedule_id)
        if schedule is None:
            return False
        if schedule.scheduled_time is None:
            return True
        opens_at = _as_utc(schedule.scheduled_time) - timedelta(minutes=settings.SCHEDULE_EARLY_START_MINUTES)
        return _as_utc(now or utcnow()) > opens_at

    def delete_schedule(self, schedule_id: str) -> None:
        if not self._schedules.delete(schedule_id):
            raise ScheduleNotFoundError(schedule_id)

    def _suggest(self, prompt: str, defaults: List[str]) -> List[str]:
        try:
            suggestions = parse_string_list(self._complete(prompt))
        except Exception:
            logger.exception("Suggestion request failed; using defaults")
            return list(defaults)
        return suggestions or list(defaults)

    def suggest_companies(self, query: str) -> List[str]:
        return self._suggest(suggest_companies_prompt(query), DEFAULT_COMPANIES)

    def suggest_roles(self, query: str, company: Optional[str] = None) -> List[str]:
        return self._suggest(suggest_roles_prompt(query, company), DEFAULT_ROLES)

    def suggest_positions(self, role: Optional[str], company: Optional[str] = None) -> List[str]:
        return self._suggest(suggest_positions_prompt(role, company), default_positions(role))


__all__ = [
    "DEFAULT_COMPANIES",
    "DEFAULT_ROLES",
    "ScheduleService",
    "default_positions",
]
