from __future__ import annotations  # Live (voice) interview orchestration over schedules and exchanges

import logging
from typing import Callable, List, Optional

from config.registry import COMPLETION_KEY, get_model
from interview_evaluation import Evaluation, average_question_score, evaluate_live_session
from interview_session.engine import InterviewEngine
from interview_session.errors import (
    EvaluationNotFoundError,
    ScheduleNotFoundError,
    SessionNotActiveError,
    SessionNotFoundError,
)
from interview_session.locks import session_lock, user_lock
from interview_session.models import InterviewMode, InterviewRole, QuestionAnswer, Session, SessionStatus, utcnow
from observability import log_event, span
from prompts import conversation_history, live_answer_prompt, live_introduction, live_question_prompt
from response_normalizer import LiveAnswerScore, clean_text, decode
from storage.evaluations import EvaluationStore
from storage.exchanges import Exchange, ExchangeStore, ExchangeType
from storage.schedules import Schedule, ScheduleStatus, ScheduleStore
from storage.sessions import SessionStore

from .background import ScoringTasks

logger = logging.getLogger(__name__)

Completion = Callable[[str], str]

# Checked in order against the lowercased position title.
ROLE_KEYWORDS = (
    (("data", "analyst"), InterviewRole.DATA_ANALYST),
    (("hr", "human"), InterviewRole.HR),
    (("system", "design"), InterviewRole.SYSTEM_DESIGN),
)


def map_to_interview_role(position: Optional[str]) -> InterviewRole:
    if not position:
        return InterviewRole.SDE
    lowered = position.lower()
    for keywords, role in ROLE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return role
    return InterviewRole.SDE


class LiveInterviewService:  # Schedule-driven interviews with background answer scoring
    def __init__(
        self,
        engine: InterviewEngine,
        sessions: SessionStore,
        schedules: ScheduleStore,
        exchanges: ExchangeStore,
        evaluations: EvaluationStore,
        tasks: ScoringTasks,
        complete: Optional[Completion] = None,
    ) -> None:
        self._engine = engine
        self._sessions = sessions
        self._schedules = schedules
        self._exchanges = exchanges
        self._evaluations = evaluations
        self._tasks = tasks
        self._completion = complete

    def _complete(self, prompt: str) -> str:
        completion = self._completion or get_model(COMPLETION_KEY)
        return completion(prompt)

    def _active_session(self, session_id: str) -> tuple[Session, Schedule]:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        schedule = self._schedules.find_by_session(session_id)
        if schedule is None:
            raise ScheduleNotFoundError(session_id)
        if not session.is_active:
            raise SessionNotActiveError(session_id, session.status.value)
        return session, schedule

    def start_live_session(self, schedule_id: str) -> Session:
        schedule = self._schedules.get(schedule_id)
        if schedule is None:
            raise ScheduleNotFoundError(schedule_id)
        role = map_to_interview_role(schedule.position)
        with user_lock(schedule.user_id):
            self._engine.abandon_active_session(schedule.user_id)
            session = Session(user_id=schedule.user_id, role=role, mode=InterviewMode.VOICE)
            self._sessions.save(session)
            schedule.status = ScheduleStatus.IN_PROGRESS
            schedule.session_id = session.id
            self._schedules.save(schedule)
        log_event(
            "live_session_started",
            session.id,
            user_id=schedule.user_id,
            role=role.value,
            mode=session.mode.value,
            schedule_id=schedule.id,
        )
        return session

    def get_next_question(self, session_id: str, previous_answer: Optional[str] = None) -> str:
        """Record the previous answer, if any, and ask the next question.

        The answer is scored in the background; the question is returned at once.
        """

        with session_lock(session_id):
            session, schedule = self._active_session(session_id)
            logged = self._exchanges.list_for_session(session_id)

            answer_exchange: Optional[Exchange] = None
            if previous_answer and previous_answer.strip() and session.question_answers:
                last = session.question_answers[-1]
                last.answer = previous_answer
                last.answered_at = utcnow()
                answer_exchange = Exchange(
                    session_id=session_id,
                    type=ExchangeType.ANSWER,
                    text=previous_answer,
                    question_number=len(session.question_answers),
                )
                logged.append(answer_exchange)

            question_number = len(session.question_answers) + 1
            if question_number == 1:
                question = live_introduction(schedule.position, schedule.company)
            else:
                prompt = live_question_prompt(
                    company=schedule.company,
                    position=schedule.position,
                    round_type=schedule.round_type,
                    difficulty=schedule.difficulty,
                    question_number=question_number,
                    conversation_history=conversation_history(logged),
                    resume_text=schedule.resume_text,
                )
                with span("live_question", session_id, question_number=question_number):
                    question = clean_text(self._complete(prompt))

            session.question_answers.append(
                QuestionAnswer(question=question, difficulty_level=session.current_difficulty_level)
            )
            if answer_exchange is not None:
                self._exchanges.append(answer_exchange)
                self._tasks.submit(
                    self._score_answer,
                    session_id,
                    session.question_answers[-2].question,
                    answer_exchange.text,
                    schedule.position,
                    schedule.difficulty,
                )
            self._sessions.save(session)
            self._exchanges.append(
                Exchange(
                    session_id=session_id,
                    type=ExchangeType.QUESTION,
                    text=question,
                    question_number=question_number,
                )
            )

        log_event("live_question", session_id, question_number=question_number)
        return question

    def _score_answer(self, session_id: str, question: str, answer: str, position: str, difficulty: str) -> None:
        prompt = live_answer_prompt(question=question, answer=answer, position=position, difficulty=difficulty)
        result = decode(self._complete(prompt), LiveAnswerScore)
        self._exchanges.backfill_answer_score(session_id, answer, result.score, result.feedback)
        log_event("live_answer_scored", session_id, score=result.score)

    def end_live_session(self, session_id: str) -> Evaluation:
        with session_lock(session_id):
            session, schedule = self._active_session(session_id)
            exchanges = self._exchanges.list_for_session(session_id)
            evaluation = evaluate_live_session(session, schedule, exchanges, self._complete)
            self._evaluations.save(evaluation)

            finished = utcnow()
            session.status = SessionStatus.COMPLETED
            session.completed_at = finished
            self._sessions.save(session)

            schedule.status = ScheduleStatus.COMPLETED
            schedule.completed_at = finished
            schedule.questions_asked = len(session.question_answers)
            schedule.average_score = average_question_score(evaluation)
            self._schedules.save(schedule)

        log_event(
            "live_session_ended",
            session_id,
            score=evaluation.overall_score,
            decision=evaluation.decision.value,
        )
        return evaluation

    def get_evaluation_report(self, session_id: str) -> Evaluation:
        evaluation = self._evaluations.get(session_id)
        if evaluation is None:
            raise EvaluationNotFoundError(session_id)
        return evaluation

    def list_evaluations(self, user_id: str) -> List[Evaluation]:
        return self._evaluations.list_for_user(user_id)

    def delete_evaluation(self, session_id: str) -> None:
        """Administrative removal of an evaluation together with its session."""

        with session_lock(session_id):
            if not self._evaluations.delete(session_id):
                raise EvaluationNotFoundError(session_id)
            self._exchanges.delete_for_session(session_id)
            self._sessions.delete(session_id)
        logger.info("Deleted evaluation and session %s", session_id)


__all__ = ["LiveInterviewService", "map_to_interview_role"]
