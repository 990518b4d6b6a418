"""Text-mode interview state machine.

A session starts with a fixed introduction question. Each submitted answer is
scored by the AI, folded into the running metrics and used to step the difficulty
before the next question is generated. After ``MAX_QUESTIONS`` questions the
session is completed and the user's readiness is updated.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from config.registry import COMPLETION_KEY, get_model
from interview_evaluation import synthesize_session_feedback
from observability import log_event, span
from prompts import INTRODUCTION_QUESTION, answer_evaluation_prompt, qa_history_context, question_prompt
from response_normalizer import AnswerAssessment, GeneratedQuestion, decode
from storage.sessions import SessionStore
from storage.users import UserProfileStore

from .errors import InvalidStateError, SessionNotActiveError, SessionNotFoundError
from .locks import session_lock, user_lock
from .metrics import MIN_DIFFICULTY, next_difficulty, update_running_metrics
from .models import (
    InterviewMode,
    InterviewRole,
    QuestionAnswer,
    SentimentAnalysis,
    Session,
    SessionStatus,
    utcnow,
)

logger = logging.getLogger(__name__)

Completion = Callable[[str], str]

MAX_QUESTIONS = 10


class InterviewEngine:  # Drives text-mode sessions through question, answer and completion
    def __init__(
        self,
        sessions: SessionStore,
        users: UserProfileStore,
        complete: Optional[Completion] = None,
    ) -> None:
        self._sessions = sessions
        self._users = users
        self._completion = complete

    def _complete(self, prompt: str) -> str:
        completion = self._completion or get_model(COMPLETION_KEY)
        return completion(prompt)

    def _load(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def abandon_active_session(self, user_id: str) -> Optional[Session]:
        """Mark the user's in-progress session, if any, as abandoned."""

        with user_lock(user_id):
            active = self._sessions.find_active(user_id)
            if active is None:
                return None
            with session_lock(active.id):
                # Re-read under the lock; an in-flight answer may have advanced or completed it.
                active = self._sessions.get(active.id)
                if active is None or not active.is_active:
                    return None
                active.status = SessionStatus.ABANDONED
                self._sessions.save(active)
            log_event("session_abandoned", active.id, user_id=user_id, mode=active.mode.value)
            return active

    def start_session(
        self,
        user_id: str,
        role: InterviewRole,
        mode: InterviewMode = InterviewMode.TEXT,
    ) -> Session:
        with user_lock(user_id):
            self.abandon_active_session(user_id)
            session = Session(
                user_id=user_id,
                role=role,
                mode=mode,
                current_difficulty_level=MIN_DIFFICULTY,
                question_answers=[QuestionAnswer(question=INTRODUCTION_QUESTION, difficulty_level=MIN_DIFFICULTY)],
            )
            self._sessions.save(session)
        log_event("session_started", session.id, user_id=user_id, role=role.value, mode=mode.value)
        return session

    def submit_answer(self, session_id: str, answer_text: str) -> Session:
        """Score the pending question's answer and advance the session.

        Nothing is persisted unless every step, including the AI calls, succeeds.
        """

        with session_lock(session_id):
            stored = self._load(session_id)
            if not stored.is_active:
                raise SessionNotActiveError(session_id, stored.status.value)
            session = stored.model_copy(deep=True)
            qa = session.current_question()
            if qa is None or qa.answered:
                raise InvalidStateError(f"Interview session {session_id} has no pending question")

            qa.answer = answer_text
            qa.answered_at = utcnow()
            with span("evaluate_answer", session_id):
                reply = self._complete(answer_evaluation_prompt(session.role.value, qa.question, answer_text))
            assessment = decode(reply, AnswerAssessment)
            qa.score = assessment.score
            qa.feedback = assessment.feedback
            qa.technical_accuracy = assessment.technical_accuracy
            qa.communication_clarity = assessment.communication_clarity
            qa.sentiment = SentimentAnalysis(
                overall_sentiment=assessment.sentiment,
                confidence_level=assessment.confidence_level,
                filler_word_count=assessment.filler_word_count,
                detected_emotions=assessment.detected_emotions,
            )
            update_running_metrics(session, assessment.communication_clarity)

            previous_difficulty = session.current_difficulty_level
            session.current_difficulty_level = next_difficulty(
                previous_difficulty,
                increase=assessment.should_increase_difficulty,
                score=assessment.score,
            )

            if len(session.question_answers) < MAX_QUESTIONS:
                context = qa_history_context(session.answered())
                with span("generate_question", session_id):
                    reply = self._complete(
                        question_prompt(session.role.value, session.current_difficulty_level, context)
                    )
                generated = decode(reply, GeneratedQuestion)
                session.question_answers.append(
                    QuestionAnswer(
                        question=generated.question,
                        difficulty_level=session.current_difficulty_level,
                        expected_key_points=generated.expected_key_points,
                    )
                )
            else:
                self._finish(session)

            self._sessions.save(session)

        log_event(
            "answer_scored",
            session_id,
            question_number=len(session.answered()),
            score=assessment.score,
            difficulty=session.current_difficulty_level,
        )
        if session.current_difficulty_level != previous_difficulty:
            log_event(
                "difficulty_changed",
                session_id,
                difficulty=session.current_difficulty_level,
                previous=previous_difficulty,
            )
        if session.status == SessionStatus.COMPLETED:
            self._after_completion(session)
        return session

    def _finish(self, session: Session) -> None:
        with span("session_feedback", session.id):
            feedback = synthesize_session_feedback(session, self._complete)
        session.overall_readiness = feedback.overall_readiness
        session.detailed_feedback = feedback.detailed_feedback
        session.strengths = feedback.strengths
        session.improvements = feedback.improvements
        session.status = SessionStatus.COMPLETED
        session.completed_at = utcnow()

    def _after_completion(self, session: Session) -> None:
        self._users.update_readiness(session.user_id, session.overall_readiness)
        log_event(
            "session_completed",
            session.id,
            user_id=session.user_id,
            score=round(session.overall_readiness, 1),
            status=session.status.value,
        )

    def complete_session(self, session_id: str) -> Session:
        """Synthesize end-of-session feedback; re-running it re-synthesizes.

        Abandoned sessions cannot be completed.
        """

        with session_lock(session_id):
            session = self._load(session_id).model_copy(deep=True)
            if session.status == SessionStatus.ABANDONED:
                raise SessionNotActiveError(session_id, session.status.value)
            self._finish(session)
            self._sessions.save(session)
        self._after_completion(session)
        return session

    def get_session(self, session_id: str) -> Session:
        return self._load(session_id)

    def history(self, user_id: str) -> List[Session]:
        return self._sessions.list_for_user(user_id)

    def active_session(self, user_id: str) -> Optional[Session]:
        return self._sessions.find_active(user_id)


__all__ = ["MAX_QUESTIONS", "InterviewEngine"]
