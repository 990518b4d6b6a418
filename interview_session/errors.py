"""Error kinds raised by the interview engines."""
from __future__ import annotations


class NotFoundError(LookupError):  # Base for missing records
    pass


class SessionNotFoundError(NotFoundError):  # Raised when session missing
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Interview session not found: {session_id}")
        self.session_id = session_id


class ScheduleNotFoundError(NotFoundError):  # Raised when schedule missing
    def __init__(self, ref: str) -> None:
        super().__init__(f"Schedule not found: {ref}")
        self.ref = ref


class EvaluationNotFoundError(NotFoundError):  # Raised when evaluation missing
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Evaluation not found: {session_id}")
        self.session_id = session_id


class InvalidStateError(RuntimeError):  # Base for illegal transitions
    pass


class SessionNotActiveError(InvalidStateError):  # Raised when session is no longer in progress
    def __init__(self, session_id: str, status: str) -> None:
        super().__init__(f"Interview session {session_id} is not active (status={status})")
        self.session_id = session_id
        self.status = status


__all__ = [
    "EvaluationNotFoundError",
    "InvalidStateError",
    "NotFoundError",
    "ScheduleNotFoundError",
    "SessionNotActiveError",
    "SessionNotFoundError",
]
