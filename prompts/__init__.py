"""Prompt composition for interview question generation and evaluation."""
from .composer import (
    FINAL_REPORT_TEMPLATE,
    INTRODUCTION_QUESTION,
    LIVE_QUESTION_TEMPLATE,
    RESUME_CONTEXT_CHARS,
    answer_evaluation_prompt,
    conversation_history,
    final_report_prompt,
    live_answer_prompt,
    live_introduction,
    live_question_prompt,
    qa_history_context,
    question_prompt,
    render_transcript,
    session_feedback_prompt,
    suggest_companies_prompt,
    suggest_positions_prompt,
    suggest_roles_prompt,
    truncate_resume,
)

__all__ = [
    "FINAL_REPORT_TEMPLATE",
    "INTRODUCTION_QUESTION",
    "LIVE_QUESTION_TEMPLATE",
    "RESUME_CONTEXT_CHARS",
    "answer_evaluation_prompt",
    "conversation_history",
    "final_report_prompt",
    "live_answer_prompt",
    "live_introduction",
    "live_question_prompt",
    "qa_history_context",
    "question_prompt",
    "render_transcript",
    "session_feedback_prompt",
    "suggest_companies_prompt",
    "suggest_positions_prompt",
    "suggest_roles_prompt",
    "truncate_resume",
]
