"""Normalization of raw AI completion text into typed replies."""
from .normalizer import (
    MalformedResponseError,
    STRING_FIELD_PRIORITY,
    clean_text,
    coerce_string_list,
    decode,
    load_json,
    parse_object,
    parse_string_list,
    strip_code_fences,
)
from .replies import AnswerAssessment, FinalReport, GeneratedQuestion, LiveAnswerScore, SessionFeedback

__all__ = [
    "AnswerAssessment",
    "FinalReport",
    "GeneratedQuestion",
    "LiveAnswerScore",
    "MalformedResponseError",
    "STRING_FIELD_PRIORITY",
    "SessionFeedback",
    "clean_text",
    "coerce_string_list",
    "decode",
    "load_json",
    "parse_object",
    "parse_string_list",
    "strip_code_fences",
]
