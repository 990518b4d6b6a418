"""Tests for AI reply cleanup and typed decoding."""
from __future__ import annotations

import pytest

from response_normalizer import (
    AnswerAssessment,
    FinalReport,
    LiveAnswerScore,
    MalformedResponseError,
    SessionFeedback,
    clean_text,
    coerce_string_list,
    decode,
    load_json,
    parse_string_list,
    strip_code_fences,
)


def test_strip_code_fences_variants():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n[1, 2]\n```') == "[1, 2]"
    assert strip_code_fences("  plain  ") == "plain"
    assert strip_code_fences(None) == ""


def test_load_json_tolerates_surrounding_prose():
    assert load_json('Here you go: {"score": 4} Hope that helps!') == {"score": 4}
    assert load_json("Sure!\n[\"a\", \"b\"]") == ["a", "b"]


def test_load_json_raises_on_garbage():
    with pytest.raises(MalformedResponseError):
        load_json("no json here")


def test_string_list_accepts_object_items_by_field_priority():
    items = [
        "Plain",
        {"description": "ignored", "name": "Named"},
        {"skill": "Python"},
        {"other": 42},
        {"nested": {"deep": True}},
        7,
    ]
    assert coerce_string_list(items) == ["Plain", "Named", "Python", "42", "7"]


def test_string_list_non_list_yields_empty():
    assert coerce_string_list({"name": "x"}) == []
    assert coerce_string_list(None) == []
    assert parse_string_list("not json at all") == []
    assert parse_string_list('```json\n["Google", {"company": "Meta"}]\n```') == ["Google", "Meta"]


def test_clean_text_strips_fences_and_quotes():
    assert clean_text('"What is a hash map?"') == "What is a hash map?"
    assert clean_text("```\nExplain CAP.\n```") == "Explain CAP."


def test_decode_answer_assessment_aliases_and_defaults():
    reply = decode(
        '{"score": 6.5, "confidenceLevel": 0.4, "communicationClarity": 7, '
        '"shouldIncreaseDifficulty": true, "sentiment": "negative", "detectedEmotions": "calm"}',
        AnswerAssessment,
    )
    assert reply.score == 6.5
    assert reply.sentiment == "NEGATIVE"
    assert reply.detected_emotions == []
    assert reply.technical_accuracy is None
    assert reply.should_increase_difficulty is True


def test_decode_missing_required_field_is_malformed():
    with pytest.raises(MalformedResponseError):
        decode('{"score": 5}', AnswerAssessment)


def test_decode_out_of_range_score_is_malformed():
    with pytest.raises(MalformedResponseError):
        decode('{"score": 11, "feedback": "x"}', LiveAnswerScore)


def test_live_score_rounds_floats():
    assert decode('{"score": 7.6, "feedback": "ok"}', LiveAnswerScore).score == 8


def test_final_report_normalizes_decision_and_lists():
    report = decode(
        '{"overallScore": 64.4, "decision": "waitlisted", "strengths": [{"name": "Clarity"}], '
        '"weaknesses": "none", "improvements": ["STAR"], "detailedFeedback": "ok"}',
        FinalReport,
    )
    assert report.overall_score == 64
    assert report.decision == "WAITLISTED"
    assert report.strengths == ["Clarity"]
    assert report.weaknesses == []


def test_session_feedback_requires_object():
    with pytest.raises(MalformedResponseError):
        decode('["not", "an", "object"]', SessionFeedback)
