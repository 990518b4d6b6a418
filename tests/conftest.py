import json
import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

from storage.migrate import migrate
from config.settings import settings
from config.registry import COMPLETION_KEY, bind_model


# Prompt markers, checked in order, mapped to the reply kind they request.
PROMPT_KINDS = (
    ("Evaluate this interview answer", "answer_evaluation"),
    ("Generate comprehensive interview feedback", "session_feedback"),
    ("interview question for difficulty level", "question"),
    ("You are evaluating an interview answer", "live_answer"),
    ("final evaluation report", "final_report"),
    ("You are an expert interviewer", "live_question"),
    ("relevant company names", "companies"),
    ("relevant job roles", "roles"),
    ("specific job positions", "positions"),
)


def assessment(score=7, *, increase=False, clarity=8, confidence=0.8, **extra):
    reply = {
        "score": score,
        "feedback": f"Scored {score}",
        "sentiment": "positive",
        "confidenceLevel": confidence,
        "fillerWordCount": 1,
        "detectedEmotions": ["calm"],
        "technicalAccuracy": score,
        "communicationClarity": clarity,
        "shouldIncreaseDifficulty": increase,
    }
    reply.update(extra)
    return json.dumps(reply)


class FakeCompletion:
    """Scripted stand-in for the AI gateway keyed on prompt text.

    ``replies[kind]`` may be a string, a list consumed in order, an exception
    instance to raise, or a callable receiving the prompt.
    """

    def __init__(self):
        self.prompts = []
        self.question_count = 0
        self.replies = {
            "answer_evaluation": assessment(),
            "session_feedback": json.dumps(
                {
                    "overallReadiness": 72,
                    "detailedFeedback": "Solid fundamentals.",
                    "strengths": ["Clear structure", {"name": "Depth"}],
                    "improvements": ["More metrics"],
                }
            ),
            "question": self._next_question,
            "live_answer": '```json\n{"score": 8, "feedback": "Good example"}\n```',
            "final_report": json.dumps(
                {
                    "overallScore": 82,
                    "decision": "SELECTED",
                    "strengths": ["Communication"],
                    "weaknesses": ["Depth on scaling"],
                    "improvements": ["Quantify impact"],
                    "detailedFeedback": "Strong candidate overall.",
                }
            ),
            "live_question": '"Tell me about a project you are proud of."',
            "companies": '["Stripe", {"company": "Shopify"}]',
            "roles": '["Backend Engineer"]',
            "positions": "[]",
        }

    def _next_question(self, prompt):
        self.question_count += 1
        return json.dumps(
            {
                "question": f"Generated question {self.question_count}",
                "expectedKeyPoints": ["point a", "point b"],
            }
        )

    def kind_of(self, prompt):
        for marker, kind in PROMPT_KINDS:
            if marker in prompt:
                return kind
        raise AssertionError(f"Unexpected prompt: {prompt[:80]}")

    def calls(self, kind):
        return [prompt for prompt in self.prompts if self.kind_of(prompt) == kind]

    def __call__(self, prompt):
        self.prompts.append(prompt)
        reply = self.replies[self.kind_of(prompt)]
        if isinstance(reply, list):
            reply = reply.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield Path(db_path)
    finally:
        td.cleanup()


@pytest.fixture
def fake_ai():
    fake = FakeCompletion()
    bind_model(COMPLETION_KEY, fake)
    return fake
