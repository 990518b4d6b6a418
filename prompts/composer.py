from __future__ import annotations  # Prompt composition for question generation and scoring

from textwrap import dedent
from typing import Dict, List, Optional, Sequence

from langchain_core.prompts import PromptTemplate

from interview_session.models import QuestionAnswer
from storage.exchanges import Exchange, ExchangeType

RESUME_CONTEXT_CHARS = 1000

INTRODUCTION_QUESTION = (
    "Let's start with an introduction. Could you please tell me about your background, "
    "your experience so far, and what brings you to this interview?"
)

LIVE_DIFFICULTY_GUIDANCE: Dict[str, List[str]] = {
    "EASY": [
        "Ask fundamental concepts and basic scenarios",
        "Focus on understanding core principles",
        "Keep questions straightforward and clear",
    ],
    "MEDIUM": [
        "Ask about practical applications and real-world scenarios",
        "Include some problem-solving elements",
        "Test deeper understanding of concepts",
    ],
    "HARD": [
        "Ask complex, multi-layered questions",
        "Include advanced concepts and edge cases",
        "Test critical thinking and problem-solving skills",
    ],
}

ROUND_TYPE_GUIDANCE: Dict[str, List[str]] = {
    "HR": [
        "Focus on behavioral questions, cultural fit, and soft skills",
        "Ask about past experiences, teamwork, and conflict resolution",
        "Explore motivation, career goals, and company alignment",
    ],
    "CODING": [
        "Ask about algorithms, data structures, and coding problems",
        "Include questions about code optimization and complexity",
        "Test problem-solving and technical implementation skills",
    ],
    "COMMUNICATION": [
        "Assess clarity of expression and articulation",
        "Ask about explaining complex topics to non-technical audiences",
        "Test presentation and interpersonal skills",
    ],
    "PROBLEM_SOLVING": [
        "Present analytical and logical reasoning challenges",
        "Ask about approach to solving complex problems",
        "Test critical thinking and structured problem-solving",
    ],
    "APTITUDE": [
        "Ask quantitative and logical reasoning questions",
        "Include puzzles, patterns, and analytical problems",
        "Test numerical ability and logical thinking",
    ],
}


QUESTION_TEMPLATE = PromptTemplate.from_template(
    dedent(
        """
        Generate a {role} interview question for difficulty level {difficulty} (1=easy, 5=very hard).

        Previous context: {context}

        Return a JSON object with:
        - question: the interview question
        - expectedKeyPoints: array of key points expected in a good answer

        Return ONLY valid JSON, no additional text.
        """
    ).strip()
)

ANSWER_EVALUATION_TEMPLATE = PromptTemplate.from_template(
    dedent(
        """
        Evaluate this interview answer for a {role} position.

        Question: {question}
        Answer: {answer}

        Provide evaluation in JSON format with:
        - score: number between 0-10
        - feedback: detailed feedback on the answer
        - sentiment: overall sentiment (POSITIVE, NEUTRAL, NEGATIVE)
        - confidenceLevel: number between 0-1 indicating answer confidence
        - fillerWordCount: count of filler words (um, uh, like, etc.)
        - detectedEmotions: array of emotions detected
        - technicalAccuracy: score 0-10 for technical correctness
        - communicationClarity: score 0-10 for clarity
        - shouldIncreaseDifficulty: boolean indicating if next question should be harder

        Return ONLY valid JSON, no additional text.
        """
    ).strip()
)

SESSION_FEEDBACK_TEMPLATE = PromptTemplate.from_template(
    dedent(
        """
        Generate comprehensive interview feedback for a {role} interview.

        Session data: {session_data}

        Provide feedback in JSON format with:
        - overallReadiness: percentage 0-100
        - strengths: array of strengths demonstrated
        - improvements: array of areas for improvement
        - detailedFeedback: comprehensive feedback text

        Return ONLY valid JSON, no additional text.
        """
    ).strip()
)

LIVE_ANSWER_TEMPLATE = PromptTemplate.from_template(
    dedent(
        """
        You are evaluating an interview answer for the position: {position} (Difficulty: {difficulty})

        Question: {question}

        Candidate's Answer: {answer}

        Provide a JSON evaluation with the following structure:
        {{
          "score": <number 0-10>,
          "feedback": "<brief constructive feedback>"
        }}

        Scoring criteria:
        - 9-10: Excellent, comprehensive answer
        - 7-8: Good answer with minor gaps
        - 5-6: Acceptable but needs improvement
        - 3-4: Weak answer, missing key points
        - 0-2: Poor or irrelevant answer

        Return ONLY the JSON object, nothing else.
        """
    ).strip()
)

FINAL_REPORT_TEMPLATE = PromptTemplate.from_template(
    dedent(
        """
        You are generating a final evaluation report for an interview.

        Interview Details:
        - Company: {company}
        - Position: {position}
        - Round: {round_type}
        - Difficulty: {difficulty}
        - Questions Asked: {question_count}

        Full Interview Transcript:
        {transcript}

        Generate a comprehensive evaluation report in JSON format:
        {{
          "overallScore": <number 0-100>,
          "decision": "<SELECTED|REJECTED|WAITLISTED>",
          "strengths": ["strength1", "strength2", "strength3"],
          "weaknesses": ["weakness1", "weakness2"],
          "improvements": ["suggestion1", "suggestion2", "suggestion3"],
          "detailedFeedback": "<2-3 sentence overall assessment>"
        }}

        Decision criteria:
        - SELECTED: Overall score >= 70
        - WAITLISTED: Overall score 50-69
        - REJECTED: Overall score < 50

        Return ONLY the JSON object, nothing else.
        """
    ).strip()
)


def _bullets(lines: Sequence[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def live_introduction(position: str, company: str) -> str:  # Fixed opening for live interviews
    return (
        f"Hello! Welcome to your interview for the {position} position at {company}. "
        "Before we begin, I'd like to get to know you better. "
        "Could you please introduce yourself and tell me a bit about your background?"
    )


def qa_history_context(question_answers: Sequence[QuestionAnswer]) -> str:  # Answered Q/A pairs as prompt context
    lines = ["Previous questions and answers:"]
    for qa in question_answers:
        if qa.answer is None:
            continue
        score = "n/a" if qa.score is None else f"{qa.score:g}"
        lines.append(f"Q: {qa.question}")
        lines.append(f"A: {qa.answer}")
        lines.append(f"Score: {score}/10")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def question_prompt(role: str, difficulty: int, context: Optional[str]) -> str:
    return QUESTION_TEMPLATE.format(role=role, difficulty=difficulty, context=context if context else "None")


def answer_evaluation_prompt(role: str, question: str, answer: str) -> str:
    return ANSWER_EVALUATION_TEMPLATE.format(role=role, question=question, answer=answer)


def session_feedback_prompt(role: str, session_data: str) -> str:
    return SESSION_FEEDBACK_TEMPLATE.format(role=role, session_data=session_data)


def truncate_resume(resume_text: str, limit: int = RESUME_CONTEXT_CHARS) -> str:
    return resume_text[:limit] + "..." if len(resume_text) > limit else resume_text


LIVE_QUESTION_TEMPLATE = PromptTemplate.from_template(
    dedent(
        """
        You are an expert interviewer conducting a {round_type} interview for {position} at {company}.

        DIFFICULTY LEVEL: {difficulty}{difficulty_guidance}

        ROUND TYPE: {round_type}{round_guidance}{resume_section}{history_section}

        This is question #{question_number} of the interview.

        GENERATE ONE INTERVIEW QUESTION that:
        {requirements}

        IMPORTANT RULES:
        - Return ONLY the question text, nothing else
        - No numbering, no labels, no additional formatting
        - Make it conversational and natural
        - Ensure it's different from previous questions
        """
    ).strip()
)

RESUME_USAGE = [
    "Ask about specific projects, technologies, or experiences mentioned",
    "Probe deeper into their claimed skills and achievements",
    "Make questions relevant to their background",
]

QUESTION_REQUIREMENTS = [
    "Is highly relevant to the position, company, and round type",
    "Matches the specified difficulty level",
    "Builds naturally on previous questions (if any)",
    "Is specific, clear, and professional",
    "Allows the candidate to demonstrate their knowledge and skills",
]


def _guidance(table: Dict[str, List[str]], key: str) -> str:
    lines = table.get(key.upper())
    return "\n" + _bullets(lines) if lines else ""


def live_question_prompt(
    *,
    company: str,
    position: str,
    round_type: str,
    difficulty: str,
    question_number: int,
    conversation_history: str,
    resume_text: Optional[str] = None,
) -> str:
    """Prompt for the next live question, grounded in round, difficulty, resume and history."""

    has_resume = bool(resume_text and resume_text.strip())
    resume_section = ""
    requirements = list(QUESTION_REQUIREMENTS)
    if has_resume:
        resume_section = (
            "\n\nCANDIDATE'S RESUME SUMMARY:\n"
            + truncate_resume(resume_text or "")
            + "\n\nIMPORTANT: Use the resume information to:\n"
            + _bullets(RESUME_USAGE)
        )
        requirements.append("References or relates to the candidate's resume when appropriate")
    history_section = "\n\nPREVIOUS CONVERSATION:\n" + conversation_history if conversation_history else ""

    return LIVE_QUESTION_TEMPLATE.format(
        company=company,
        position=position,
        round_type=round_type,
        difficulty=difficulty,
        difficulty_guidance=_guidance(LIVE_DIFFICULTY_GUIDANCE, difficulty),
        round_guidance=_guidance(ROUND_TYPE_GUIDANCE, round_type),
        resume_section=resume_section,
        history_section=history_section,
        question_number=question_number,
        requirements="\n".join(f"{index}. {line}" for index, line in enumerate(requirements, start=1)),
    )


def live_answer_prompt(*, question: str, answer: str, position: str, difficulty: str) -> str:
    return LIVE_ANSWER_TEMPLATE.format(question=question, answer=answer, position=position, difficulty=difficulty)


def final_report_prompt(
    *,
    company: str,
    position: str,
    round_type: str,
    difficulty: str,
    transcript: str,
    question_count: int,
) -> str:
    return FINAL_REPORT_TEMPLATE.format(
        company=company,
        position=position,
        round_type=round_type,
        difficulty=difficulty,
        question_count=question_count,
        transcript=transcript,
    )


def conversation_history(exchanges: Sequence[Exchange]) -> str:  # Q:/A: lines in timestamp order
    return "\n".join(
        ("Q: " if exchange.type == ExchangeType.QUESTION else "A: ") + exchange.text
        for exchange in exchanges
    )


def render_transcript(exchanges: Sequence[Exchange]) -> str:  # Timestamped transcript for the final report
    return "\n".join(
        f"[{exchange.timestamp.isoformat()}] {exchange.type.value.upper()}: {exchange.text}"
        for exchange in exchanges
    )


SUGGEST_COMPANIES_TEMPLATE = PromptTemplate.from_template(
    "Based on the query '{query}', suggest 10 relevant company names from around the world. "
    "Include tech companies, startups, and well-known corporations. "
    "Return ONLY a JSON array of company names, nothing else. "
    'Format: ["Company1", "Company2", ...]'
)

SUGGEST_ROLES_TEMPLATE = PromptTemplate.from_template(
    "Based on the query '{query}' for company '{company}', suggest 10 relevant job roles. "
    "Include technical roles, management roles, and entry-level positions. "
    "Return ONLY a JSON array of role names, nothing else. "
    'Format: ["Role1", "Role2", ...]'
)

SUGGEST_POSITIONS_TEMPLATE = PromptTemplate.from_template(
    "Based on the role '{role}' at company '{company}', "
    "suggest 10 specific job positions/titles. "
    "Include variations with different seniority levels (Junior, Senior, Lead, etc.). "
    "Return ONLY a JSON array of position titles, nothing else. "
    'Format: ["Position1", "Position2", ...]'
)


def suggest_companies_prompt(query: str) -> str:
    return SUGGEST_COMPANIES_TEMPLATE.format(query=query)


def suggest_roles_prompt(query: str, company: Optional[str]) -> str:
    return SUGGEST_ROLES_TEMPLATE.format(query=query, company=company or "any company")


def suggest_positions_prompt(role: Optional[str], company: Optional[str]) -> str:
    return SUGGEST_POSITIONS_TEMPLATE.format(role=role or "any role", company=company or "any company")
