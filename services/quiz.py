# services/quiz.py
import json
import logging
import re

from itsdangerous import BadData, URLSafeTimedSerializer

from services.errors import QuizParseError, ServiceError

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 10
TOKEN_SALT = "mcq-answer-key"
TOKEN_MAX_AGE = 6 * 3600

_FENCE_RE = re.compile(r"```(?:json)?")


def build_prompt(topic, count):
    return (
        f'Generate {count} multiple choice questions about "{topic}" '
        "appropriate for Grade 9 or 10 curriculum.\n"
        "Return strictly a JSON array of objects.\n"
        "Each object must have:\n"
        '- "question" (string)\n'
        '- "options" (array of 4 strings)\n'
        '- "correctAnswer" (string, must match one of the options exactly)\n'
        '- "explanation" (string, brief explanation of why the answer is correct)\n\n'
        "Do not include markdown formatting (like ```json). Just the raw JSON string."
    )


def strip_fences(text):
    return _FENCE_RE.sub("", text or "").strip()


def valid_question(item):
    if not isinstance(item, dict):
        return False
    options = item.get("options")
    return (
        isinstance(item.get("question"), str)
        and isinstance(options, list)
        and len(options) >= 2
        and item.get("correctAnswer") in options
    )


def parse_mcq_response(text):
    """Turn raw model output into a list of question dicts."""
    clean = strip_fences(text)
    try:
        parsed = json.loads(clean)
    except ValueError as exc:
        logger.error("JSON Parse Error: %s; text=%r", exc, clean[:500])
        raise QuizParseError(
            "Failed to parse the generated MCQs. Please try again with a different topic wording."
        ) from exc

    if not isinstance(parsed, list) or not parsed or not all(valid_question(q) for q in parsed):
        logger.error("Invalid MCQ format received: %r", clean[:500])
        raise QuizParseError(
            "Failed to parse the generated MCQs. Please try again with a different topic wording."
        )

    return [
        {
            "question": q["question"],
            "options": [str(o) for o in q["options"]],
            "correctAnswer": q["correctAnswer"],
            "explanation": q.get("explanation") or "",
        }
        for q in parsed
    ]


def sign_answer_key(secret_key, topic, questions):
    """Sign the topic and correct answers so /submit can grade without trusting the client."""
    serializer = URLSafeTimedSerializer(secret_key)
    return serializer.dumps(
        {"topic": topic, "answers": [q["correctAnswer"] for q in questions]},
        salt=TOKEN_SALT,
    )


def load_answer_key(secret_key, token, max_age=TOKEN_MAX_AGE):
    """Return (topic, correct answers) from a token made by sign_answer_key."""
    serializer = URLSafeTimedSerializer(secret_key)
    try:
        data = serializer.loads(token or "", salt=TOKEN_SALT, max_age=max_age)
    except BadData as exc:
        # covers expired and tampered tokens
        logger.warning("Rejected quiz token: %s", exc)
        raise ServiceError("This quiz has expired or is invalid. Please generate a new one.") from exc

    answers = data.get("answers") if isinstance(data, dict) else None
    if not isinstance(answers, list) or not answers:
        raise ServiceError("This quiz has expired or is invalid. Please generate a new one.")
    return data.get("topic") or "", answers


def grade_answers(answer_key, answers):
    """Count answers equal to the correct option.

    ``answer_key`` lists the correct option per question and ``answers`` maps
    question index (int or str) to the chosen option.
    Returns (score, per-question correctness list).
    """
    answers = {str(k): v for k, v in (answers or {}).items()}
    results = [answers.get(str(i)) == correct for i, correct in enumerate(answer_key)]
    return sum(results), results


def percentage(score, total):
    if not total:
        return 0
    # halves round up
    return int(score * 100 / total + 0.5)
