"""Response schema and validation for generated questions.

The model is asked for structured output, but its reply is still treated as
untrusted: it is parsed into plain data first and every entry is checked
before being promoted to :class:`~blitz_quiz.models.Question`. One bad entry
rejects the whole batch.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List

from ..models import OPTION_COUNT, Question

__all__ = [
    "SCHEMA_NAME",
    "GenerationError",
    "response_schema",
    "response_format",
    "parse_questions",
    "validate_question",
]


SCHEMA_NAME = "quiz_questions"

_FENCE_RE = re.compile(r"```(?:json)?\s*(.+?)```", re.DOTALL)


class GenerationError(RuntimeError):
    """Raised when quiz generation fails or returns unusable data."""


def response_schema() -> Dict[str, Any]:
    """Return the JSON schema the model's reply must satisfy.

    Strict structured outputs need an object at the root, so the question
    array sits under ``questions``.
    """

    item = {
        "type": "object",
        "properties": {
            "question": {"type": "string"},
            "options": {
                "type": "array",
                "items": {"type": "string"},
                "description": f"Exactly {OPTION_COUNT} answer options.",
            },
            "answer": {
                "type": "integer",
                "description": (
                    "The zero-based index (0, 1, 2, or 3) of the correct "
                    "option."
                ),
            },
        },
        "required": ["question", "options", "answer"],
        "additionalProperties": False,
    }
    return {
        "type": "object",
        "properties": {"questions": {"type": "array", "items": item}},
        "required": ["questions"],
        "additionalProperties": False,
    }


def response_format() -> Dict[str, Any]:
    """Return the ``response_format`` argument for chat completions."""

    return {
        "type": "json_schema",
        "json_schema": {
            "name": SCHEMA_NAME,
            "strict": True,
            "schema": response_schema(),
        },
    }


def _load_payload(content: str) -> Any:
    text = (content or "").strip()
    if not text:
        raise GenerationError("Generation service returned an empty response.")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        fenced = _FENCE_RE.search(text)
        if not fenced:
            raise GenerationError(
                f"Generation response is not valid JSON: {exc}"
            ) from exc
        text = fenced.group(1).strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise GenerationError(
            f"Generation response is not valid JSON: {exc}"
        ) from exc


def _question_entries(payload: Any) -> List[Any]:
    if isinstance(payload, dict):
        payload = payload.get("questions")
    if not isinstance(payload, list):
        raise GenerationError(
            "Generation response must be a JSON array of questions."
        )
    return payload


def validate_question(entry: Any, index: int = 0) -> Question:
    """Validate one decoded entry and return it as a :class:`Question`.

    Raises GenerationError naming the entry index and the broken field.
    """

    where = f"question {index}"
    if not isinstance(entry, dict):
        raise GenerationError(f"{where}: expected an object.")
    for key in ("question", "options", "answer"):
        if key not in entry:
            raise GenerationError(f"{where}: missing required field '{key}'.")

    text = entry["question"]
    if not isinstance(text, str) or not text.strip():
        raise GenerationError(
            f"{where}: 'question' must be a non-empty string."
        )

    options = entry["options"]
    if not isinstance(options, list):
        raise GenerationError(f"{where}: 'options' must be an array.")
    if len(options) != OPTION_COUNT:
        raise GenerationError(
            f"{where}: expected {OPTION_COUNT} options, got {len(options)}."
        )
    if not all(isinstance(opt, str) and opt.strip() for opt in options):
        raise GenerationError(
            f"{where}: every option must be a non-empty string."
        )

    answer = entry["answer"]
    # bool is an int subclass; JSON true/false is not an index.
    if isinstance(answer, bool) or not isinstance(answer, int):
        raise GenerationError(f"{where}: 'answer' must be an integer.")
    if not 0 <= answer < len(options):
        raise GenerationError(
            f"{where}: 'answer' {answer} is outside 0..{len(options) - 1}."
        )

    return Question(
        question=text.strip(),
        options=tuple(opt.strip() for opt in options),
        answer=answer,
    )


def parse_questions(content: str) -> List[Question]:
    """Decode the raw model reply into validated questions."""

    entries = _question_entries(_load_payload(content))
    if not entries:
        raise GenerationError("Generation response contained no questions.")
    return [validate_question(entry, idx) for idx, entry in enumerate(entries)]
