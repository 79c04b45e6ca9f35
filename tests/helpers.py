"""Shared builders and stubs for the test-suite."""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Optional

from blitz_quiz.models import Question, QuizModule


class StubGenerationClient:
    """Records requests and replays queued raw responses.

    ``side_effect`` may be an async callable receiving the recorded call; its
    return value (or raised exception) replaces the queued response.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.responses: list[str] = []
        self.side_effect: Optional[
            Callable[[dict[str, Any]], Awaitable[str]]
        ] = None

    def queue_response(self, content: str) -> None:
        self.responses.append(content)

    def queue_questions(self, questions: list[dict[str, Any]]) -> None:
        self.responses.append(json.dumps({"questions": questions}))

    async def complete(self, *, content, response_format) -> str:
        call = {"content": list(content), "response_format": response_format}
        self.calls.append(call)
        if self.side_effect is not None:
            return await self.side_effect(call)
        return self.responses.pop(0) if self.responses else ""


def make_question_payload(n: int) -> list[dict[str, Any]]:
    return [
        {
            "question": f"Question {idx}?",
            "options": ["alpha", "beta", "gamma", "delta"],
            "answer": idx % 4,
        }
        for idx in range(n)
    ]


def make_module(
    answers: tuple[int, ...] = (1,), *, module_id: str = "m1"
) -> QuizModule:
    questions = tuple(
        Question(
            question=f"Q{idx}",
            options=("a", "b", "c", "d"),
            answer=answer,
        )
        for idx, answer in enumerate(answers)
    )
    return QuizModule(
        id=module_id, title="Sample", content="notes", questions=questions
    )
