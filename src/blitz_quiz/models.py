"""Data records shared by the generator, the store and the game session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping

__all__ = [
    "OPTION_COUNT",
    "Question",
    "QuizModule",
    "ImagePart",
]


# The game maps options onto four fixed shapes and colours.
OPTION_COUNT = 4


@dataclass(frozen=True)
class Question:
    """A multiple-choice quiz item with a zero-based ``answer`` index."""

    question: str
    options: tuple[str, ...]
    answer: int

    def is_correct(self, index: int) -> bool:
        return index == self.answer

    @property
    def answer_text(self) -> str:
        return self.options[self.answer]

    def to_dict(self) -> MutableMapping[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "answer": self.answer,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Question":
        return cls(
            question=str(payload["question"]),
            options=tuple(str(option) for option in payload["options"]),
            answer=int(payload["answer"]),
        )


@dataclass(frozen=True)
class QuizModule:
    """A generated study set.

    ``high_score`` is the only field that changes after creation; the store
    swaps in a copy carrying the new value.
    """

    id: str
    title: str
    content: str
    questions: tuple[Question, ...]
    high_score: int = 0

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def to_dict(self) -> MutableMapping[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "questions": [question.to_dict() for question in self.questions],
            "high_score": self.high_score,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "QuizModule":
        return cls(
            id=str(payload["id"]),
            title=str(payload["title"]),
            content=str(payload.get("content", "")),
            questions=tuple(
                Question.from_dict(item) for item in payload["questions"]
            ),
            high_score=int(payload.get("high_score", 0)),
        )


@dataclass(frozen=True)
class ImagePart:
    """An uploaded image, base64 encoded, handed to the generator."""

    data: str
    mime_type: str
    name: str = ""

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"
