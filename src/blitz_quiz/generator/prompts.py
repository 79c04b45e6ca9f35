"""Prompt construction for quiz generation."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..models import OPTION_COUNT, ImagePart

__all__ = [
    "truncate_content",
    "build_instruction",
    "build_user_content",
]


def truncate_content(text: str, max_chars: int) -> str:
    """Keep the first ``max_chars`` characters of the notes."""

    return (text or "")[:max_chars]


def build_instruction(text_content: str, question_count: int) -> str:
    """Return the natural-language task description sent with the notes."""

    return (
        "You are an expert study aid generator.\n"
        "Analyze the provided content (text notes and/or images of "
        "tests/reviews).\n"
        "Identify the most important concepts, facts, and questions.\n"
        f"Generate a set of {question_count} distinct, high-quality "
        f"multiple-choice questions based on this information, each with "
        f"exactly {OPTION_COUNT} options and one correct answer.\n"
        "\n"
        "If images are provided, extract the questions or information "
        "directly from them.\n"
        "\n"
        f'Text Context: "{text_content}"'
    )


def build_user_content(
    text_content: str,
    images: Sequence[ImagePart],
    *,
    question_count: int,
    max_chars: int,
) -> List[Dict[str, Any]]:
    """Build the multimodal content parts of the single user message.

    The instruction comes first, followed by one inline image per upload.
    """

    parts: List[Dict[str, Any]] = [
        {
            "type": "text",
            "text": build_instruction(
                truncate_content(text_content, max_chars), question_count
            ),
        }
    ]
    for image in images:
        parts.append(
            {"type": "image_url", "image_url": {"url": image.data_url}}
        )
    return parts
