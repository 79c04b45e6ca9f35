"""Notes-to-quiz generation pipeline."""

from .pipeline import (  # noqa: F401
    GenerationClient,
    OpenAIGenerationClient,
    QuizGenerator,
)
from .prompts import (  # noqa: F401
    build_instruction,
    build_user_content,
    truncate_content,
)
from .schema import (  # noqa: F401
    GenerationError,
    parse_questions,
    response_format,
    response_schema,
    validate_question,
)

__all__ = [
    "GenerationClient",
    "OpenAIGenerationClient",
    "QuizGenerator",
    "build_instruction",
    "build_user_content",
    "truncate_content",
    "GenerationError",
    "parse_questions",
    "response_format",
    "response_schema",
    "validate_question",
]
