"""blitz-quiz: timed study quizzes generated from your own notes."""

from .app import QuizApp, QuizDraft  # noqa: F401
from .game import (  # noqa: F401
    GameSession,
    ScoringRules,
    SessionPhase,
    SessionResult,
)
from .generator import (  # noqa: F401
    GenerationError,
    OpenAIGenerationClient,
    QuizGenerator,
)
from .models import ImagePart, Question, QuizModule  # noqa: F401
from .store import ModuleStore, demo_module  # noqa: F401

__all__ = [
    "QuizApp",
    "QuizDraft",
    "GameSession",
    "ScoringRules",
    "SessionPhase",
    "SessionResult",
    "GenerationError",
    "OpenAIGenerationClient",
    "QuizGenerator",
    "ImagePart",
    "Question",
    "QuizModule",
    "ModuleStore",
    "demo_module",
]
