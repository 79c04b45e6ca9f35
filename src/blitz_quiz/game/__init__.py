"""Timed, scored quiz play."""

from .scoring import ScoringRules, points_for  # noqa: F401
from .session import (  # noqa: F401
    GameSession,
    QuestionOutcome,
    SessionPhase,
    SessionResult,
    SessionSnapshot,
)
from .timer import CountdownTimer  # noqa: F401

__all__ = [
    "ScoringRules",
    "points_for",
    "GameSession",
    "QuestionOutcome",
    "SessionPhase",
    "SessionResult",
    "SessionSnapshot",
    "CountdownTimer",
]
