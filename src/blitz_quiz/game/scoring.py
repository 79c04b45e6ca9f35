"""Time-weighted scoring."""

from __future__ import annotations

from dataclasses import dataclass

from ..core.config import GameConfig

__all__ = ["ScoringRules", "points_for"]


@dataclass(frozen=True)
class ScoringRules:
    seconds_per_question: int = 15
    base_points: int = 1000
    max_time_bonus: int = 500

    @classmethod
    def from_config(cls, config: GameConfig) -> "ScoringRules":
        return cls(
            seconds_per_question=config.seconds_per_question,
            base_points=config.base_points,
            max_time_bonus=config.max_time_bonus,
        )

    @property
    def max_points(self) -> int:
        return self.base_points + self.max_time_bonus


def points_for(correct: bool, time_left: int, rules: ScoringRules) -> int:
    """Return the award for one answer.

    A correct answer earns the base points plus a bonus that shrinks linearly
    from ``max_time_bonus`` (instant) towards zero, floored to an integer.
    """

    if not correct:
        return 0
    remaining = min(max(time_left, 0), rules.seconds_per_question)
    bonus = remaining * rules.max_time_bonus // rules.seconds_per_question
    return rules.base_points + bonus
