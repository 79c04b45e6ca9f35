"""Timed game session state machine.

A session walks a module's questions in order. Each question starts ``ACTIVE``
with a full countdown; one answer (or the countdown reaching zero) moves it to
``FEEDBACK``; :meth:`GameSession.advance` then opens the next question or ends
the session in ``COMPLETE`` and emits a :class:`SessionResult`.

The session never touches the module store. Hosts pass ``on_complete`` and
record the score themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..core.config import GameConfig
from ..models import Question, QuizModule
from .scoring import ScoringRules, points_for
from .timer import CountdownTimer

__all__ = [
    "SessionPhase",
    "QuestionOutcome",
    "SessionResult",
    "SessionSnapshot",
    "GameSession",
]

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    READY = "ready"
    ACTIVE = "active"
    FEEDBACK = "feedback"
    COMPLETE = "complete"


@dataclass(frozen=True)
class QuestionOutcome:
    """How one question was resolved."""

    question_index: int
    selected: Optional[int]
    correct: bool
    points: int
    time_left: int

    @property
    def timed_out(self) -> bool:
        return self.selected is None


@dataclass(frozen=True)
class SessionResult:
    """Terminal result handed to the host when the last question is done."""

    score: int
    total: int
    outcomes: tuple[QuestionOutcome, ...] = ()

    @property
    def correct_answers(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.correct)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session delivered to subscribers."""

    phase: SessionPhase
    question_index: int
    total_questions: int
    score: int
    time_left: int
    time_fraction: float
    show_feedback: bool
    selected_index: Optional[int]
    points_earned: int
    is_correct: bool
    is_last_question: bool


SessionListener = Callable[[SessionSnapshot], None]
CompletionCallback = Callable[[SessionResult], None]


class GameSession:
    """Drive one timed play-through of a module."""

    def __init__(
        self,
        module: QuizModule,
        *,
        rules: Optional[ScoringRules] = None,
        tick_interval: float = 1.0,
        on_complete: Optional[CompletionCallback] = None,
        auto_countdown: bool = True,
    ) -> None:
        if not module.questions:
            raise ValueError(
                "Cannot start a session for a module without questions."
            )
        self._module = module
        self._rules = rules or ScoringRules()
        self._on_complete = on_complete
        self._listeners: list[SessionListener] = []
        self._timer: Optional[CountdownTimer] = (
            CountdownTimer(
                self._on_timer_tick,
                interval=tick_interval,
                name=f"session-{module.id}",
            )
            if auto_countdown
            else None
        )

        self._phase = SessionPhase.READY
        self._index = 0
        self._score = 0
        self._time_left = self._rules.seconds_per_question
        self._selected: Optional[int] = None
        self._points = 0
        self._outcomes: list[QuestionOutcome] = []
        self._result: Optional[SessionResult] = None

    @classmethod
    def from_config(
        cls, module: QuizModule, config: GameConfig, **kwargs
    ) -> "GameSession":
        return cls(
            module,
            rules=ScoringRules.from_config(config),
            tick_interval=config.tick_interval_seconds,
            **kwargs,
        )

    # -- read-only state -------------------------------------------------

    @property
    def module(self) -> QuizModule:
        return self._module

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def question_index(self) -> int:
        return self._index

    @property
    def total_questions(self) -> int:
        return len(self._module.questions)

    @property
    def current_question(self) -> Question:
        return self._module.questions[self._index]

    @property
    def is_last_question(self) -> bool:
        return self._index == self.total_questions - 1

    @property
    def score(self) -> int:
        return self._score

    @property
    def time_left(self) -> int:
        return self._time_left

    @property
    def show_feedback(self) -> bool:
        return self._phase is SessionPhase.FEEDBACK

    @property
    def selected_index(self) -> Optional[int]:
        return self._selected

    @property
    def points_earned(self) -> int:
        return self._points

    @property
    def is_correct(self) -> bool:
        return self._selected is not None and self.current_question.is_correct(
            self._selected
        )

    @property
    def outcomes(self) -> tuple[QuestionOutcome, ...]:
        return tuple(self._outcomes)

    @property
    def result(self) -> Optional[SessionResult]:
        return self._result

    @property
    def countdown_running(self) -> bool:
        return self._timer is not None and self._timer.running

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._phase,
            question_index=self._index,
            total_questions=self.total_questions,
            score=self._score,
            time_left=self._time_left,
            time_fraction=self._time_left / self._rules.seconds_per_question,
            show_feedback=self.show_feedback,
            selected_index=self._selected,
            points_earned=self._points,
            is_correct=self.is_correct,
            is_last_question=self.is_last_question,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after each change."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # -- transitions -----------------------------------------------------

    def start(self) -> None:
        """Open the first question and start its countdown.

        With ``auto_countdown`` this must run inside an asyncio event loop.
        """

        if self._phase is not SessionPhase.READY:
            return
        logger.info(
            "Session started",
            extra={
                "module_id": self._module.id,
                "total_questions": self.total_questions,
            },
        )
        self._open_question(0)

    def tick(self) -> None:
        """Advance the countdown by one step; time out at zero."""

        if self._phase is not SessionPhase.ACTIVE or self._time_left <= 0:
            return
        self._time_left -= 1
        if self._time_left == 0:
            self._resolve(selected=None)
            return
        self._notify()

    def select_answer(self, index: int) -> bool:
        """Record the answer for the current question.

        Returns ``False`` when the question is already resolved; the call is
        then ignored.
        """

        if self._phase is not SessionPhase.ACTIVE:
            logger.debug(
                "Selection ignored",
                extra={"phase": self._phase.value, "index": index},
            )
            return False
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValueError("Option index must be an integer.")
        options = self.current_question.options
        if not 0 <= index < len(options):
            raise ValueError(
                f"Option index {index} is outside 0..{len(options) - 1}."
            )
        self._resolve(selected=index)
        return True

    def advance(self) -> Optional[SessionResult]:
        """Move past the feedback for the current question.

        Returns the :class:`SessionResult` when the last question was just
        finished, otherwise ``None``.
        """

        if self._phase is not SessionPhase.FEEDBACK:
            logger.debug(
                "Advance ignored", extra={"phase": self._phase.value}
            )
            return None
        if self.is_last_question:
            return self._complete()
        self._open_question(self._index + 1)
        return None

    def close(self) -> None:
        """Stop the countdown, e.g. when the player leaves mid-game."""

        self._cancel_countdown()

    # -- internals -------------------------------------------------------

    def _open_question(self, index: int) -> None:
        self._cancel_countdown()
        self._index = index
        self._phase = SessionPhase.ACTIVE
        self._time_left = self._rules.seconds_per_question
        self._selected = None
        self._points = 0
        if self._timer is not None:
            self._timer.start(index)
        self._notify()

    def _on_timer_tick(self, token: int) -> None:
        if token != self._index:
            logger.debug(
                "Stale countdown tick dropped",
                extra={"token": token, "question_index": self._index},
            )
            return
        self.tick()

    def _resolve(self, *, selected: Optional[int]) -> None:
        self._cancel_countdown()
        correct = selected is not None and self.current_question.is_correct(
            selected
        )
        points = points_for(correct, self._time_left, self._rules)
        self._selected = selected
        self._points = points
        self._score += points
        self._phase = SessionPhase.FEEDBACK
        self._outcomes.append(
            QuestionOutcome(
                question_index=self._index,
                selected=selected,
                correct=correct,
                points=points,
                time_left=self._time_left,
            )
        )
        logger.debug(
            "Question resolved",
            extra={
                "question_index": self._index,
                "selected": selected,
                "correct": correct,
                "points": points,
            },
        )
        self._notify()

    def _complete(self) -> SessionResult:
        self._cancel_countdown()
        self._phase = SessionPhase.COMPLETE
        self._result = SessionResult(
            score=self._score,
            total=self.total_questions,
            outcomes=tuple(self._outcomes),
        )
        logger.info(
            "Session complete",
            extra={
                "module_id": self._module.id,
                "score": self._score,
                "total": self.total_questions,
            },
        )
        self._notify()
        if self._on_complete is not None:
            self._on_complete(self._result)
        return self._result

    def _cancel_countdown(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
