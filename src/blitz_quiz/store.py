"""Process-local store for quiz modules and the logged-in user.

Nothing here is durable: the store is built once at start-up, handed to the
generator and the application by reference, and dropped on exit.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Callable, Iterable, Optional

from .models import Question, QuizModule

__all__ = [
    "StoreListener",
    "ModuleStore",
    "demo_module",
]

logger = logging.getLogger(__name__)

StoreListener = Callable[["ModuleStore"], None]


def demo_module() -> QuizModule:
    """Return the sample module new stores can be seeded with."""

    return QuizModule(
        id="1",
        title="Capital Cities",
        content="Demo content about capitals.",
        high_score=850,
        questions=(
            Question(
                question="What is the capital of France?",
                options=("Berlin", "Madrid", "Paris", "Rome"),
                answer=2,
            ),
            Question(
                question="What is the capital of Japan?",
                options=("Beijing", "Seoul", "Bangkok", "Tokyo"),
                answer=3,
            ),
            Question(
                question="What is the capital of Canada?",
                options=("Toronto", "Vancouver", "Ottawa", "Montreal"),
                answer=2,
            ),
        ),
    )


class ModuleStore:
    """Hold quiz modules newest-first plus the current user's display name."""

    def __init__(
        self,
        modules: Iterable[QuizModule] = (),
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._modules: list[QuizModule] = list(modules)
        self._current_user: Optional[str] = None
        self._listeners: list[StoreListener] = []
        self._clock = clock
        self._last_id = max(
            (int(m.id) for m in self._modules if m.id.isdecimal()),
            default=0,
        )

    @classmethod
    def with_demo(cls, **kwargs) -> "ModuleStore":
        return cls([demo_module()], **kwargs)

    @property
    def current_user(self) -> Optional[str]:
        return self._current_user

    @property
    def modules(self) -> tuple[QuizModule, ...]:
        return tuple(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def list_modules(self) -> list[QuizModule]:
        """Return every module, newest first."""

        return list(self._modules)

    def get(self, module_id: str) -> Optional[QuizModule]:
        for module in self._modules:
            if module.id == module_id:
                return module
        return None

    def login(self, username: str) -> None:
        self._current_user = username
        logger.info("User logged in", extra={"user": username})
        self._notify()

    def logout(self) -> None:
        self._current_user = None
        self._notify()

    def next_module_id(self) -> str:
        """Return a creation timestamp id (ms) never issued before."""

        candidate = int(self._clock() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def add(self, module: QuizModule) -> None:
        """Prepend a freshly generated module."""

        self._modules.insert(0, module)
        logger.info(
            "Module added",
            extra={
                "module_id": module.id,
                "question_count": module.question_count,
            },
        )
        self._notify()

    def update_score(self, module_id: str, score: int) -> None:
        """Raise the module's high score to ``score`` if it is higher.

        Unknown ids are ignored.
        """

        for idx, module in enumerate(self._modules):
            if module.id != module_id:
                continue
            best = max(module.high_score, score)
            if best != module.high_score:
                self._modules[idx] = replace(module, high_score=best)
                logger.info(
                    "High score raised",
                    extra={"module_id": module_id, "high_score": best},
                )
                self._notify()
            return
        logger.debug(
            "Score update for unknown module ignored",
            extra={"module_id": module_id},
        )

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Call ``listener`` after each change; return an unsubscribe hook."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
