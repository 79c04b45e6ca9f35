"""Application flow tying the store, generator and game session together.

``QuizApp`` holds the screen-level state a front end needs (which view is
showing, the draft being created, the module in play, the last score) and
routes user actions into the core. Rendering stays with the host.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Optional, Sequence, Union

from .core.config import QuizConfig, default_config
from .core.logging import configure_logger
from .game.session import GameSession, SessionResult
from .generator.pipeline import GenerationClient, QuizGenerator
from .models import ImagePart, QuizModule
from .store import ModuleStore
from .uploads import load_uploads

__all__ = ["ViewState", "QuizDraft", "QuizApp"]

logger = logging.getLogger(__name__)

ViewState = Literal["login", "dashboard", "create", "game", "result"]


@dataclass
class QuizDraft:
    """The create-module form."""

    title: str = ""
    content: str = ""
    images: List[ImagePart] = field(default_factory=list)
    question_count: int = 5

    def is_submittable(self) -> bool:
        return bool(self.title.strip()) and bool(
            self.content.strip() or self.images
        )

    def add_files(self, paths: Sequence[Union[str, Path]]) -> List[Path]:
        """Attach uploads; return the paths that were skipped."""

        batch = load_uploads(paths, content=self.content)
        self.content = batch.text
        self.images.extend(batch.images)
        return batch.skipped

    def remove_image(self, index: int) -> None:
        if 0 <= index < len(self.images):
            del self.images[index]


class QuizApp:
    """Screen-level controller for a single local user."""

    def __init__(
        self,
        store: ModuleStore,
        generator: QuizGenerator,
        *,
        config: Optional[QuizConfig] = None,
    ) -> None:
        self._store = store
        self._generator = generator
        self._config = config or default_config()
        self.view: ViewState = "login"
        self.draft = QuizDraft(
            question_count=self._config.generation.default_question_count
        )
        self.is_generating = False
        self.active_module: Optional[QuizModule] = None
        self.session: Optional[GameSession] = None
        self.last_score = 0

    @classmethod
    def from_config(
        cls,
        config: QuizConfig,
        *,
        client: Optional[GenerationClient] = None,
        configure_logging: bool = True,
    ) -> "QuizApp":
        if configure_logging:
            configure_logger(
                "blitz_quiz",
                log_dir=config.logging.directory,
                level=config.logging.level,
                verbose=config.logging.verbose,
            )
        if config.store.seed_demo:
            store = ModuleStore.with_demo()
        else:
            store = ModuleStore()
        generator = QuizGenerator.from_config(config, store, client=client)
        return cls(store, generator, config=config)

    @property
    def store(self) -> ModuleStore:
        return self._store

    @property
    def current_user(self) -> Optional[str]:
        return self._store.current_user

    def login(self, username: str) -> bool:
        name = username.strip()
        if not name:
            return False
        self._store.login(name)
        self.view = "dashboard"
        return True

    def logout(self) -> None:
        self.close_session()
        self._store.logout()
        self.view = "login"

    def go_to_create(self) -> None:
        self.draft = QuizDraft(
            question_count=self._config.generation.default_question_count
        )
        self.view = "create"

    def back_to_dashboard(self) -> None:
        self.close_session()
        self.view = "dashboard"

    async def create_quiz(self) -> Optional[QuizModule]:
        """Generate a module from the current draft.

        Returns ``None`` without doing anything when the draft is incomplete
        or a generation is already running. GenerationError propagates and
        leaves the app on the create view.
        """

        if self.is_generating or not self.draft.is_submittable():
            return None
        self.is_generating = True
        try:
            module = await self._generator.generate(
                self.draft.title.strip(),
                self.draft.content,
                list(self.draft.images),
                int(self.draft.question_count),
            )
        finally:
            self.is_generating = False
        self.view = "dashboard"
        return module

    def play_module(self, module: QuizModule, **session_kwargs) -> GameSession:
        """Start a session for ``module`` and switch to the game view."""

        self.close_session()
        self.active_module = module
        self.session = GameSession.from_config(
            module,
            self._config.game,
            on_complete=self.handle_game_complete,
            **session_kwargs,
        )
        self.view = "game"
        self.session.start()
        return self.session

    def handle_game_complete(self, result: SessionResult) -> None:
        self.last_score = result.score
        if self.active_module is not None:
            self._store.update_score(self.active_module.id, result.score)
        logger.info(
            "Game finished",
            extra={"score": result.score, "total": result.total},
        )
        self.session = None
        self.view = "result"

    def close_session(self) -> None:
        if self.session is not None:
            self.session.close()
            self.session = None
