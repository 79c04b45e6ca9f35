"""Turn study notes into a stored :class:`QuizModule`."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.ai import load_client
from ..core.config import GenerationConfig, QuizConfig
from ..models import ImagePart, QuizModule
from ..store import ModuleStore
from .prompts import build_user_content
from .schema import GenerationError, parse_questions, response_format

__all__ = [
    "GenerationClient",
    "OpenAIGenerationClient",
    "QuizGenerator",
]

logger = logging.getLogger(__name__)


class GenerationClient(Protocol):
    """Protocol satisfied by model adapters."""

    async def complete(
        self,
        *,
        content: Sequence[Mapping[str, Any]],
        response_format: Mapping[str, Any],
    ) -> str:
        """Return the raw text of the model's structured reply."""


class OpenAIGenerationClient:
    """Adapter for OpenAI chat completions with structured outputs."""

    def __init__(
        self,
        *,
        model: str,
        temperature: float,
        request_timeout: int,
        api_base: str | None = None,
        client: Any | None = None,
    ) -> None:
        self._model = model
        self._temperature = temperature
        self._timeout = request_timeout
        self._client = client if client is not None else load_client(
            api_base=api_base
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        *,
        content: Sequence[Mapping[str, Any]],
        response_format: Mapping[str, Any],
    ) -> str:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "user", "content": [dict(part) for part in content]}
            ],
            response_format=dict(response_format),
            temperature=self._temperature,
            timeout=self._timeout,
        )
        message = response.choices[0].message
        refusal = getattr(message, "refusal", None)
        if refusal:
            raise GenerationError(f"Model refused the request: {refusal}")
        return (message.content or "").strip()


class QuizGenerator:
    """Build quiz modules from notes and images through a generation client.

    A call makes exactly one request. It either prepends a complete module to
    the store or raises :class:`GenerationError` and leaves the store alone.
    Callers should not start a second generation while one is pending.
    """

    def __init__(
        self,
        store: ModuleStore,
        client: GenerationClient,
        *,
        settings: GenerationConfig,
        timeout: float,
    ) -> None:
        self._store = store
        self._client = client
        self._settings = settings
        self._timeout = timeout

    @classmethod
    def from_config(
        cls,
        config: QuizConfig,
        store: ModuleStore,
        *,
        client: Optional[GenerationClient] = None,
    ) -> "QuizGenerator":
        openai_cfg = config.providers.openai
        if client is None:
            client = OpenAIGenerationClient(
                model=openai_cfg.model,
                temperature=openai_cfg.temperature,
                request_timeout=openai_cfg.request_timeout_seconds,
                api_base=openai_cfg.api_base,
            )
        return cls(
            store,
            client,
            settings=config.generation,
            timeout=openai_cfg.request_timeout_seconds,
        )

    @property
    def settings(self) -> GenerationConfig:
        return self._settings

    def resolve_question_count(self, question_count: Optional[int]) -> int:
        if question_count is None:
            return self._settings.default_question_count
        limit = self._settings.max_question_count
        if isinstance(question_count, bool) or not isinstance(
            question_count, int
        ):
            raise ValueError("question_count must be an integer.")
        if not 1 <= question_count <= limit:
            raise ValueError(f"question_count must be between 1 and {limit}.")
        return question_count

    def preview(self, text_content: str, images: Sequence[ImagePart]) -> str:
        """Return the short content summary stored on the module."""

        preview = (text_content or "")[: self._settings.preview_chars]
        if images:
            preview += f" (+ {len(images)} images)"
        return preview

    async def generate(
        self,
        title: str,
        text_content: str,
        images: Sequence[ImagePart] = (),
        question_count: Optional[int] = None,
    ) -> QuizModule:
        """Generate, validate and store a new module.

        Callers must pass a non-empty ``title`` and notes or images.
        """

        count = self.resolve_question_count(question_count)
        images = list(images)
        content = build_user_content(
            text_content,
            images,
            question_count=count,
            max_chars=self._settings.max_content_chars,
        )
        logger.info(
            "Requesting quiz generation",
            extra={
                "title": title,
                "question_count": count,
                "text_chars": len(text_content or ""),
                "image_count": len(images),
            },
        )
        raw = await self._request(content)
        questions = parse_questions(raw)
        if len(questions) != count:
            logger.warning(
                "Generated question count differs from request",
                extra={"requested": count, "received": len(questions)},
            )

        module = QuizModule(
            id=self._store.next_module_id(),
            title=title,
            content=self.preview(text_content, images),
            questions=tuple(questions),
            high_score=0,
        )
        self._store.add(module)
        return module

    async def _request(self, content: Sequence[Mapping[str, Any]]) -> str:
        try:
            return await asyncio.wait_for(
                self._client.complete(
                    content=content, response_format=response_format()
                ),
                timeout=self._timeout,
            )
        except GenerationError:
            raise
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Quiz generation timed out", extra={"timeout": self._timeout}
            )
            raise GenerationError(
                f"Generation timed out after {self._timeout}s."
            ) from exc
        except Exception as exc:
            logger.warning(
                "Quiz generation request failed",
                extra={"error_type": type(exc).__name__},
            )
            raise GenerationError(f"Generation request failed: {exc}") from exc
