from __future__ import annotations

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from helpers import StubGenerationClient  # noqa: E402

from blitz_quiz.core.config import default_config  # noqa: E402
from blitz_quiz.generator.pipeline import QuizGenerator  # noqa: E402
from blitz_quiz.store import ModuleStore  # noqa: E402


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def store() -> ModuleStore:
    return ModuleStore.with_demo()


@pytest.fixture
def stub_client() -> StubGenerationClient:
    """Generation client stub; queue responses before calling the generator."""

    return StubGenerationClient()


@pytest.fixture
def generator(store, stub_client, config) -> QuizGenerator:
    return QuizGenerator(
        store,
        stub_client,
        settings=config.generation,
        timeout=config.providers.openai.request_timeout_seconds,
    )
