from __future__ import annotations

import json
from pathlib import Path

import pytest

from blitz_quiz.core import logging as core_logging


def _owned_handlers(logger):
    return [
        handler
        for handler in logger.handlers
        if getattr(handler, core_logging._FILE_MARKER, False)
        or getattr(handler, core_logging._CONSOLE_MARKER, False)
    ]


@pytest.fixture
def logger_name():
    name = "blitz_quiz.tests"
    yield name
    core_logging.release_logger(name)


def test_configure_logger_writes_json(tmp_path, logger_name):
    logger, log_path = core_logging.configure_logger(
        logger_name,
        log_dir=tmp_path / "logs",
        filename="quiz.log",
    )
    logger.info("module added", extra={"module_id": "42", "path": Path("x")})
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception("generation failed", extra={"items": [1, {"a": 2}]})
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    first = json.loads(lines[0])
    assert first["message"] == "module added"
    assert first["level"] == "INFO"
    assert first["extra"] == {"module_id": "42", "path": "x"}

    last = json.loads(lines[-1])
    assert "ValueError" in last["exception"]
    assert last["extra"]["items"] == [1, {"a": 2}]


def test_configure_logger_respects_level(tmp_path, logger_name):
    logger, log_path = core_logging.configure_logger(
        logger_name, log_dir=tmp_path, level="WARNING"
    )
    logger.info("quiet")
    logger.warning("loud")
    for handler in logger.handlers:
        handler.flush()
    messages = [
        json.loads(line)["message"]
        for line in log_path.read_text(encoding="utf-8").splitlines()
    ]
    assert messages == ["loud"]


def test_reconfigure_reuses_handlers(tmp_path, logger_name):
    logger, first_path = core_logging.configure_logger(
        logger_name, log_dir=tmp_path, verbose=True
    )
    assert len(_owned_handlers(logger)) == 2
    logger, second_path = core_logging.configure_logger(
        logger_name, log_dir=tmp_path, verbose=False
    )
    assert second_path == first_path
    assert len(_owned_handlers(logger)) == 1


def test_release_logger_detaches_handlers(tmp_path, logger_name):
    logger, _ = core_logging.configure_logger(logger_name, log_dir=tmp_path)
    core_logging.release_logger(logger_name)
    assert _owned_handlers(logger) == []
