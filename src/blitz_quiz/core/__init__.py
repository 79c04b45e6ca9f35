"""Core shared helpers for blitz-quiz."""

from __future__ import annotations

from .ai import API_KEY_ENV, load_client
from .config import (
    CONFIG_PATH_ENV,
    ConfigError,
    QuizConfig,
    default_config,
    load_config,
    write_template,
)
from .logging import JsonLogFormatter, configure_logger, release_logger

__all__ = [
    "API_KEY_ENV",
    "load_client",
    "CONFIG_PATH_ENV",
    "ConfigError",
    "QuizConfig",
    "default_config",
    "load_config",
    "write_template",
    "JsonLogFormatter",
    "configure_logger",
    "release_logger",
]
