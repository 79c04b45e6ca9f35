"""Shared AI helper utilities."""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv
from openai import AsyncOpenAI

__all__ = ["API_KEY_ENV", "load_client"]


API_KEY_ENV = "OPENAI_API_KEY"


def load_client(*, api_base: str | None = None) -> Any:
    """Initialize an async OpenAI client from environment credentials."""
    load_dotenv()
    api_key = os.getenv(API_KEY_ENV)
    if not api_key:
        raise RuntimeError(
            f"{API_KEY_ENV} not found in environment. Set it or add to .env"
        )
    if api_base:
        return AsyncOpenAI(api_key=api_key, base_url=api_base)
    return AsyncOpenAI(api_key=api_key)
