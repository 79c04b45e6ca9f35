"""Cancelable per-question countdown running on the asyncio loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

__all__ = ["CountdownTimer", "TickCallback"]

logger = logging.getLogger(__name__)

# Receives the token the countdown was started with.
TickCallback = Callable[[int], None]


class CountdownTimer:
    """Fire ``on_tick`` every ``interval`` seconds until cancelled.

    At most one countdown task exists per timer. :meth:`start` always cancels
    the previous task first, and every tick carries the token it was started
    with so the receiver can drop ticks that belong to an earlier question.
    """

    def __init__(
        self,
        on_tick: TickCallback,
        *,
        interval: float = 1.0,
        name: str = "countdown",
    ) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self._name = name
        self._task: Optional[asyncio.Task[None]] = None
        self._token: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def token(self) -> Optional[int]:
        return self._token

    def start(self, token: int) -> None:
        """Begin ticking for ``token``; requires a running event loop."""

        self.cancel()
        loop = asyncio.get_running_loop()
        self._token = token
        self._task = loop.create_task(
            self._run(token), name=f"{self._name}-{token}"
        )
        logger.debug(
            "Countdown started",
            extra={"timer": self._name, "token": token},
        )

    def cancel(self) -> None:
        """Stop the pending countdown, if any. Safe to call repeatedly."""

        task = self._task
        self._task = None
        self._token = None
        if task is not None and not task.done():
            task.cancel()
            logger.debug("Countdown cancelled", extra={"timer": self._name})

    async def _run(self, token: int) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if self._token != token:
                return
            try:
                self._on_tick(token)
            except Exception:
                logger.exception(
                    "Countdown tick handler failed",
                    extra={"timer": self._name, "token": token},
                )
