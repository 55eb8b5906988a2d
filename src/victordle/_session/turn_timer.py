# Area: Session
"""
victordle._session.turn_timer — Per-client turn countdown
=========================================================

Each client runs its own countdown for the current turn. When it
expires the ``on_expire`` coroutine runs (the client passes the turn)
and the countdown starts over. Whichever client fires first wins;
this is advisory pressure, not an authoritative clock.

Restart the timer whenever the turn pointer or the status changes.
``on_tick`` may be a plain function or a coroutine function.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from .._shared import maybe_await
from ..errors import VictordleError

logger = logging.getLogger("victordle.session.turn_timer")


class TurnTimer:
    """
    Repeating asyncio countdown with a fixed budget per turn.

    ``remaining`` is computed from a monotonic deadline, so it stays
    correct between ticks.
    """

    def __init__(
        self,
        budget_seconds: float,
        on_expire: Callable[[], Awaitable[None]],
        tick_seconds: float = 1.0,
        on_tick: Optional[Callable[[float], Any]] = None,
    ) -> None:
        self.budget_seconds = budget_seconds
        self.tick_seconds = tick_seconds
        self._on_expire = on_expire
        self._on_tick = on_tick
        self._task: Optional[asyncio.Task] = None
        self._expires_at: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def remaining(self) -> float:
        """Seconds left in the current turn (budget when stopped)."""
        if self._expires_at is None:
            return self.budget_seconds
        return max(0.0, self._expires_at - time.monotonic())

    def restart(self) -> None:
        """Start a fresh countdown, cancelling any running one."""
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Turn timer restarted (%.1fs)", self.budget_seconds)

    def stop(self) -> None:
        """Cancel the countdown. No-op if not running."""
        if self._task is not None and self._task is not asyncio.current_task():
            self._task.cancel()
        self._task = None
        self._expires_at = None

    async def _run(self) -> None:
        while True:
            self._expires_at = time.monotonic() + self.budget_seconds
            while True:
                remaining = self.remaining
                if self._on_tick is not None:
                    await maybe_await(self._on_tick(remaining))
                if remaining <= 0:
                    break
                await asyncio.sleep(min(self.tick_seconds, remaining))

            logger.info("Turn time expired")
            try:
                await self._on_expire()
            except VictordleError as e:
                logger.warning(f"Turn timeout handling failed: {e}")

            # Stopped or restarted from inside on_expire
            if self._task is not asyncio.current_task():
                return
