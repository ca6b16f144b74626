"""Resend cooldown timer.

A CooldownTimer counts whole seconds down to zero on one asyncio task.
The controller that owns it starts it after each dispatch and cancels
it on teardown, so no recurring callback outlives the flow.
"""

from __future__ import annotations

import asyncio

import structlog

logger = structlog.get_logger()


def _current_task() -> asyncio.Task[object] | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class CooldownTimer:
    """Seconds-remaining counter driven by a repeating tick.

    Usage:
        timer = CooldownTimer()
        timer.start(60)      # needs a running event loop
        timer.remaining      # 60, 59, ... 0
        timer.cancel()       # on teardown
    """

    def __init__(self, interval: float = 1.0) -> None:
        """Initialize the timer.

        Args:
            interval: Seconds between ticks. One tick removes one unit.
        """
        self._interval = interval
        self._remaining = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def remaining(self) -> int:
        """Units left before the cooldown ends."""
        return self._remaining

    @property
    def running(self) -> bool:
        """Whether a tick task is scheduled."""
        return self._task is not None and not self._task.done()

    def start(self, seconds: int) -> None:
        """Restart the countdown from `seconds`.

        Any previous tick task is cancelled first.
        """
        self.cancel()
        self._remaining = max(0, seconds)
        if self._remaining > 0:
            self._task = asyncio.get_running_loop().create_task(self._run())

    def tick(self) -> None:
        """Remove one unit; stop ticking at zero."""
        if self._remaining > 0:
            self._remaining -= 1
        if self._remaining == 0 and self._task is not None and self._task is not _current_task():
            self.cancel()

    def cancel(self) -> None:
        """Stop future ticks. The remaining count is left as is."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def wait(self) -> None:
        """Wait until the current countdown ends or is cancelled."""
        task = self._task
        if task is None:
            return
        await asyncio.wait({task})

    async def _run(self) -> None:
        while self._remaining > 0:
            await asyncio.sleep(self._interval)
            self.tick()
        logger.debug("cooldown_elapsed")
