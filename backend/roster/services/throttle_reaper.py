"""Throttle Reaper: periodic sweep of idle throttle entries.

Invariants:
    - Runs on its own interval, independent of request traffic
    - A failing sweep is logged and the loop keeps going
    - stop() cancels and awaits the task; safe to call when never started
"""

import asyncio
import logging

from roster.core.request_throttle import RequestThrottle

logger = logging.getLogger(__name__)


class ThrottleReaper:
    """Owns the asyncio task that calls RequestThrottle.sweep() every interval."""

    def __init__(self, throttle: RequestThrottle, interval_seconds: float = 60.0):
        self.throttle = throttle
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="throttle-reaper")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                removed = self.throttle.sweep()
            except Exception as e:
                logger.error(f"Throttle sweep failed: {e}", exc_info=True)
                continue
            if removed:
                logger.debug("Throttle sweep", extra={"removed": removed})
