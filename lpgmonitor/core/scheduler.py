"""
Cancellable periodic tasks
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs a coroutine function every ``interval`` seconds until stopped.

    A failing run is logged and the schedule carries on.
    """

    def __init__(self, name: str, interval: float, callback: Callable[[], Awaitable[None]]):
        if interval <= 0:
            raise ValueError("Interval must be positive")
        self.name = name
        self.interval = interval
        self._callback = callback
        self._task: Optional[asyncio.Task] = None
        self.runs = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.info(f"Started periodic task {self.name} (every {self.interval}s)")

    async def stop(self):
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(f"Stopped periodic task {self.name}")

    async def _run(self):
        while True:
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Periodic task {self.name} failed: {e}", exc_info=True)
            self.runs += 1
            await asyncio.sleep(self.interval)
