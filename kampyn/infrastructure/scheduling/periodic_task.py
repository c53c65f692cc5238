"""
Periodic Task

Cancellable asyncio loop used for order list and rate-limit polling.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional


class PeriodicTask:
    """Run ``callback`` every ``interval_seconds`` until stopped"""

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        interval_seconds: float,
        name: str = "periodic-task",
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._callback = callback
        self._interval = interval_seconds
        self._name = name
        self._task: Optional[asyncio.Task] = None
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        """Schedule the loop on the running event loop; the first tick is one interval away"""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)
        self._logger.debug("⏱️ STARTED %s every %ss", self._name, self._interval)

    async def stop(self):
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._logger.debug("⏹️ STOPPED %s", self._name)

    async def _run(self):
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception:  # pylint: disable=broad-except
                # A failed tick must not end the polling loop
                self._logger.exception("💥 %s tick failed", self._name)
