"""Cancel-and-restart timer for bursts of input (e.g. search keystrokes)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """Run *callback* once the calls to :meth:`trigger` go quiet for *delay* seconds.

    Each trigger cancels the pending run and schedules a new one, so only the
    last arguments of a burst reach the callback.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[..., Awaitable[Any]],
    ) -> None:
        self.delay = delay
        self._callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(args, kwargs))

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait for the scheduled run, if any, to finish."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def _run(self, args: tuple, kwargs: dict) -> None:
        await asyncio.sleep(self.delay)
        try:
            await self._callback(*args, **kwargs)
        except Exception:
            logger.exception("Debounced callback failed")
