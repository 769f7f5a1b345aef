"""
Periodic tick driver for the session engine.

One cancellable asyncio task calls ``SessionEngine.tick`` at a fixed interval
while a fast is running. Ticks are synchronous, so exactly one is ever in
flight and their order is preserved.
"""

import asyncio
import time
from collections.abc import AsyncIterator, Awaitable, Callable

import structlog

from fasttrack.domain.models import SessionStatus
from fasttrack.services.session_engine import SessionEngine

logger = structlog.get_logger(__name__)


class SessionTicker:
    """Runs the tick loop as a single background task."""

    def __init__(
        self,
        engine: SessionEngine,
        interval_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.engine = engine
        self.interval_seconds = interval_seconds
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self.logger = logger.bind(component="session_ticker")

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def ensure_running(self) -> None:
        """Start the background task if a fast is running and none is active."""
        if self.is_running or not self.engine.is_fasting:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._drain_ticks(), name="session-ticker"
        )
        self.logger.info("ticker_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self.logger.info("ticker_stopped")

    async def ticks(self) -> AsyncIterator[SessionStatus]:
        """
        Tick while fasting, yielding each observed status.

        Ends once the session goes idle (manually or by auto-completion).
        Sleeps are aligned to the interval so slow ticks do not drift.
        """
        while self.engine.is_fasting:
            tick_start = time.perf_counter()
            status = self.engine.tick()
            if status is not None:
                yield status

            elapsed = time.perf_counter() - tick_start
            sleep_time = max(0.0, self.interval_seconds - elapsed)
            if sleep_time > 0:
                await self._sleep(sleep_time)
            else:
                self.logger.warning(
                    "tick_slower_than_interval",
                    elapsed_seconds=round(elapsed, 3),
                    interval_seconds=self.interval_seconds,
                )

    async def _drain_ticks(self) -> None:
        try:
            async for _ in self.ticks():
                pass
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.exception("tick_loop_failed", error=str(e))
            raise
        self.logger.info("ticker_finished_session_idle")
