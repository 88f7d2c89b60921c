"""Fixed-interval async loop driving the monitor tick."""

from __future__ import annotations

import asyncio
from contextlib import suppress
from typing import Awaitable, Callable

import structlog

logger = structlog.get_logger()


class LoopFn:
    """Runs ``fn`` every ``interval`` seconds on the running event loop.

    Each call is awaited before the next one is scheduled, so calls never
    overlap. Periods missed while ``fn`` was running are skipped.
    """

    def __init__(self, fn: Callable[[], Awaitable[None]], interval: float) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.fn = fn
        self.interval = interval
        self._task: asyncio.Task[None] | None = None

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("loop already started")
        self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_run = loop.time() + self.interval
        while True:
            await asyncio.sleep(max(0.0, next_run - loop.time()))
            try:
                await self.fn()
            except Exception as e:
                logger.error("loop_fn_failed", err=str(e))

            next_run += self.interval
            now = loop.time()
            if next_run < now:
                missed = int((now - next_run) // self.interval) + 1
                next_run += missed * self.interval

    async def close(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
