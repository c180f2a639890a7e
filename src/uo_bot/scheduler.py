"""Periodic routines on the asyncio event loop.

A Routine fires its task on a fixed wall-clock grid until cancelled. Invocations
of one routine never overlap: a tick that arrives while the previous invocation
is still running is skipped, and the routine resumes on the next grid boundary.
Task failures are logged and never stop future ticks.
"""

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Task = Callable[[], Awaitable[None] | None]


class Routine:
    """Handle for one periodic task. Created by :meth:`Scheduler.start`."""

    def __init__(self, name: str, task: Task, interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"Routine interval must be positive, got {interval}")
        self.name = name
        self.interval = interval
        self._task = task
        self._cancelled = asyncio.Event()
        self._runner: asyncio.Task | None = None
        self.invocations = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        self._runner = asyncio.create_task(self._run(), name=f"routine:{self.name}")

    def cancel(self) -> None:
        """Stop the routine. No invocation starts after this returns."""
        self._cancelled.set()

    async def wait_closed(self) -> None:
        """Wait for the runner to exit, letting any in-flight invocation finish."""
        if self._runner is not None:
            await self._runner

    async def _run(self) -> None:
        deadline = time.monotonic() + self.interval
        while True:
            try:
                async with asyncio.timeout(max(0.0, deadline - time.monotonic())):
                    await self._cancelled.wait()
            except TimeoutError:
                pass
            if self.cancelled:
                return

            await self._invoke()

            # Skip any boundaries the invocation overran
            now = time.monotonic()
            deadline += self.interval
            if deadline <= now:
                missed = int((now - deadline) // self.interval) + 1
                deadline += missed * self.interval
                logger.warning(
                    "Routine %s overran its interval, skipped %d tick(s)",
                    self.name,
                    missed,
                )

    async def _invoke(self) -> None:
        self.invocations += 1
        try:
            result = self._task()
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.error("Routine %s failed", self.name, exc_info=True)


class Scheduler:
    """Registry of running routines with collective cancellation."""

    def __init__(self) -> None:
        self._routines: dict[str, Routine] = {}

    @property
    def routines(self) -> dict[str, Routine]:
        return dict(self._routines)

    def start(self, name: str, task: Task, interval: float) -> Routine:
        """Start running ``task`` every ``interval`` seconds. Must be called inside a running loop."""
        if name in self._routines and not self._routines[name].cancelled:
            raise ValueError(f"Routine {name!r} is already running")
        routine = Routine(name, task, interval)
        routine.start()
        self._routines[name] = routine
        logger.info("Started routine %s every %.0fs", name, interval)
        return routine

    def cancel(self, routine: Routine) -> None:
        routine.cancel()
        logger.info("Cancelled routine %s", routine.name)

    def cancel_all(self) -> None:
        for routine in self._routines.values():
            if not routine.cancelled:
                self.cancel(routine)

    async def wait_closed(self) -> None:
        """Wait for every routine runner to exit."""
        await asyncio.gather(*(r.wait_closed() for r in self._routines.values()))
