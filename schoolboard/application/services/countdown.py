"""Quiz countdown timer driven by the asyncio event loop."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

TimeUpCallback = Callable[[], Awaitable[None] | None]


def format_time(seconds: int) -> str:
    """Render seconds as ``m:ss`` (e.g. 65 → ``1:05``)."""
    seconds = max(0, int(seconds))
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes}:{remaining:02d}"


class QuizCountdown:
    """Counts down once per second and fires ``on_time_up`` exactly once.

    ``tick`` advances the clock by one second and can be called directly;
    ``start`` runs it on the event loop until the time is up or ``stop``.
    """

    def __init__(
        self,
        duration_seconds: int,
        on_time_up: TimeUpCallback,
        *,
        interval: float = 1.0,
    ):
        if duration_seconds < 0:
            raise ValueError("duration_seconds must not be negative")
        self._remaining = duration_seconds
        self._on_time_up = on_time_up
        self._interval = interval
        self._fired = False
        self._task: asyncio.Task[None] | None = None

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def expired(self) -> bool:
        return self._fired

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def display(self) -> str:
        return format_time(self._remaining)

    async def tick(self) -> None:
        if self._fired:
            return
        if self._remaining > 0:
            self._remaining -= 1
        if self._remaining == 0:
            await self._fire()

    def start(self) -> None:
        if self.running or self._fired:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        if self._remaining == 0:
            await self._fire()
            return
        while not self._fired:
            await asyncio.sleep(self._interval)
            await self.tick()

    async def _fire(self) -> None:
        self._fired = True
        logger.info("Quiz time is up")
        result = self._on_time_up()
        if inspect.isawaitable(result):
            await result
