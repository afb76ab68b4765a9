"""
Maintenance countdown for the App Store site API.

Derives the remaining time and progress of a maintenance window from its
start/end timestamps (epoch milliseconds), and drives a once-per-second
recomputation while a window is active.
"""
import asyncio
import logging
import time
from dataclasses import dataclass, asdict
from typing import Callable, Optional

logger = logging.getLogger(__name__)

MS_PER_DAY = 86_400_000
MS_PER_HOUR = 3_600_000
MS_PER_MINUTE = 60_000
MS_PER_SECOND = 1_000


@dataclass(frozen=True)
class CountdownState:
    days: int
    hours: int
    minutes: int
    seconds: int
    progress: float
    elapsed: bool

    def to_dict(self) -> dict:
        return asdict(self)


def now_millis() -> int:
    return int(time.time() * 1000)


def compute_countdown(start_ms: Optional[int], end_ms: int, now_ms: int) -> CountdownState:
    """
    Remaining time and 0-100 progress for the window [start_ms, end_ms] at now_ms.

    A window without a start is treated as starting now. Once the end is
    reached the countdown is all zeros, progress is 100 and `elapsed` is set.
    """
    if start_ms is None:
        start_ms = now_ms

    remaining = end_ms - now_ms
    if remaining <= 0:
        return CountdownState(0, 0, 0, 0, 100.0, True)

    days, rest = divmod(remaining, MS_PER_DAY)
    hours, rest = divmod(rest, MS_PER_HOUR)
    minutes, rest = divmod(rest, MS_PER_MINUTE)
    seconds = rest // MS_PER_SECOND

    total = end_ms - start_ms
    if total == 0:
        progress = 100.0
    else:
        progress = (total - remaining) / total * 100
        progress = min(100.0, max(0.0, progress))

    return CountdownState(int(days), int(hours), int(minutes), int(seconds), progress, False)


class CountdownTicker:
    """
    Recompute a countdown on a fixed interval until the window elapses.

    `on_tick` receives each new state. The ticker stops by itself after the
    elapsed state has been delivered; `cancel()` stops it early.
    """

    def __init__(
        self,
        start_ms: Optional[int],
        end_ms: int,
        on_tick: Callable[[CountdownState], None],
        interval: float = 1.0,
        clock: Callable[[], int] = now_millis,
    ):
        self.start_ms = start_ms
        self.end_ms = end_ms
        self.on_tick = on_tick
        self.interval = interval
        self.clock = clock
        self.last_state: Optional[CountdownState] = None
        self._task: Optional[asyncio.Task] = None

    def tick(self) -> CountdownState:
        state = compute_countdown(self.start_ms, self.end_ms, self.clock())
        self.last_state = state
        self.on_tick(state)
        return state

    async def _run(self):
        while True:
            state = self.tick()
            if state.elapsed:
                logger.info("Maintenance window elapsed")
                return
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())
        return self._task

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def cancel(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
