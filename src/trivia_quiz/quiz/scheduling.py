from __future__ import annotations

import heapq
import itertools
import time
from typing import Callable, List, Optional, Protocol, Tuple


class Clock(Protocol):
    def now(self) -> float: ...


class RealClock:
    """Monotonic wall clock in seconds."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock that only moves when told to; used by tests and headless drivers."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("cannot move a clock backwards")
        self._now += seconds
        return self._now


class ScheduledCall:
    """Handle for a deferred callback; `cancel()` before it fires turns it into a no-op."""

    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """
    Deferred transitions driven by an explicit pump.

    Nothing fires on its own: the front end (or a test) calls `run_pending()`
    and every call whose due time has been reached runs in due order. With a
    `ManualClock` this makes auto-advance fully deterministic.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock or RealClock()
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        call = ScheduledCall(self.clock.now() + delay, callback)
        heapq.heappush(self._queue, (call.due, next(self._counter), call))
        return call

    def pending(self) -> int:
        return sum(1 for _, _, call in self._queue if call.active)

    def next_due(self) -> Optional[float]:
        """Due time of the earliest live call, or None when idle."""
        self._drop_cancelled()
        return self._queue[0][0] if self._queue else None

    def run_pending(self) -> int:
        """Fire every due call and return how many ran."""
        fired = 0
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0][0] > self.clock.now():
                return fired
            _, _, call = heapq.heappop(self._queue)
            call.fired = True
            call.callback()
            fired += 1

    def cancel_all(self) -> None:
        for _, _, call in self._queue:
            call.cancel()
        self._queue.clear()

    def _drop_cancelled(self) -> None:
        while self._queue and not self._queue[0][2].active:
            heapq.heappop(self._queue)
