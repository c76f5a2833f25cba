from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple


@dataclass
class TimerHandle:
    """A scheduled callback that can be cancelled before it fires."""

    when: int
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class SimClock:
    """Deterministic millisecond clock driving every timed transition.

    Callbacks run one at a time, ordered by due time and then by the order
    they were scheduled, so no two callbacks ever overlap.
    """

    now: int = 0
    _queue: List[Tuple[int, int, TimerHandle]] = field(default_factory=list)
    _counter: "itertools.count[int]" = field(default_factory=itertools.count)

    def call_later(self, delay: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(when=self.now + max(0, int(delay)), callback=callback)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    def advance(self, duration: int) -> None:
        """Move time forward by ``duration`` ms, firing every due callback."""
        deadline = self.now + max(0, int(duration))
        while self._queue and self._queue[0][0] <= deadline:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            handle.callback()
        self.now = deadline

    def run_until_idle(self, limit: int = 600_000) -> None:
        """Fire callbacks until nothing is pending or ``limit`` ms have passed."""
        deadline = self.now + limit
        while self.has_pending() and self._queue[0][0] <= deadline:
            self.advance(self._queue[0][0] - self.now)

    def has_pending(self) -> bool:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)
        return bool(self._queue)


class PendingTransition:
    """Single pending-transition slot for a car.

    Scheduling a new transition cancels the previous one, so at most one
    motion or door timer chain is alive at a time.
    """

    def __init__(self, clock: SimClock) -> None:
        self.clock = clock
        self._handle: Optional[TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def schedule(self, delay: int, callback: Callable[[], None]) -> TimerHandle:
        self.cancel()

        def fire() -> None:
            self._handle = None
            callback()

        self._handle = self.clock.call_later(delay, fire)
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
