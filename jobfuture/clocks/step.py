from __future__ import annotations

import heapq
import itertools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class StepClock:
    """Virtual clock whose sleep advances time instantly.

    Callbacks registered with call_at fire, in time order, as soon as the
    clock reaches their time. This lets a test script when jobs change state
    relative to the polling of a future.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._time = start
        self._timers: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()
        self.sleeps: list[float] = []

    def step(self, time: float) -> None:
        assert time >= self._time, "The arrow of time only flows forward."
        while self._timers and self._timers[0][0] <= time:
            at, _, fn = heapq.heappop(self._timers)
            self._time = at
            fn()
        self._time = time

    def time(self) -> float:
        """Return the current time in seconds."""
        return self._time

    def sleep(self, secs: float, /) -> None:
        assert secs >= 0, "secs must be greater than or equal to 0"
        self.sleeps.append(secs)
        self.step(self._time + secs)

    def call_at(self, time: float, fn: Callable[[], None]) -> None:
        if time <= self._time:
            fn()
            return
        heapq.heappush(self._timers, (time, next(self._seq), fn))
