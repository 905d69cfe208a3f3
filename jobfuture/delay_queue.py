from __future__ import annotations

import heapq


class DelayQ[T]:
    def __init__(self) -> None:
        self._delayed: list[tuple[float, int, T]] = []
        self._counter = 0

    def add(self, item: T, time: float) -> None:
        # the counter breaks ties so items themselves are never compared
        heapq.heappush(self._delayed, (time, self._counter, item))
        self._counter += 1

    def get(self, time: float) -> list[T]:
        items: list[T] = []
        while self._delayed and self._delayed[0][0] <= time:
            items.append(heapq.heappop(self._delayed)[-1])
        return items

    def next_time(self) -> float | None:
        return self._delayed[0][0] if self._delayed else None

    def __len__(self) -> int:
        return len(self._delayed)
