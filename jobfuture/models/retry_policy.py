from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RetryPolicy(Protocol):
    # maps the number of the attempt that just failed to the delay before the
    # next one, or None when the caller should give up
    def next(self, attempt: int) -> float | None: ...
