from __future__ import annotations

from dataclasses import dataclass
from typing import final


@final
@dataclass(frozen=True)
class Constant:
    """Same delay before every retry. A negative max_retries never gives up."""

    delay: float = 0.5
    max_retries: int = 3

    def next(self, attempt: int) -> float | None:
        assert attempt >= 0, "attempt must be greater than or equal to 0"
        if attempt == 0:
            return 0
        if attempt > self.max_retries >= 0:
            return None
        return self.delay
