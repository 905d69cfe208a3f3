from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jobfuture.models.job_status import JobStatus
    from jobfuture.models.store import Store


@dataclass(frozen=True)
class StatusHandle:
    id: str
    store: Store = field(repr=False, compare=False)

    def status(self) -> JobStatus | None:
        """Read the latest status of the job, None if the store does not know it yet."""
        return self.store.get_status(self.id)
