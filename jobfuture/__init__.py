from __future__ import annotations

from .client import Client, JobType
from .future import Future, wait_all
from .handle import StatusHandle
from .models.job_status import JobStatus

__all__ = ["Client", "Future", "JobStatus", "JobType", "StatusHandle", "wait_all"]
