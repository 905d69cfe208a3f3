from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import deque
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from jobfuture.errors import StoreError
from jobfuture.models.job import Job
from jobfuture.models.job_status import STATES, JobStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

    from jobfuture.models.clock import Clock
    from jobfuture.models.job_status import State

logger = logging.getLogger(__name__)


class LocalStore:
    """In-memory job queue and status store.

    Futures only ever call submit and get_status. The remaining methods are
    the worker side of the protocol, used to report progress on a job.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or time
        self._lock = threading.Lock()
        self._jobs: dict[str, Job] = {}
        self._statuses: dict[str, JobStatus] = {}
        self._queue: deque[Job] = deque()

        self.reads = 0
        self.submits = 0

    @property
    def clock(self) -> Clock:
        return self._clock

    def submit(self, job_type: str, params: Mapping[str, Any]) -> str:
        job = Job(id=uuid.uuid4().hex, type=job_type, params=dict(params))

        with self._lock:
            self._jobs[job.id] = job
            self._statuses[job.id] = JobStatus(id=job.id, state="queued", type=job_type, time=self._clock.time())
            self._queue.append(job)
            self.submits += 1

        logger.debug("Submitted job %s of type %s", job.id, job_type)
        return job.id

    def get_status(self, id: str) -> JobStatus | None:
        with self._lock:
            self.reads += 1
            return self._statuses.get(id)

    def jobs(self) -> list[Job]:
        with self._lock:
            return list(self._jobs.values())

    def next(self, job_type: str | None = None) -> Job | None:
        with self._lock:
            for job in self._queue:
                if job_type is None or job.type == job_type:
                    self._queue.remove(job)
                    return job
            return None

    def update(
        self,
        id: str,
        state: State,
        *,
        payload: Mapping[str, Any] | None = None,
        message: str | None = None,
        num: int | None = None,
        total: int | None = None,
    ) -> JobStatus:
        if state not in STATES:
            msg = f"state must be one of {STATES}, got {state!r}"
            raise ValueError(msg)

        with self._lock:
            current = self._statuses.get(id)
            if current is None:
                raise StoreError(mesg=f"Job {id} not found", code=404)
            if current.terminal:
                raise StoreError(mesg=f"Job {id} already {current.state}", code=409)

            status = replace(
                current,
                state=state,
                payload=dict(payload) if payload is not None else current.payload,
                message=message if message is not None else current.message,
                num=num if num is not None else current.num,
                total=total if total is not None else current.total,
                time=self._clock.time(),
            )
            self._statuses[id] = status

        logger.debug("Job %s is now %s", id, state)
        return status

    def working(self, id: str, *, message: str | None = None, num: int | None = None, total: int | None = None) -> JobStatus:
        return self.update(id, "working", message=message, num=num, total=total)

    def complete(self, id: str, payload: Mapping[str, Any] | None = None, *, message: str | None = None) -> JobStatus:
        return self.update(id, "completed", payload=payload or {}, message=message)

    def fail(self, id: str, payload: Mapping[str, Any] | None = None, *, message: str | None = None) -> JobStatus:
        return self.update(id, "failed", payload=payload or {}, message=message)

    def kill(self, id: str, *, message: str | None = None) -> JobStatus:
        return self.update(id, "killed", payload={}, message=message)
