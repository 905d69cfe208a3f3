from __future__ import annotations

import json
from typing import Any


class JobFutureError(Exception):
    def __init__(self, mesg: str, code: float, details: Any = None) -> None:
        super().__init__(mesg)
        self.mesg = mesg
        self.code = code
        try:
            self.details = json.dumps(details, indent=2) if details else None
        except Exception:
            self.details = details

    def __str__(self) -> str:
        return f"[{self.code:09.5f}] {self.mesg}{'\n' + self.details if self.details else ''}"

    def __reduce__(self) -> str | tuple[Any, ...]:
        return (self.__class__, (self.mesg, self.code, self.details))


# Error codes 100-199


class StoreError(JobFutureError):
    def __init__(self, mesg: str, code: int, details: Any = None) -> None:
        super().__init__(mesg, float(f"{100}.{code}"), details)

    def __reduce__(self) -> str | tuple[Any, ...]:
        return (self.__class__, (self.mesg, self.code, self.details))


# Error codes 200-299


class WaitTimeoutError(JobFutureError, TimeoutError):
    def __init__(self, timeout: float, pending: list[str | None] | None = None) -> None:
        pending = pending or []
        super().__init__(f"Wait timedout after {timeout}s with {len(pending)} job(s) unresolved", 201)
        self.timeout = timeout
        self.pending = pending

    def __reduce__(self) -> str | tuple[Any, ...]:
        return (self.__class__, (self.timeout, self.pending))


class ContinuationError(JobFutureError):
    def __init__(self, job_id: str | None, error: BaseException) -> None:
        super().__init__(f"Continuation of job {job_id} raised {error!r}", 202)
        self.job_id = job_id
        self.error = error

    def __reduce__(self) -> str | tuple[Any, ...]:
        return (self.__class__, (self.job_id, self.error))


class NotResolvedError(JobFutureError):
    def __init__(self, job_id: str | None) -> None:
        super().__init__(f"Future for job {job_id} has not been resolved, call wait first", 203)
        self.job_id = job_id

    def __reduce__(self) -> str | tuple[Any, ...]:
        return (self.__class__, (self.job_id,))
