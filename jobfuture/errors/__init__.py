from __future__ import annotations

from .errors import ContinuationError, JobFutureError, NotResolvedError, StoreError, WaitTimeoutError

__all__ = ["ContinuationError", "JobFutureError", "NotResolvedError", "StoreError", "WaitTimeoutError"]
