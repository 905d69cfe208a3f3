from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from jobfuture.models.job_status import JobStatus


@runtime_checkable
class Store(Protocol):
    def submit(
        self,
        job_type: str,
        params: Mapping[str, Any],
    ) -> str: ...

    def get_status(
        self,
        id: str,
    ) -> JobStatus | None: ...
