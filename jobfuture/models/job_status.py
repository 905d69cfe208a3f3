from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final, Literal, get_args

if TYPE_CHECKING:
    from collections.abc import Mapping

type State = Literal["queued", "working", "completed", "failed", "killed"]

STATES: Final = get_args(State.__value__)
TERMINAL_STATES: Final = ("completed", "failed", "killed")


@dataclass(frozen=True)
class JobStatus:
    """Snapshot of a job as last reported to the status store.

    The payload is written by the job itself when it completes or fails and
    is None while the job is still running. Once the state is terminal the
    store never changes it again.
    """

    id: str
    state: State
    payload: dict[str, Any] | None = None
    type: str | None = None
    message: str | None = None
    num: int | None = None
    total: int | None = None
    time: float | None = field(default=None, compare=False)

    @property
    def queued(self) -> bool:
        return self.state == "queued"

    @property
    def working(self) -> bool:
        return self.state == "working"

    @property
    def completed(self) -> bool:
        return self.state == "completed"

    @property
    def failed(self) -> bool:
        return self.state == "failed"

    @property
    def killed(self) -> bool:
        return self.state == "killed"

    @property
    def terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def pct_complete(self) -> int:
        if self.completed:
            return 100
        if not self.total or self.num is None:
            return 0
        return min(100, int(self.num * 100 / self.total))

    def __getitem__(self, key: str) -> Any:
        if self.payload is None:
            raise KeyError(key)
        return self.payload[key]

    def get(self, key: str, default: Any = None) -> Any:
        if self.payload is None:
            return default
        return self.payload.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "state": self.state,
            "payload": self.payload,
            "type": self.type,
            "message": self.message,
            "num": self.num,
            "total": self.total,
            "time": self.time,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JobStatus:
        state = data["state"]
        if state not in STATES:
            msg = f"state must be one of {STATES}, got {state!r}"
            raise ValueError(msg)

        payload = data.get("payload")
        return cls(
            id=data["id"],
            state=state,
            payload=dict(payload) if payload is not None else None,
            type=data.get("type"),
            message=data.get("message"),
            num=data.get("num"),
            total=data.get("total"),
            time=data.get("time"),
        )
