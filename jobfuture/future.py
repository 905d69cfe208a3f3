from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING, Any

from jobfuture.delay_queue import DelayQ
from jobfuture.errors import ContinuationError, NotResolvedError, WaitTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from jobfuture.handle import StatusHandle
    from jobfuture.models.clock import Clock
    from jobfuture.models.job_status import JobStatus

type Continuation = Callable[[Any], Future | Any]

DEFAULT_TIMEOUT = 10.0
DEFAULT_INTERVAL = 0.2

logger = logging.getLogger(__name__)


class Future:
    """The eventual outcome of a job, or of a chain of jobs.

    A future either chases a submitted job through its StatusHandle, or is a
    link created by `then` that waits on an upstream future and feeds its
    result to a continuation. When the continuation returns another future
    the link forwards to it, otherwise the returned value is the result.

    Nothing happens in the background. Chains only advance while `wait` (or
    `wait_all`) polls them, and the store is only read for the job at the
    front of the chain.
    """

    def __init__(
        self,
        handle: StatusHandle | None = None,
        *,
        upstream: Future | None = None,
        continuation: Continuation | None = None,
        clock: Clock | None = None,
    ) -> None:
        if (handle is None) == (upstream is None):
            msg = "future must wrap exactly one of a handle or an upstream future"
            raise ValueError(msg)
        if (upstream is None) != (continuation is None):
            msg = "an upstream future requires a continuation and vice versa"
            raise ValueError(msg)

        self._handle = handle
        self._upstream = upstream
        self._continuation = continuation
        self._downstream: Future | None = None
        self._clock: Clock = clock or time

        self._done = False
        self._value: Any = None
        self._error: ContinuationError | None = None

    def __repr__(self) -> str:
        return f"Future(id={self.id!r}, done={self._done})"

    @property
    def id(self) -> str | None:
        """Id of the job this future currently stands for.

        None for a link whose continuation has not produced a job yet, or
        produced a plain value instead.
        """
        handle = self._active()._handle
        return handle.id if handle else None

    def done(self) -> bool:
        return self._done

    def result(self) -> Any:
        if not self._done:
            raise NotResolvedError(self.id)
        return self._value

    def status(self) -> JobStatus | None:
        handle = self._active()._handle
        if handle is None:
            return None
        return handle.status()

    def then(self, continuation: Continuation) -> Future:
        if not callable(continuation):
            msg = f"continuation must be callable, got {type(continuation).__name__}"
            raise TypeError(msg)

        return Future(upstream=self, continuation=continuation, clock=self._clock)

    def wait(self, timeout: float = DEFAULT_TIMEOUT, interval: float = DEFAULT_INTERVAL) -> Any:
        """Poll until the whole chain is resolved and return its result.

        The result is the terminal JobStatus of the last job in the chain, or
        the value returned by the last continuation when it is not a future.
        A single deadline covers every link. Timing out leaves the jobs
        running, it only stops polling.
        """
        _validate(timeout, interval)
        deadline = self._clock.time() + timeout

        while not self._poll():
            if self._clock.time() >= deadline:
                logger.warning("Timedout after %ss waiting on job %s", timeout, self._chasing())
                raise WaitTimeoutError(timeout, [self._chasing()])
            self._clock.sleep(max(0, min(interval, deadline - self._clock.time())))

        return self._value

    def _active(self) -> Future:
        node = self
        while node._downstream is not None:
            node = node._downstream
        return node

    def _chasing(self) -> str | None:
        # id of the job whose status currently blocks this future
        node = self
        while not node._done:
            if node._downstream is not None:
                node = node._downstream
            elif node._upstream is not None:
                node = node._upstream
            else:
                break
        return node._handle.id if node._handle else None

    def _poll(self) -> bool:
        """Advance the chain as far as the store allows, one tick.

        Walks the links iteratively so chains of any length are safe. Returns
        True once this future is resolved.
        """
        path: list[Future] = []
        node = self

        while True:
            if node._error is not None:
                raise node._error

            if node._done:
                if not path:
                    return True
                parent = path.pop()
                parent._settle(node)
                node = parent
            elif node._downstream is not None:
                path.append(node)
                node = node._downstream
            elif node._upstream is not None:
                path.append(node)
                node = node._upstream
            else:
                assert node._handle is not None, "unresolved future must have a handle"
                status = node._handle.status()
                if status is None or not status.terminal:
                    logger.debug("Job %s is %s", node._handle.id, status.state if status else "unknown")
                    return False

                logger.debug("Job %s reached %s", node._handle.id, status.state)
                node._resolve(status)

    def _settle(self, child: Future) -> None:
        if child is self._downstream:
            self._resolve(child._value)
            return

        continuation = self._continuation
        assert continuation is not None, "continuation must be pending"

        # the continuation runs at most once, even when it raises
        self._upstream = None
        self._continuation = None

        logger.debug("Running continuation of job %s", child.id)
        try:
            value = continuation(child._value)
            if isinstance(value, Future) and value._reaches(self):
                msg = "continuation returned a future that waits on its own result"
                raise ValueError(msg)
        except Exception as e:
            self._error = ContinuationError(child.id, e)
            raise self._error from e

        if isinstance(value, Future):
            logger.debug("Chained job %s onto job %s", value.id, child.id)
            self._downstream = value
        else:
            self._resolve(value)

    def _reaches(self, target: Future) -> bool:
        # links have at most one of a downstream or an upstream
        node: Future | None = self
        while node is not None:
            if node is target:
                return True
            node = node._downstream or node._upstream
        return False

    def _resolve(self, value: Any) -> None:
        self._done = True
        self._value = value


def wait_all(
    futures: Sequence[Future],
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = DEFAULT_INTERVAL,
    *,
    clock: Clock | None = None,
) -> list[Any]:
    """Wait on several futures at once and return their results in order.

    Every future is polled on its own schedule, one interval after its
    previous poll, under one shared deadline. Either all results are
    returned or WaitTimeoutError is raised.
    """
    _validate(timeout, interval)
    futures = list(futures)
    for future in futures:
        if not isinstance(future, Future):
            msg = f"futures must be `Future`, got {type(future).__name__}"
            raise TypeError(msg)

    clock = clock or (futures[0]._clock if futures else time)
    deadline = clock.time() + timeout

    results: list[Any] = [None] * len(futures)
    pending = set(range(len(futures)))

    queue = DelayQ[int]()
    for i in pending:
        queue.add(i, clock.time())

    while (next_time := queue.next_time()) is not None:
        now = clock.time()
        wake = min(next_time, deadline)
        if wake > now:
            clock.sleep(wake - now)

        # at the deadline every pending future gets one last poll
        now = clock.time()
        for i in queue.get(now if now < deadline else math.inf):
            if futures[i]._poll():
                results[i] = futures[i]._value
                pending.discard(i)
            else:
                queue.add(i, clock.time() + interval)

        if pending and clock.time() >= deadline:
            ids = [futures[i]._chasing() for i in sorted(pending)]
            logger.warning("Timedout after %ss waiting on %d of %d jobs", timeout, len(ids), len(futures))
            raise WaitTimeoutError(timeout, ids)

    return results


def _validate(timeout: float, interval: float) -> None:
    if not isinstance(timeout, (int, float)) or isinstance(timeout, bool):
        msg = f"timeout must be `int | float`, got {type(timeout).__name__}"
        raise TypeError(msg)
    if not isinstance(interval, (int, float)) or isinstance(interval, bool):
        msg = f"interval must be `int | float`, got {type(interval).__name__}"
        raise TypeError(msg)
    if timeout < 0:
        msg = f"timeout must be greater than or equal to 0, got {timeout}"
        raise ValueError(msg)
    if interval <= 0:
        msg = f"interval must be greater than 0, got {interval}"
        raise ValueError(msg)
