from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal

from jobfuture.future import DEFAULT_INTERVAL, DEFAULT_TIMEOUT, Future, wait_all
from jobfuture.handle import StatusHandle
from jobfuture.logging import set_level
from jobfuture.models.clock import Clock
from jobfuture.models.store import Store
from jobfuture.stores import LocalStore, RemoteStore

if TYPE_CHECKING:
    from collections.abc import Sequence

    from jobfuture.models.encoder import Encoder
    from jobfuture.models.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)


class Client:
    """Submits jobs to a status store and hands back futures for them."""

    def __init__(
        self,
        *,
        store: Store | None = None,
        clock: Clock | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        interval: float = DEFAULT_INTERVAL,
        log_level: int | Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = logging.NOTSET,
    ) -> None:
        # store
        if store is not None and not isinstance(store, Store):
            msg = f"store must be `Store | None`, got {type(store).__name__}"
            raise TypeError(msg)

        # clock
        if clock is not None and not isinstance(clock, Clock):
            msg = f"clock must be `Clock | None`, got {type(clock).__name__}"
            raise TypeError(msg)

        # log level
        if not isinstance(log_level, (int, str)):
            msg = f"log_level must be an int or a str, got {type(log_level).__name__}"
            raise TypeError(msg)

        self._clock: Clock = clock or time
        self._store = store or LocalStore(clock=self._clock)
        self._timeout = timeout
        self._interval = interval

        set_level(log_level)

    @classmethod
    def local(
        cls,
        clock: Clock | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        interval: float = DEFAULT_INTERVAL,
        log_level: int | Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = logging.INFO,
    ) -> Client:
        """Create a client backed by an in-memory LocalStore.

        Nothing leaves the process, jobs are picked up from the store with
        `LocalStore.next` and reported on with its worker methods.
        """
        return cls(
            store=LocalStore(clock=clock),
            clock=clock,
            timeout=timeout,
            interval=interval,
            log_level=log_level,
        )

    @classmethod
    def remote(
        cls,
        host: str | None = None,
        port: str | None = None,
        auth: tuple[str, str] | None = None,
        encoder: Encoder[Any, str | None] | None = None,
        retry_policy: RetryPolicy | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        interval: float = DEFAULT_INTERVAL,
        log_level: int | Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = logging.INFO,
    ) -> Client:
        """Create a client backed by a status service reached over http.

        Host, port and credentials fall back to the JOBFUTURE_HOST,
        JOBFUTURE_PORT_STORE, JOBFUTURE_USERNAME and JOBFUTURE_PASSWORD
        environment variables.
        """
        return cls(
            store=RemoteStore(host=host, port=port, auth=auth, encoder=encoder, retry_policy=retry_policy),
            timeout=timeout,
            interval=interval,
            log_level=log_level,
        )

    @property
    def store(self) -> Store:
        return self._store

    @property
    def clock(self) -> Clock:
        return self._clock

    def job(self, name: str) -> JobType:
        return JobType(name, self)

    def future(self, job_type: str, params: Mapping[str, Any] | None = None) -> Future:
        return self.job(job_type).future(params)

    def get(self, id: str) -> Future:
        """Wrap a job that was submitted elsewhere."""
        if not isinstance(id, str):
            msg = f"id must be `str`, got {type(id).__name__}"
            raise TypeError(msg)

        return Future(StatusHandle(id, self._store), clock=self._clock)

    def wait_all(
        self,
        futures: Sequence[Future],
        timeout: float | None = None,
        interval: float | None = None,
    ) -> list[Any]:
        return wait_all(
            futures,
            timeout=self._timeout if timeout is None else timeout,
            interval=self._interval if interval is None else interval,
            clock=self._clock,
        )


class JobType:
    """Factory for futures of one kind of job."""

    def __init__(self, name: str, client: Client) -> None:
        if not isinstance(name, str):
            msg = f"name must be `str`, got {type(name).__name__}"
            raise TypeError(msg)
        if not name:
            msg = "name must not be empty"
            raise ValueError(msg)

        self._name = name
        self._client = client

    def __repr__(self) -> str:
        return f"JobType({self._name!r})"

    @property
    def name(self) -> str:
        return self._name

    def future(self, params: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Future:
        """Submit a job of this type now and return a future for it."""
        if params is not None and not isinstance(params, Mapping):
            msg = f"params must be `Mapping | None`, got {type(params).__name__}"
            raise TypeError(msg)

        merged = {**(params or {}), **kwargs}
        for key in merged:
            if not isinstance(key, str):
                msg = f"param names must be `str`, got {type(key).__name__}"
                raise TypeError(msg)

        id = self._client.store.submit(self._name, merged)
        logger.debug("Submitted %s job %s", self._name, id)

        return Future(StatusHandle(id, self._client.store), clock=self._client.clock)
