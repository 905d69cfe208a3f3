from __future__ import annotations

import logging
import os
import time
from typing import TYPE_CHECKING, Any

import requests
from requests import PreparedRequest, Request, Session

from jobfuture.encoders import JsonEncoder
from jobfuture.errors import StoreError
from jobfuture.models.job_status import JobStatus
from jobfuture.retry_policies import Never

if TYPE_CHECKING:
    from collections.abc import Mapping

    from jobfuture.models.encoder import Encoder
    from jobfuture.models.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)


class RemoteStore:
    def __init__(
        self,
        host: str | None = None,
        port: str | None = None,
        auth: tuple[str, str] | None = None,
        encoder: Encoder[Any, str | None] | None = None,
        timeout: float | tuple[float, float] = 5,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._host = host or os.getenv("JOBFUTURE_HOST_STORE", os.getenv("JOBFUTURE_HOST", "http://localhost"))
        self._port = port or os.getenv("JOBFUTURE_PORT_STORE", "8001")
        self._auth = auth or ((os.getenv("JOBFUTURE_USERNAME", ""), os.getenv("JOBFUTURE_PASSWORD", "")) if "JOBFUTURE_USERNAME" in os.environ else None)
        self._encoder = encoder or JsonEncoder()
        self._timeout = timeout

        # a failed read surfaces on the poll tick it happened on
        self._retry_policy = retry_policy or Never()

    @property
    def url(self) -> str:
        return f"{self._host}:{self._port}"

    @property
    def encoder(self) -> Encoder[Any, str | None]:
        return self._encoder

    def submit(self, job_type: str, params: Mapping[str, Any]) -> str:
        req = Request(
            method="post",
            url=f"{self.url}/jobs",
            json={
                "type": job_type,
                "params": self._encoder.encode(dict(params)),
            },
        )

        res = self.call(req.prepare())
        try:
            return res["id"]
        except (KeyError, TypeError) as e:
            raise StoreError(mesg="Malformed submit response", code=0, details=res) from e

    def get_status(self, id: str) -> JobStatus | None:
        req = Request(
            method="get",
            url=f"{self.url}/jobs/{id}",
        )

        res = self.call(req.prepare(), missing_ok=True)
        if res is None:
            return None

        try:
            return JobStatus.from_dict({**res, "payload": self._encoder.decode(res.get("payload"))})
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(mesg="Malformed status response", code=0, details=res) from e

    def call(self, req: PreparedRequest, *, missing_ok: bool = False) -> Any:
        attempt = 0
        req.prepare_auth(self._auth)

        with Session() as s:
            while True:
                attempt += 1
                delay = self._retry_policy.next(attempt)

                try:
                    res = s.send(req, timeout=self._timeout)
                    if res.status_code == 204 or (missing_ok and res.status_code == 404):
                        return None

                    res.raise_for_status()
                    data = res.json()
                except requests.exceptions.HTTPError as e:
                    try:
                        error = e.response.json()["error"]
                    except Exception:
                        error = None
                    if not isinstance(error, dict):
                        error = {"message": e.response.text, "code": e.response.status_code}

                    # Only a 500 response code should be retried
                    if delay is None or e.response.status_code != 500:
                        mesg = error.get("message", "Unknown exception")
                        code = error.get("code", 0)
                        details = error.get("details", None)
                        raise StoreError(mesg=mesg, code=code, details=details) from e
                except requests.exceptions.Timeout as e:
                    if delay is None:
                        raise StoreError(mesg="Request timed out", code=0) from e
                except requests.exceptions.ConnectionError as e:
                    if delay is None:
                        raise StoreError(mesg="Failed to connect", code=0) from e
                except requests.exceptions.JSONDecodeError as e:
                    raise StoreError(mesg="Response is not valid json", code=0) from e
                except requests.exceptions.RequestException as e:
                    raise StoreError(mesg="Unknown exception", code=0) from e
                else:
                    return data

                logger.warning("Request to %s failed on attempt %d, retrying in %ss", req.url, attempt, delay)
                time.sleep(delay)
