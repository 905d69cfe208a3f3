from __future__ import annotations

import datetime
import json
from typing import TYPE_CHECKING, Any

import pytest
import requests

from jobfuture import Future, StatusHandle
from jobfuture.encoders import JsonEncoder, JsonPickleEncoder
from jobfuture.errors import StoreError
from jobfuture.retry_policies import Constant
from jobfuture.stores import RemoteStore

if TYPE_CHECKING:
    from requests import PreparedRequest

    from jobfuture.clocks import StepClock


class FakeServer:
    def __init__(self, *responses: requests.Response | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[PreparedRequest] = []

    def send(self, session: requests.Session, req: PreparedRequest, **kwargs: Any) -> requests.Response:
        self.requests.append(req)
        res = self.responses.pop(0)
        if isinstance(res, Exception):
            raise res
        res.url = req.url or ""
        return res


def response(status_code: int, body: Any = None) -> requests.Response:
    res = requests.Response()
    res.status_code = status_code
    res._content = json.dumps(body).encode() if body is not None else b""
    return res


@pytest.fixture
def server(monkeypatch: pytest.MonkeyPatch) -> FakeServer:
    server = FakeServer()
    monkeypatch.setattr(requests.Session, "send", lambda s, req, **kwargs: server.send(s, req, **kwargs))
    return server


def test_url_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JOBFUTURE_HOST_STORE", raising=False)
    monkeypatch.setenv("JOBFUTURE_HOST", "http://jobs.internal")
    monkeypatch.setenv("JOBFUTURE_PORT_STORE", "9000")
    assert RemoteStore().url == "http://jobs.internal:9000"

    monkeypatch.setenv("JOBFUTURE_HOST_STORE", "http://store.internal")
    assert RemoteStore().url == "http://store.internal:9000"
    assert RemoteStore(host="http://other", port="1").url == "http://other:1"


def test_submit(server: FakeServer) -> None:
    server.responses.append(response(201, {"id": "abc"}))
    store = RemoteStore(host="http://store", port="8001")

    assert store.submit("resize", {"width": 10}) == "abc"

    [req] = server.requests
    assert req.method == "POST"
    assert req.url == "http://store:8001/jobs"
    assert req.body is not None
    body = json.loads(req.body)
    assert body["type"] == "resize"
    assert JsonEncoder().decode(body["params"]) == {"width": 10}


def test_submit_with_malformed_response(server: FakeServer) -> None:
    server.responses.append(response(201, {"job": "abc"}))

    with pytest.raises(StoreError):
        RemoteStore().submit("resize", {})


def test_get_status(server: FakeServer) -> None:
    payload = JsonEncoder().encode({"x": 1})
    server.responses.append(response(200, {"id": "abc", "state": "completed", "payload": payload, "type": "resize"}))

    status = RemoteStore(host="http://store").get_status("abc")

    assert status is not None
    assert status.completed
    assert status["x"] == 1
    assert server.requests[0].method == "GET"
    assert server.requests[0].url == "http://store:8001/jobs/abc"


def test_get_status_of_unknown_job(server: FakeServer) -> None:
    server.responses.append(response(404, {"error": {"message": "not found", "code": 40400}}))
    assert RemoteStore().get_status("abc") is None


def test_get_status_with_malformed_body(server: FakeServer) -> None:
    server.responses.append(response(200, {"id": "abc", "state": "paused"}))

    with pytest.raises(StoreError):
        RemoteStore().get_status("abc")


def test_server_error_is_not_retried_by_default(server: FakeServer) -> None:
    server.responses.append(response(500, {"error": {"message": "internal", "code": 50000}}))

    with pytest.raises(StoreError) as e:
        RemoteStore().get_status("abc")

    assert e.value.mesg == "internal"
    assert len(server.requests) == 1


def test_client_error_is_never_retried(server: FakeServer) -> None:
    server.responses.append(response(403, {"error": {"message": "forbidden", "code": 40300}}))

    with pytest.raises(StoreError):
        RemoteStore(retry_policy=Constant(delay=0, max_retries=3)).get_status("abc")

    assert len(server.requests) == 1


def test_retries_follow_retry_policy(server: FakeServer) -> None:
    server.responses.extend(
        [
            requests.exceptions.ConnectionError(),
            response(500),
            response(200, {"id": "abc", "state": "working"}),
        ]
    )

    status = RemoteStore(retry_policy=Constant(delay=0, max_retries=2)).get_status("abc")
    assert status is not None
    assert status.working
    assert len(server.requests) == 3


def test_retries_exhausted(server: FakeServer) -> None:
    server.responses.extend([requests.exceptions.Timeout()] * 3)

    with pytest.raises(StoreError) as e:
        RemoteStore(retry_policy=Constant(delay=0, max_retries=2)).get_status("abc")

    assert e.value.mesg == "Request timed out"
    assert len(server.requests) == 3


def test_auth_from_environment(server: FakeServer, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JOBFUTURE_USERNAME", "user")
    monkeypatch.setenv("JOBFUTURE_PASSWORD", "pass")
    server.responses.append(response(200, {"id": "abc", "state": "queued"}))

    RemoteStore().get_status("abc")
    assert server.requests[0].headers["Authorization"].startswith("Basic ")


def test_jsonpickle_encoder_keeps_python_types(server: FakeServer) -> None:
    encoder = JsonPickleEncoder()
    payload = encoder.encode({"shape": (3, 4)})
    server.responses.append(response(200, {"id": "abc", "state": "completed", "payload": payload}))

    status = RemoteStore(encoder=encoder).get_status("abc")
    assert status is not None
    assert status["shape"] == (3, 4)


def test_future_fails_fast_on_store_error(server: FakeServer, clock: StepClock) -> None:
    server.responses.append(requests.exceptions.ConnectionError())
    f = Future(StatusHandle("abc", RemoteStore()), clock=clock)

    with pytest.raises(StoreError) as e:
        f.wait()

    assert e.value.mesg == "Failed to connect"
    assert clock.time() == 0


def test_submit_with_unencodable_params(server: FakeServer) -> None:
    with pytest.raises(TypeError):
        RemoteStore().submit("report", {"day": datetime.date(2024, 1, 1)})

    assert server.requests == []


@pytest.mark.parametrize("body", [{"error": "bad request"}, {"error": ["bad", "request"]}, ["bad request"]])
def test_error_body_without_error_object(server: FakeServer, body: Any) -> None:
    server.responses.append(response(400, body))

    with pytest.raises(StoreError) as e:
        RemoteStore().get_status("abc")

    assert e.value.code == pytest.approx(100.4)
    assert "bad" in e.value.mesg
