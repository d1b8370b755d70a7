import json
from typing import Any, Optional

import pytest
import requests

from clusterprobe.configuration import ClientConfiguration


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr("clusterprobe.watch.monotonic", fake.monotonic)
    monkeypatch.setattr("clusterprobe.watch.sleep", fake.sleep)
    return fake


def make_response(
    status: int, data: Any = None, reason: str = "", headers: Optional[dict] = None
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response._content = json.dumps(data).encode("utf-8") if data is not None else b""
    response.headers.update(headers or {})
    return response


class FakeSession:
    def __init__(self):
        self.routes: dict[tuple[str, str], list[requests.Response]] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.headers: dict[str, str] = {}

    def add(self, method: str, path: str, *responses: requests.Response):
        self.routes.setdefault((method, path), []).extend(responses)

    def request(self, method, url, json=None, timeout=None):
        path = url.split("://", 1)[-1]
        path = path[path.index("/"):]
        self.calls.append((method, path, json))
        responses = self.routes.get((method, path))
        if not responses:
            return make_response(404, {"message": "not found"}, "Not Found")
        # the last response repeats
        return responses.pop(0) if len(responses) > 1 else responses[0]


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def config(session) -> ClientConfiguration:
    _config = ClientConfiguration(
        token="test-token",
        kubeconfig="/tmp/clusterprobe-test-kubeconfig",
        organization_id="org",
        provision_base_url="https://provision.test",
        proxy_base_url="https://proxy.test",
        debug=True,
    )
    _config.HTTP_SESSION = session
    return _config
