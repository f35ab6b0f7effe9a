import json

import httpx
import pytest
from fastapi.testclient import TestClient

from services.sim_service.app.main import MODEL, app
from simwrap.api.client import SimulationClient
from simwrap.config.settings import get_settings

BASE_URL = "https://sim.example.test/api/"


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("SIMULATION_SERVER", "sim.example.test")
    monkeypatch.delenv("SIM_SCHEME", raising=False)
    monkeypatch.delenv("SIM_API_PREFIX", raising=False)
    monkeypatch.delenv("SIM_INSECURE_TLS", raising=False)
    monkeypatch.delenv("SIM_TIMEOUT_S", raising=False)
    return get_settings()


class Recorder:
    """
    Collects every request the client sends and answers from a queue of
    (status, body) pairs, or with 200 {} once the queue is empty.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.replies: list[tuple[int, object]] = []

    def reply(self, status: int, body=None) -> "Recorder":
        self.replies.append((status, body))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.replies.pop(0) if self.replies else (200, {})
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def mock_api(recorder):
    client = SimulationClient(BASE_URL, transport=httpx.MockTransport(recorder.handler))
    try:
        yield client
    finally:
        client.close()


@pytest.fixture
def sim_service():
    """
    The fake simulation service, wiped before each test.
    """
    MODEL.reset()
    return app


@pytest.fixture
def sim_api(sim_service):
    http = TestClient(sim_service, base_url="https://testserver/api/")
    client = SimulationClient(http_client=http)
    try:
        yield client
    finally:
        client.close()
