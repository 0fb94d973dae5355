from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from registration.services.relay import Failure, RelayOutcome, Success
from registration.services.sheet_store import SheetStore


SAMPLE = {
    "name": "Goutam",
    "enrollment": "E23BU1234",
    "course": "B.Tech CSE",
    "phone": "9876543210",
    "residency": "Hosteller",
    "teams": ["Tech"],
    "why": "I love technology and want to learn.",
    "portfolio": "https://github.com/x",
    "experience": "",
}


@pytest.fixture
def sample() -> Dict[str, Any]:
    return json.loads(json.dumps(SAMPLE))


class RecordingRelay:
    """Relay giả: ghi lại application nhận được và trả outcome cố định."""

    def __init__(self, outcome: RelayOutcome | None = None):
        self.outcome = outcome or Success()
        self.sent: List[Any] = []

    def send(self, application):
        self.sent.append(application)
        return self.outcome


@pytest.fixture
def ok_relay() -> RecordingRelay:
    return RecordingRelay(Success())


@pytest.fixture
def failing_relay() -> RecordingRelay:
    return RecordingRelay(Failure("quota exceeded"))


@pytest.fixture
def sheet_store(tmp_path) -> SheetStore:
    return SheetStore(tmp_path / "registrations.xlsx", "Registrations")


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    def _make(handler):
        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def app():
    from registration.main import app as _app

    yield _app
    _app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
