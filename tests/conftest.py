# tests/conftest.py
"""Pytest fixtures shared by the relay and API tests.

The upstream completion API is replaced by an ``httpx.MockTransport`` so no
test ever leaves the process.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from advisor.relay import AdvisorRelay
from advisor.tools import CategoryClassifier


# Sections are padded so each course's 2000-character window sees only its
# own heading.
PADDING = "." * 2500

BULLETIN_TEXT = (
    "Foundation Course Requirements\n"
    "MATH1510 Calculus I\n"
    + PADDING
    + "\nComputer Science Core\n"
    "CSE2010 Data Structures\n"
    + PADDING
    + "\nFree Electives\n"
    "DAT3000 Special Topics\n"
)


class FakeUpstream:
    """Completion endpoint stand-in that records the requests it receives."""

    def __init__(self, status_code=200, body=None, exc=None):
        self.status_code = status_code
        self.body = body if body is not None else {"output_text": "Take CSE2010 next."}
        self.exc = exc
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def sent_payload(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def make_relay():
    """Build a relay wired to the given fake upstream."""

    def factory(fake: FakeUpstream, api_key="sk-test") -> AdvisorRelay:
        return AdvisorRelay(api_key=api_key, transport=fake.transport)

    return factory


@pytest.fixture
def classifier():
    return CategoryClassifier(BULLETIN_TEXT)


@pytest.fixture
def client(monkeypatch, classifier, upstream, make_relay):
    """Test client with the bulletin classifier and a fake upstream installed."""
    from app.main import app

    monkeypatch.setattr(app.state, "classifier", classifier)
    monkeypatch.setattr(app.state, "relay", make_relay(upstream))
    return TestClient(app)
