"""Shared fixtures for bytebardctl tests.

Network access is replaced by ``EchoTransport``, which records every request
it receives and answers with a JSON echo of that request unless a canned
response has been queued.
"""

import json
from typing import Any, Dict, List, Mapping, Optional

import pytest

from bytebardctl.client import BytebardClient
from bytebardctl.executor import RequestExecutor
from bytebardctl.transport import TransportResponse

TEST_API_KEY = "bb_test_0123456789abcdef"


class EchoTransport:
    """Transport stub that records requests and echoes them back."""

    def __init__(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.responses: List[TransportResponse] = []

    def queue(self, payload: Any, status_code: int = 200) -> None:
        """Queue a JSON payload to return instead of the echo."""
        self.responses.append(TransportResponse(status_code, json.dumps(payload).encode("utf-8")))

    def queue_raw(self, content: bytes, status_code: int = 200) -> None:
        self.responses.append(TransportResponse(status_code, content))

    def send(self, url: str, method: str, headers: Mapping[str, str], body: Any = None) -> TransportResponse:
        if hasattr(body, "read"):
            body = body.read()

        request = {
            "url": url,
            "method": method,
            "headers": dict(headers),
            "body": body,
        }
        self.requests.append(request)

        if self.responses:
            return self.responses.pop(0)

        echo = dict(request)
        echo["body"] = body.decode("utf-8") if isinstance(body, bytes) else body
        return TransportResponse(200, json.dumps(echo).encode("utf-8"))

    @property
    def last(self) -> Dict[str, Any]:
        return self.requests[-1]

    def last_json(self) -> Optional[Any]:
        body = self.last["body"]
        return json.loads(body) if body is not None else None


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep real credentials and config out of every test."""
    monkeypatch.delenv("BYTEBARD_API_KEY", raising=False)
    monkeypatch.delenv("BYTEBARD_API_URL", raising=False)
    monkeypatch.delenv("BYTEBARDCTL_OUTPUT_FORMAT", raising=False)
    monkeypatch.setenv("BYTEBARDCTL_CONFIG_DIR", str(tmp_path / "config"))


@pytest.fixture
def transport():
    """An EchoTransport instance."""
    return EchoTransport()


@pytest.fixture
def executor(transport):
    """A RequestExecutor wired to the echo transport."""
    return RequestExecutor(transport=transport, base_url="https://bytebard.co/api")


@pytest.fixture
def client(transport):
    """A BytebardClient wired to the echo transport."""
    return BytebardClient(TEST_API_KEY, transport=transport)
