from __future__ import annotations

from collections.abc import AsyncIterator
from threading import Lock

import pytest
from httpx import ASGITransport, AsyncClient

from httpshape.config import get_settings
from httpshape.main import create_app
from httpshape.models.schemas import RequestMetadata, ResponseMetadata
from httpshape.observability.metrics import reset_metrics


class RecordingSink:
    """Test spy: remembers every call in arrival order."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.calls: list[tuple[str, RequestMetadata | ResponseMetadata]] = []

    def log_request(self, request: RequestMetadata) -> None:
        with self._lock:
            self.calls.append(("request", request))

    def log_response(self, response: ResponseMetadata) -> None:
        with self._lock:
            self.calls.append(("response", response))

    @property
    def requests(self) -> list[RequestMetadata]:
        return [value for kind, value in self.calls if kind == "request"]  # type: ignore[misc]

    @property
    def responses(self) -> list[ResponseMetadata]:
        return [value for kind, value in self.calls if kind == "response"]  # type: ignore[misc]

    def pairs(self) -> list[tuple[RequestMetadata, ResponseMetadata]]:
        return list(zip(self.requests, self.responses))


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SAMPLE_RATE", "1.0")
    monkeypatch.setenv("SEED_PATIENTS", "3")
    monkeypatch.setenv("ENABLE_METRICS_ENDPOINT", "true")
    monkeypatch.delenv("METADATA_LOG_FILE", raising=False)
    get_settings.cache_clear()
    reset_metrics()

    yield

    get_settings.cache_clear()
    reset_metrics()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
async def api_client(sink: RecordingSink) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=create_app(sink=sink))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
