"""Logging capabilities the instrumentation middleware reports to.

The middleware only depends on :class:`MetadataSink`; output format and
destination are decided here. Every sink may be called concurrently from
several in-flight requests.
"""

from __future__ import annotations

import json
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Any, Protocol, TextIO, runtime_checkable

import structlog

from httpshape.models.schemas import RequestMetadata, ResponseMetadata
from httpshape.observability.metrics import InMemoryMetrics, get_metrics

if TYPE_CHECKING:
    from httpshape.config import Settings


@runtime_checkable
class MetadataSink(Protocol):
    def log_request(self, request: RequestMetadata) -> None: ...

    def log_response(self, response: ResponseMetadata) -> None: ...


class NullSink:
    def log_request(self, request: RequestMetadata) -> None:
        return None

    def log_response(self, response: ResponseMetadata) -> None:
        return None


class StructlogSink:
    """Emit one structured event per metadata value."""

    def __init__(self, logger_name: str = "httpshape.access") -> None:
        self.logger_name = logger_name

    def log_request(self, request: RequestMetadata) -> None:
        structlog.get_logger(self.logger_name).info(
            "http_request_received",
            method=request.method,
            path=request.path,
            remote_addr=request.remote_addr,
            user_agent=request.user_agent,
            content_type=request.content_type,
            received_at=request.timestamp.isoformat(),
        )

    def log_response(self, response: ResponseMetadata) -> None:
        structlog.get_logger(self.logger_name).info(
            "http_response_sent",
            status_code=response.status_code,
            content_length=response.content_length,
            elapsed_ms=round(response.duration_ms, 2),
        )


class JsonLinesFileSink:
    """Append one JSON object per metadata value to a file.

    The file is opened once, line-buffered, and shared by all requests under a
    lock; call :meth:`close` when the sink is retired.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        self._fh: TextIO | None = self.path.open("a", encoding="utf-8", buffering=1)

    def _write(self, record: dict[str, Any]) -> None:
        line = json.dumps(record, separators=(",", ":"))
        with self._lock:
            if self._fh is None:
                raise ValueError(f"metadata log {self.path} is closed")
            self._fh.write(line + "\n")

    def close(self) -> None:
        with self._lock:
            if self._fh is not None:
                self._fh.close()
                self._fh = None

    def log_request(self, request: RequestMetadata) -> None:
        self._write({"kind": "request", **request.model_dump(mode="json")})

    def log_response(self, response: ResponseMetadata) -> None:
        record = response.model_dump(mode="json", exclude={"duration"})
        record["duration_ms"] = round(response.duration_ms, 3)
        self._write({"kind": "response", **record})


class MetricsSink:
    def __init__(self, metrics: InMemoryMetrics | None = None) -> None:
        self._metrics = metrics

    @property
    def metrics(self) -> InMemoryMetrics:
        # Resolved lazily so reset_metrics()/get_metrics() stay in sync.
        return self._metrics or get_metrics()

    def log_request(self, request: RequestMetadata) -> None:
        self.metrics.observe_request(request.method)

    def log_response(self, response: ResponseMetadata) -> None:
        self.metrics.observe_response(
            status_code=response.status_code,
            content_length=response.content_length,
            elapsed_ms=response.duration_ms,
        )


class FanoutSink:
    """Forward to several sinks; one failing sink does not starve the others."""

    def __init__(self, *sinks: MetadataSink) -> None:
        self.sinks = tuple(sinks)

    def log_request(self, request: RequestMetadata) -> None:
        for sink in self.sinks:
            try:
                sink.log_request(request)
            except Exception:
                structlog.get_logger("httpshape.sinks").exception("sink_failed", sink=type(sink).__name__, kind="request")

    def log_response(self, response: ResponseMetadata) -> None:
        for sink in self.sinks:
            try:
                sink.log_response(response)
            except Exception:
                structlog.get_logger("httpshape.sinks").exception("sink_failed", sink=type(sink).__name__, kind="response")

    def close(self) -> None:
        for sink in self.sinks:
            close = getattr(sink, "close", None)
            if close is not None:
                close()


def build_sink(settings: Settings) -> FanoutSink:
    sinks: list[MetadataSink] = [StructlogSink(), MetricsSink()]
    log_path = settings.metadata_log_path
    if log_path is not None:
        sinks.append(JsonLinesFileSink(log_path))
    return FanoutSink(*sinks)
