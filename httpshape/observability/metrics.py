from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from threading import Lock
from typing import Any


@dataclass
class _LatencyAgg:
    count: int = 0
    sum_ms: float = 0.0
    max_ms: float = 0.0

    def observe(self, elapsed_ms: float) -> None:
        self.count += 1
        self.sum_ms += float(elapsed_ms)
        if elapsed_ms > self.max_ms:
            self.max_ms = float(elapsed_ms)


def _status_class(status_code: int) -> str:
    return f"{status_code // 100}xx"


class InMemoryMetrics:
    """Thread-safe, process-local metrics for sampled traffic (resets on restart)."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.http_requests_sampled_total: int = 0
        self.http_responses_total: int = 0
        self.http_response_bytes_total: int = 0
        self.http_responses_by_status: Counter[str] = Counter()
        self.http_requests_by_method: Counter[str] = Counter()
        self.http_response_ms = _LatencyAgg()

    def observe_request(self, method: str) -> None:
        with self._lock:
            self.http_requests_sampled_total += 1
            self.http_requests_by_method[method.upper()] += 1

    def observe_response(self, status_code: int, content_length: int, elapsed_ms: float) -> None:
        with self._lock:
            self.http_responses_total += 1
            self.http_response_bytes_total += int(content_length)
            self.http_responses_by_status[_status_class(status_code)] += 1
            self.http_response_ms.observe(elapsed_ms)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "counters": {
                    "http_requests_sampled_total": self.http_requests_sampled_total,
                    "http_responses_total": self.http_responses_total,
                    "http_response_bytes_total": self.http_response_bytes_total,
                },
                "by_method": dict(self.http_requests_by_method),
                "by_status": dict(self.http_responses_by_status),
                "latency_ms": {
                    "http_response_ms": asdict(self.http_response_ms),
                },
            }

    def reset(self) -> None:
        with self._lock:
            self.http_requests_sampled_total = 0
            self.http_responses_total = 0
            self.http_response_bytes_total = 0
            self.http_responses_by_status = Counter()
            self.http_requests_by_method = Counter()
            self.http_response_ms = _LatencyAgg()


_METRICS: InMemoryMetrics | None = None


def get_metrics() -> InMemoryMetrics:
    global _METRICS
    if _METRICS is None:
        _METRICS = InMemoryMetrics()
    return _METRICS


def reset_metrics() -> None:
    """Reset metrics counters/aggregates (used by tests)."""

    get_metrics().reset()
