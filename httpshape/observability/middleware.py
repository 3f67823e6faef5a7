from __future__ import annotations

from datetime import timedelta
from time import perf_counter
from typing import Any, Callable

import structlog

from httpshape.models.schemas import RequestMetadata, ResponseMetadata
from httpshape.observability.capture import ResponseCapture
from httpshape.observability.sampling import Sampler
from httpshape.observability.sinks import MetadataSink


# Status the host server answers with when the app never started a response.
_NO_RESPONSE_STATUS = 500


class InstrumentationMiddleware:
    """Captures request/response metadata and reports a sample of it to a sink.

    The sample rate and sink are fixed at construction. Everything else
    (metadata, response capture, timing) is owned by a single request.
    """

    def __init__(
        self,
        app: Callable[..., Any],
        *,
        sample_rate: float,
        sink: MetadataSink,
        random_source: Callable[[], float] | None = None,
    ) -> None:
        self.app = app
        self.sink = sink
        self._sampler = Sampler(sample_rate, random_source=random_source)

    @property
    def sample_rate(self) -> float:
        return self._sampler.rate

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_meta = RequestMetadata.from_scope(scope)
        start = perf_counter()
        sampled = self._sampler.should_sample()
        capture = ResponseCapture(send)

        try:
            await self.app(scope, receive, capture)
        finally:
            # Also reached when the app raises or is cancelled; that exception
            # keeps propagating after the report.
            response_meta = ResponseMetadata(
                status_code=capture.status_code if capture.status_code is not None else _NO_RESPONSE_STATUS,
                content_length=capture.bytes_written,
                duration=timedelta(seconds=perf_counter() - start),
            )
            if sampled:
                self._report(request_meta, response_meta)

    def _report(self, request_meta: RequestMetadata, response_meta: ResponseMetadata) -> None:
        # One failing call does not skip the other.
        calls = (
            ("request", self.sink.log_request, request_meta),
            ("response", self.sink.log_response, response_meta),
        )
        for kind, log, value in calls:
            try:
                log(value)
            except Exception:
                structlog.get_logger("httpshape.middleware").exception(
                    "metadata_sink_failed",
                    sink=type(self.sink).__name__,
                    kind=kind,
                    method=request_meta.method,
                    path=request_meta.path,
                )


def instrument(
    app: Callable[..., Any],
    *,
    sample_rate: float,
    sink: MetadataSink,
    random_source: Callable[[], float] | None = None,
) -> InstrumentationMiddleware:
    """Wrap an ASGI app; the result is itself an ASGI app."""

    return InstrumentationMiddleware(app, sample_rate=sample_rate, sink=sink, random_source=random_source)
