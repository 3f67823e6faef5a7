from __future__ import annotations

from fastapi import FastAPI

from httpshape.api.metrics import router as metrics_router
from httpshape.api.patients import router as patients_router
from httpshape.config import Settings, get_settings
from httpshape.observability.middleware import InstrumentationMiddleware, instrument
from httpshape.observability.sinks import MetadataSink, build_sink
from httpshape.services.patient_store import PatientStore


def create_api(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    api = FastAPI(title="Healthcare API", version="0.1.0")
    api.state.settings = settings
    api.state.patient_store = PatientStore(seed_count=settings.seed_patients)
    api.include_router(patients_router)
    api.include_router(metrics_router)

    @api.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return api


def create_app(settings: Settings | None = None, sink: MetadataSink | None = None) -> InstrumentationMiddleware:
    """Build the patient API wrapped in request/response instrumentation.

    The middleware sits outside FastAPI's error handling so it observes the
    status actually sent to the client, including generated 500s.
    """

    settings = settings or get_settings()
    return instrument(
        create_api(settings),
        sample_rate=settings.sample_rate,
        sink=sink or build_sink(settings),
    )
