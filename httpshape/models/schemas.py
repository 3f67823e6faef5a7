from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from starlette.datastructures import Headers


class RequestMetadata(BaseModel):
    """Snapshot of an inbound request, taken before the downstream app runs."""

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    remote_addr: str
    user_agent: str
    content_type: str
    timestamp: datetime

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any], *, timestamp: datetime | None = None) -> RequestMetadata:
        # Headers(scope=...) is a read-only view over scope["headers"].
        headers = Headers(scope=scope)
        client = scope.get("client")
        remote_addr = f"{client[0]}:{client[1]}" if client else ""

        return cls(
            method=str(scope.get("method", "")),
            path=str(scope.get("path", "")),
            remote_addr=remote_addr,
            user_agent=headers.get("user-agent", ""),
            content_type=headers.get("content-type", ""),
            timestamp=timestamp or datetime.now(timezone.utc),
        )


class ResponseMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    status_code: int = 200
    content_length: int = Field(default=0, ge=0)
    duration: timedelta = Field(default=timedelta(0), ge=timedelta(0))

    @property
    def duration_ms(self) -> float:
        return self.duration.total_seconds() * 1000.0
