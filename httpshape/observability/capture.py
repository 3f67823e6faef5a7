from __future__ import annotations

from typing import Any, Awaitable, Callable

Message = dict[str, Any]
Send = Callable[[Message], Awaitable[None]]


class ResponseCapture:
    """ASGI ``send`` wrapper that mirrors the response status and body size.

    Messages are forwarded to the real ``send`` untouched and in order; only
    local counters are updated. The body is never buffered.

    The recorded status is the one actually transmitted: the first
    ``http.response.start`` message. A repeated start message is still
    forwarded (the server rejects it), but it does not overwrite the status.

    One instance per request.
    """

    def __init__(self, send: Send) -> None:
        self._send = send
        self.status_code: int | None = None
        self.bytes_written: int = 0
        self.completed: bool = False

    @property
    def started(self) -> bool:
        return self.status_code is not None

    async def __call__(self, message: Message) -> None:
        await self._send(message)

        # Only count what the server accepted.
        message_type = message.get("type")
        if message_type == "http.response.start":
            if self.status_code is None:
                self.status_code = int(message["status"])
        elif message_type == "http.response.body":
            self.bytes_written += len(message.get("body", b""))
            if not message.get("more_body", False):
                self.completed = True
