"""Request ID injection and per-request access events."""

import re
import time
import uuid

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from casestatus.core.logging import get_logger, set_request_id

REQUEST_ID_HEADER = b"x-request-id"

# Accept caller IDs that are safe to echo into headers and logs
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._\-]{1,64}$")


def _incoming_request_id(scope: Scope) -> str | None:
    for name, value in scope.get("headers", []):
        if name == REQUEST_ID_HEADER:
            candidate = value.decode("latin1")
            return candidate if _VALID_REQUEST_ID.match(candidate) else None
    return None


class RequestIDMiddleware:
    """
    Give every HTTP request an ID, echo it back, and log start/complete events.

    Paths are logged without query strings: public lookups put a respondent's
    registration number there.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        structlog.contextvars.clear_contextvars()
        request_id = _incoming_request_id(scope) or str(uuid.uuid4())
        set_request_id(request_id)

        started = time.perf_counter()
        self.logger.info("request.start", method=scope["method"], path=scope["path"])

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (REQUEST_ID_HEADER, request_id.encode("latin1")),
                ]

                status_code = message.get("status", 500)
                log = self.logger.error if status_code >= 500 else self.logger.info
                log(
                    "request.complete",
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )

            await send(message)

        await self.app(scope, receive, send_with_request_id)
