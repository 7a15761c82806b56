"""Sentry context middleware to capture request context in error reports."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from casestatus.core.collaborators import SESSION_USER_KEY
from casestatus.core.logging import get_request_id
from casestatus.core.sentry import is_enabled


class SentryContextMiddleware:
    """
    Tag Sentry events with the request ID and the session user, if any.

    Must sit inside SessionMiddleware (so scope["session"] is populated) and
    inside RequestIDMiddleware (so the request ID is already set).
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not is_enabled():
            await self.app(scope, receive, send)
            return

        with sentry_sdk.isolation_scope() as sentry_scope:
            request_id = get_request_id()
            sentry_scope.set_tag("request_id", request_id)

            user_id = scope.get("session", {}).get(SESSION_USER_KEY)
            if user_id:
                sentry_scope.set_user({"id": user_id})

            sentry_scope.set_context(
                "request",
                {
                    "method": scope.get("method"),
                    "path": scope.get("path"),
                    "request_id": request_id,
                },
            )

            await self.app(scope, receive, send)
