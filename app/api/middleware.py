"""Request Middleware — body size guard and last-resort error boundary.

Invariants:
    - Requests whose Content-Length exceeds max_body_bytes get a 413 envelope
      without the body being read
    - Requests without Content-Length (chunked) are buffered up to
      max_body_bytes; one byte more and the 413 envelope is sent instead
    - Any exception escaping the routers becomes the 500 envelope inside
      CORS, so browsers can read it

Design Decisions:
    - Body guard is plain ASGI (like Starlette's CORSMiddleware): it must
      count receive() messages before FastAPI parses the body
    - Error boundary is an HTTP middleware: the Exception handler runs in
      ServerErrorMiddleware, outside every user middleware including CORS
"""

import logging

from fastapi import FastAPI, Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.api.error_handlers import respond_with_error, settings_for
from app.core.errors import PayloadTooLargeError, UnknownError

logger = logging.getLogger(__name__)


class BodyLimitMiddleware:
    """Reject oversized request bodies before any parsing."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        limit = settings_for(request).max_body_bytes
        raw_length = request.headers.get("content-length")
        if raw_length and raw_length.isdigit():
            if int(raw_length) > limit:
                response = respond_with_error(
                    request, PayloadTooLargeError(int(raw_length), limit),
                )
                await response(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        buffered: list[Message] = []
        size = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            size += len(message.get("body", b""))
            if size > limit:
                response = respond_with_error(
                    request, PayloadTooLargeError(size, limit),
                )
                await response(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)


def register_error_boundary(app: FastAPI) -> None:
    """Render unexpected exceptions before they leave the middleware stack."""

    @app.middleware("http")
    async def catch_unhandled(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                f"Unhandled exception on {request.url.path}: {exc}",
                exc_info=exc,
            )
            return respond_with_error(request, UnknownError(str(exc)))
