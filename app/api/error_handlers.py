"""Error Handlers — the single translation stage from failures to JSON envelopes.

Invariants:
    - XPostsError → envelope chosen by matching ErrorKind exhaustively
    - RequestValidationError (malformed body) → VALIDATION envelope, 400
    - 404/405 from routing → "Route not found" envelope listing AVAILABLE_ROUTES
    - Exception (catch-all) → UNKNOWN envelope; details only in development
    - Every envelope carries a timestamp; suppressed details are still logged

Design Decisions:
    - Four-layer handler: domain (XPostsError), validation (Pydantic),
      routing (HTTPException), catch-all (Exception)
    - 405 folded into 404: the API has no partial-method resources to advertise
"""

import logging
from datetime import datetime, timezone
from typing import assert_never

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, get_settings
from app.core.domain_types import AVAILABLE_ROUTES
from app.core.errors import ErrorKind, UnknownError, ValidationError, XPostsError
from app.schemas.post import ErrorEnvelope

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_xposts_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def build_error_envelope(exc: XPostsError, expose_details: bool) -> dict:
    """Translate a tagged error into the public envelope."""
    details: str | None
    match exc.kind:
        case (
            ErrorKind.VALIDATION
            | ErrorKind.NOT_FOUND
            | ErrorKind.PAYLOAD_TOO_LARGE
            | ErrorKind.STORE
        ):
            details = exc.details
        case ErrorKind.UNAUTHORIZED | ErrorKind.UNREACHABLE | ErrorKind.UNKNOWN:
            details = exc.details if expose_details else None
        case _:
            assert_never(exc.kind)
    envelope = ErrorEnvelope(
        error=exc.message,
        details=details,
        timestamp=exc.context.timestamp.isoformat(),
    )
    return envelope.model_dump(by_alias=True, exclude_none=True)


def build_route_not_found_envelope(request: Request) -> dict:
    """404 body for unmatched routes."""
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    envelope = ErrorEnvelope(
        error="Route not found",
        details=f"The requested route {request.method} {target} does not exist",
        available_routes=list(AVAILABLE_ROUTES),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    return envelope.model_dump(by_alias=True, exclude_none=True)


def settings_for(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def respond_with_error(request: Request, exc: XPostsError) -> JSONResponse:
    """Log the failure and send its envelope."""
    extra = {
        "error_code": exc.code,
        "path": request.url.path,
        "method": request.method,
        "status_code": exc.http_status,
    }
    if exc.http_status >= 500:
        logger.error(f"{exc.message}: {exc.details}", extra=extra)
    else:
        logger.warning(f"{exc.message}: {exc.details}", extra=extra)
    expose = settings_for(request).expose_error_details
    return JSONResponse(
        status_code=exc.http_status,
        content=build_error_envelope(exc, expose),
    )


def _register_xposts_error_handler(app: FastAPI) -> None:
    """Register XPosts domain/infrastructure error handler."""

    @app.exception_handler(XPostsError)
    async def xposts_error_handler(request: Request, exc: XPostsError):
        return respond_with_error(request, exc)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic request validation handler (malformed bodies)."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        return respond_with_error(request, ValidationError(
            "Invalid request body", "INVALID_REQUEST_BODY",
            _summarize_validation_errors(exc),
        ))


def _register_http_error_handler(app: FastAPI) -> None:
    """Register routing-level HTTP error handler."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        if exc.status_code in (
            status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED,
        ):
            logger.warning(
                f"Route not found: {request.method} {request.url.path}",
                extra={"path": request.url.path, "method": request.method},
            )
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content=build_route_not_found_envelope(request),
            )
        envelope = ErrorEnvelope(
            error=str(exc.detail),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope.model_dump(by_alias=True, exclude_none=True),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — details reach clients only in development."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=exc,
        )
        return respond_with_error(request, UnknownError(str(exc)))


def _summarize_validation_errors(exc: RequestValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in exc.errors()
    )
