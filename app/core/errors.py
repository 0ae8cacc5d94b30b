"""Error Hierarchy — tagged exceptions for every XPosts failure mode.

Invariants:
    - Every error carries a code (str), a kind (ErrorKind) and an http_status
    - ErrorKind is the tag matched by the translation stage (api/error_handlers.py);
      it never inspects exception class names or driver error codes
    - message is the public label; details is the explanation that may be
      withheld from clients outside development

Design Decisions:
    - Single hierarchy with XPostsError base: one FastAPI handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: timestamp + post id without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorKind(str, Enum):
    """One case per failure category the API can report."""
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    STORE = "store"
    UNREACHABLE = "unreachable"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Observability context attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    post_id: int | None = None


class XPostsError(Exception):
    """Base exception for all XPosts errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        http_status: int = 500,
        details: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.http_status = http_status
        self.details = details
        self.context = context or ErrorContext()


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationError(XPostsError):
    """Client input is missing or malformed."""
    def __init__(
        self, message: str, code: str, details: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorKind.VALIDATION, 400, details, context,
        )


class UnauthorizedError(XPostsError):
    """Caller is not allowed to perform the operation."""
    def __init__(
        self, details: str | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Unauthorized", "UNAUTHORIZED", ErrorKind.UNAUTHORIZED, 401,
            details, context,
        )


class NotFoundError(XPostsError):
    """Requested post does not exist."""
    def __init__(self, post_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.post_id = post_id
        super().__init__(
            "Post not found", "POST_NOT_FOUND", ErrorKind.NOT_FOUND, 404,
            f"No post found with ID: {post_id}", ctx,
        )
        self.post_id = post_id


class PayloadTooLargeError(XPostsError):
    """Request body exceeds the configured limit."""
    def __init__(
        self, size: int, limit: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Payload Too Large", "PAYLOAD_TOO_LARGE",
            ErrorKind.PAYLOAD_TOO_LARGE, 413,
            f"Request body of {size} bytes exceeds limit of {limit} bytes",
            context,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreError(XPostsError):
    """The database service answered with an error."""
    def __init__(
        self,
        message: str,
        operation: str,
        store_code: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "Database error", "DATABASE_ERROR", ErrorKind.STORE, 500,
            message, context,
        )
        self.operation = operation
        self.store_code = store_code


class UnreachableError(XPostsError):
    """The database service could not be reached at the network level."""
    def __init__(
        self, message: str, operation: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Service Unavailable", "SERVICE_UNAVAILABLE",
            ErrorKind.UNREACHABLE, 503, message, context,
        )
        self.operation = operation


class UnknownError(XPostsError):
    """Anything not covered by a more specific kind."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            "Internal Server Error", "INTERNAL_ERROR", ErrorKind.UNKNOWN, 500,
            message, context,
        )
