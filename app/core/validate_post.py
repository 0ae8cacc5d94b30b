"""Post Validation — pure checks for create payloads and path ids.

Invariants:
    - Checks run in a fixed order and stop at the first failure
    - Every failure is a ValidationError (400) with a stable code
    - Success returns a PostCreate holding only title, body and user_id

Design Decisions:
    - Hand-written checks over a Pydantic model: the order of checks and the
      exact error labels are part of the public contract
    - bool is rejected as user_id even though it subclasses int
    - "Missing" means absent, null, false, an empty string or a numeric 0;
      user_id alone treats 0 as present so it fails the user_id check instead
    - Ids too long for int() are rejected like any other malformed id
"""

import re
from typing import Any

from app.core.domain_types import PostCreate, PostId, UserId
from app.core.errors import ValidationError

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def validate_post_fields(payload: Any) -> PostCreate:
    """Validate and normalize a create payload."""
    data = payload if isinstance(payload, dict) else {}
    title = data.get("title")
    body = data.get("body")
    user_id = data.get("user_id")

    if _is_missing(title) or _is_missing(body) or _is_missing_user_id(user_id):
        raise ValidationError(
            "Missing required fields", "MISSING_FIELDS",
            "Title, body, and user_id are required",
        )
    if not _is_non_blank_str(title):
        raise ValidationError(
            "Invalid title", "INVALID_TITLE",
            "Title must be a non-empty string",
        )
    if not _is_non_blank_str(body):
        raise ValidationError(
            "Invalid body", "INVALID_BODY",
            "Body must be a non-empty string",
        )
    if not _is_positive_int(user_id):
        raise ValidationError(
            "Invalid user_id", "INVALID_USER_ID",
            "User ID must be a positive integer",
        )

    return PostCreate(
        title=title.strip(), body=body.strip(), user_id=UserId(int(user_id)),
    )


def parse_post_id(raw: str | None) -> PostId:
    """Parse a path id leniently: leading integer wins, trailing junk ignored."""
    match = _LEADING_INT.match(raw or "")
    if not match:
        raise ValidationError(
            "Invalid post ID", "INVALID_POST_ID",
            "Post ID must be a valid number",
        )
    try:
        return PostId(int(match.group(1)))
    except ValueError:
        # over the int() digit limit
        raise ValidationError(
            "Invalid post ID", "INVALID_POST_ID",
            "Post ID must be a valid number",
        ) from None


def _is_missing(value: Any) -> bool:
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and value == 0


def _is_missing_user_id(value: Any) -> bool:
    # 0 counts as present so it is reported as an invalid user_id
    return value is None or value is False or value == ""


def _is_non_blank_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_positive_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return value.is_integer() and value >= 1
    return isinstance(value, int) and value >= 1
