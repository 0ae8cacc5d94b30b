"""Domain Types — rich types and constants shared across the codebase.

Invariants:
    - POST_FIELDS is the only projection ever requested from the store
    - PostCreate only exists after validation (core/validate_post.py builds it)
    - AVAILABLE_ROUTES lists exactly the routes registered in main.py

Design Decisions:
    - NewType for ids: zero runtime cost, full type-checker support
    - Frozen dataclass for PostCreate: normalized input cannot be mutated downstream
"""

from dataclasses import dataclass
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PostId = NewType("PostId", int)
UserId = NewType("UserId", int)


# ─── Constants ───────────────────────────────────────────────────

API_VERSION = "1.0.0"
SERVICE_NAME = "XPosts API"

POST_FIELDS: tuple[str, ...] = (
    "id", "title", "body", "user_id", "created_at", "updated_at",
)

AVAILABLE_ROUTES: tuple[str, ...] = (
    "GET /api/health",
    "GET /api/posts",
    "POST /api/posts",
    "GET /api/posts/:id",
)


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class PostCreate:
    """Normalized create payload — trimmed strings, integer user id."""
    title: str
    body: str
    user_id: UserId
