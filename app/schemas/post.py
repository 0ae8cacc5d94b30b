"""Post Schemas — Pydantic models for the post projection and response envelopes.

Invariants:
    - Post has exactly the six projected fields; extra store columns are ignored
    - Every envelope carries success; optional keys are omitted, never null
    - ErrorEnvelope always carries a timestamp

Design Decisions:
    - Envelopes as models (not dicts): FastAPI documents them in OpenAPI
    - extra="ignore" on Post enforces the projection even if the store adds columns
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Post(BaseModel):
    """A persisted post as exposed by the API."""
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    body: str
    user_id: int
    created_at: datetime
    updated_at: datetime


class PostListResponse(BaseModel):
    """GET /api/posts envelope."""
    success: bool = True
    data: list[Post]
    count: int


class PostCreatedResponse(BaseModel):
    """POST /api/posts envelope."""
    success: bool = True
    data: Post
    message: str = "Post created successfully"


class PostDetailResponse(BaseModel):
    """GET /api/posts/{id} envelope."""
    success: bool = True
    data: Post


class HealthResponse(BaseModel):
    """GET /api/health envelope."""
    success: bool = True
    message: str
    timestamp: str
    version: str


class ErrorEnvelope(BaseModel):
    """Uniform error body produced by the translation stage."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    error: str
    details: str | None = None
    available_routes: list[str] | None = Field(
        None, serialization_alias="availableRoutes",
    )
    timestamp: str
