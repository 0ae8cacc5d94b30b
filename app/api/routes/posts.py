"""Posts — list, create and fetch posts through the injected PostStore.

Invariants:
    - Each handler awaits exactly one PostStore call (none for a bad id)
    - Create only ever sees a PostCreate produced by validate_post_fields
    - Store failures propagate as XPostsError; api/error_handlers.py
      turns them into envelopes (no per-route error mapping)

Design Decisions:
    - Validation as a dependency: runs before the handler body, like a
      pre-write middleware, and keeps the check itself pure (core/)
    - Path id taken as str and parsed by core: a non-numeric id is a 400
      with the API's own envelope, not FastAPI's 422
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from app.core.domain_types import PostCreate
from app.core.repository_protocols import PostStore
from app.core.validate_post import parse_post_id, validate_post_fields
from app.infrastructure.postgrest_store import get_post_store
from app.schemas.post import (
    PostCreatedResponse, PostDetailResponse, PostListResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/posts", tags=["posts"])


def validated_post(payload: Any = Body(None)) -> PostCreate:
    """Dependency — normalized create payload or ValidationError."""
    return validate_post_fields(payload)


@router.get("", response_model=PostListResponse)
async def list_posts(store: PostStore = Depends(get_post_store)):
    """All posts, newest first."""
    logger.info("Fetching all posts")
    posts = await store.list_posts()
    logger.info(
        f"Fetched {len(posts)} posts", extra={"count": len(posts)},
    )
    return PostListResponse(data=posts, count=len(posts))


@router.post(
    "", response_model=PostCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    post: PostCreate = Depends(validated_post),
    store: PostStore = Depends(get_post_store),
):
    """Create a post from a validated payload."""
    logger.info(
        f'Creating post "{post.title}" by user {post.user_id}',
        extra={"user_id": post.user_id},
    )
    created = await store.create_post(post)
    logger.info(
        f"Created post {created.id}", extra={"post_id": created.id},
    )
    return PostCreatedResponse(data=created)


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(post_id: str, store: PostStore = Depends(get_post_store)):
    """One post by id."""
    parsed_id = parse_post_id(post_id)
    logger.info(f"Fetching post {parsed_id}", extra={"post_id": parsed_id})
    post = await store.get_post(parsed_id)
    logger.info(
        f"Fetched post: {post.title}", extra={"post_id": post.id},
    )
    return PostDetailResponse(data=post)
