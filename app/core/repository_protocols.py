"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Every store method performs exactly one call to the database service
    - Failures surface as XPostsError subclasses (StoreError, NotFoundError,
      UnreachableError), never as raw transport exceptions

Design Decisions:
    - Protocol over ABC: structural subtyping lets tests pass an in-memory fake
    - Async in Protocol: implementations do IO
"""

from typing import Protocol

from app.core.domain_types import PostCreate, PostId
from app.schemas.post import Post


class PostStore(Protocol):
    """Contract for post persistence — implemented by infrastructure."""
    async def list_posts(self) -> list[Post]: ...
    async def create_post(self, post: PostCreate) -> Post: ...
    async def get_post(self, post_id: PostId) -> Post: ...
