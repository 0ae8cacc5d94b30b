"""PostgREST Post Store — one HTTP call per operation against the hosted database service.

Invariants:
    - Every method issues exactly one request; nothing is retried or cached
    - Every request selects exactly POST_FIELDS (six-field projection)
    - Error bodies ({code, message, details, hint}) map to StoreError
    - "No rows" (PGRST116) on a single-row read maps to NotFoundError
    - Transport failures (DNS, refused connection, timeout) map to UnreachableError

Design Decisions:
    - httpx.AsyncClient built once per process in the lifespan, shared read-only
      by all requests (ADR: no global client, injected via get_post_store)
    - Single-object Accept header lets the service enforce "exactly one row"
      instead of checking list lengths here
    - created_at/updated_at stamped here at write time; updated_at is kept for
      a future update endpoint and is never modified today
"""

import logging
from datetime import datetime, timezone

import httpx
from fastapi import Request

from app.core.domain_types import POST_FIELDS, PostCreate, PostId
from app.core.errors import NotFoundError, StoreError, UnreachableError
from app.core.repository_protocols import PostStore
from app.schemas.post import Post

logger = logging.getLogger(__name__)

OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"
NO_ROWS_CODE = "PGRST116"


class PostgrestPostStore:
    """Post persistence over the database service's REST interface."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "posts",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            },
            timeout=timeout_seconds,
            transport=transport,
        )
        self.table = table
        self._select = ",".join(POST_FIELDS)

    async def list_posts(self) -> list[Post]:
        """All posts, newest first."""
        response = await self._request(
            "select", "GET",
            params={"select": self._select, "order": "created_at.desc"},
        )
        return [Post.model_validate(row) for row in response.json()]

    async def create_post(self, post: PostCreate) -> Post:
        """Insert one post and return the stored row."""
        now = datetime.now(timezone.utc).isoformat()
        response = await self._request(
            "insert", "POST",
            params={"select": self._select},
            json={
                "title": post.title,
                "body": post.body,
                "user_id": post.user_id,
                "created_at": now,
                "updated_at": now,
            },
            headers={
                "Prefer": "return=representation",
                "Accept": OBJECT_MEDIA_TYPE,
            },
        )
        return Post.model_validate(response.json())

    async def get_post(self, post_id: PostId) -> Post:
        """Exactly one post by id, or NotFoundError."""
        try:
            response = await self._request(
                "select", "GET",
                params={"select": self._select, "id": f"eq.{post_id}"},
                headers={"Accept": OBJECT_MEDIA_TYPE},
            )
        except StoreError as e:
            if e.store_code == NO_ROWS_CODE:
                raise NotFoundError(post_id)
            raise
        return Post.model_validate(response.json())

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(
        self, operation: str, method: str, **kwargs,
    ) -> httpx.Response:
        """Send one request; map transport and service failures."""
        try:
            response = await self.client.request(
                method, f"/{self.table}", **kwargs,
            )
        except httpx.TransportError as e:
            logger.error(
                f"Database service unreachable during {operation}: {e!r}",
            )
            raise UnreachableError(str(e) or type(e).__name__, operation)
        if response.is_error:
            raise _to_store_error(response, operation)
        return response


def _to_store_error(response: httpx.Response, operation: str) -> StoreError:
    """Build StoreError from a PostgREST error body."""
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}
    message = (
        payload.get("message")
        or response.text
        or f"HTTP {response.status_code}"
    )
    code = payload.get("code")
    logger.error(
        f"Database service error during {operation}: {message}",
        extra={"error_code": code, "status_code": response.status_code},
    )
    return StoreError(message, operation, store_code=code)


def get_post_store(request: Request) -> PostStore:
    """FastAPI dependency — the process-wide store built in the lifespan."""
    store = getattr(request.app.state, "post_store", None)
    if store is None:
        raise RuntimeError("Post store not initialized")
    return store
