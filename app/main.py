"""XPosts API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure → JSON envelope (api/error_handlers.py)
    - CORS configured from settings (not hardcoded)
    - CORS headers are set on every response, 413 and 500 included
    - PostStore built once in the lifespan, stored on app.state, closed on shutdown
    - SIGINT/SIGTERM exit immediately: in-flight requests are not drained

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - CORS methods limited to the implemented ones (GET, POST, OPTIONS);
      PUT/DELETE come back when update/delete routes exist
"""

import logging
import signal
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.middleware import BodyLimitMiddleware, register_error_boundary
from app.api.routes import health, posts
from app.config import get_settings
from app.core.domain_types import API_VERSION, SERVICE_NAME
from app.infrastructure.observability import setup_logging
from app.infrastructure.postgrest_store import PostgrestPostStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    app.state.post_store = PostgrestPostStore(
        settings.supabase_url,
        settings.supabase_key,
        table=settings.posts_table,
        timeout_seconds=settings.store_timeout_seconds,
    )
    logger.info(f"{SERVICE_NAME} started")
    yield
    await app.state.post_store.aclose()
    logger.info(f"{SERVICE_NAME} shutting down")


app = FastAPI(title=SERVICE_NAME, version=API_VERSION, lifespan=lifespan)

settings = get_settings()
app.state.settings = settings

# Last added is outermost: CORS wraps the error boundary, which wraps the body guard
app.add_middleware(BodyLimitMiddleware)
register_error_boundary(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(health.router)
app.include_router(posts.router)

register_error_handlers(app)


# ─── PROCESS ENTRY POINT ────────────────────────────────────────

class ImmediateExitServer(uvicorn.Server):
    """uvicorn server that stops without waiting for open connections."""

    def handle_exit(self, sig: int, frame) -> None:
        logger.info(f"{signal.Signals(sig).name} received. Shutting down...")
        self.should_exit = True
        self.force_exit = True


def run() -> None:
    """Start the API server on the configured port."""
    setup_logging(settings.log_level, settings.log_format)
    _log_banner()
    server = ImmediateExitServer(uvicorn.Config(
        app, host="0.0.0.0", port=settings.port, log_config=None,
    ))
    try:
        server.run()
    except KeyboardInterrupt:
        pass


def _log_banner() -> None:
    base = f"http://localhost:{settings.port}"
    logger.info(f"{SERVICE_NAME} server starting on port {settings.port}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Health check: {base}/api/health")
    logger.info(f"Posts: {base}/api/posts")


if __name__ == "__main__":
    run()
