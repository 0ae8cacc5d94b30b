"""Health Probe — liveness endpoint.

Invariants:
    - GET /api/health always returns 200 if the process is up
    - Never touches the database service
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status

from app.core.domain_types import API_VERSION, SERVICE_NAME
from app.schemas.post import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get(
    "", response_model=HealthResponse, status_code=status.HTTP_200_OK,
)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return HealthResponse(
        message=f"{SERVICE_NAME} is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=API_VERSION,
    )
