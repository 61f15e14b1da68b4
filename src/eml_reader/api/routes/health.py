"""
Health check endpoint for monitoring.
"""

import time

from fastapi import APIRouter

from ...config import settings
from ...models.api_models import HealthResponse
from ...version import API_VERSION, get_current_parser_version

router = APIRouter()

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Report liveness, the parser build and the upload limit.

    Returns:
        Health status, versions and uptime
    """
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        parser=get_current_parser_version().to_repr(),
        max_email_size_mb=settings.max_email_size_mb,
        uptime_seconds=round(time.time() - _start_time, 3),
    )
