"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_store
from core.exceptions import StoreError
from schemas.responses import HealthChecks, HealthResponse
from services.ports import Pinger

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def health_check(
    response: Response,
    pinger: Pinger = Depends(get_store),
) -> HealthResponse:
    """
    Report database connectivity.

    Liveness only: a successful ping says nothing about whether writes work.
    Responds 503 when the database cannot be reached.
    """
    db_status = "up"
    try:
        await pinger.ping()
    except StoreError:
        logger.exception("Database health check failed")
        db_status = "down"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(status=db_status, checks=HealthChecks(postgres=db_status))
