"""API endpoint for health checks."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ecoscore.core.prediction.services.orchestrator import PredictionOrchestrator
from ecoscore.entrypoints.api.schemas.health import HealthStatusResponse
from ecoscore.setup.predictor import get_orchestrator

router = APIRouter(tags=["Metrics"])


@router.get(
    "",
    summary="API health check.",
    response_model=HealthStatusResponse,
)
async def health_check(
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> HealthStatusResponse:
    """Returns the health status of the API.

    The service stays healthy without a model; only predictions degrade.
    """

    return HealthStatusResponse(
        status="healthy",
        model_loaded=orchestrator.model_loaded,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
