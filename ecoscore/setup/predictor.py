"""This file contains the prediction dependencies."""

from fastapi import Header, Request

from ecoscore.core.prediction.services.orchestrator import PredictionOrchestrator


def get_orchestrator(request: Request) -> PredictionOrchestrator:
    """Provide the orchestrator built at startup for dependency injection."""
    return request.app.state.orchestrator


def get_user_id(x_user_id: int = Header(..., alias="X-User-Id")) -> int:
    """Authenticated user id, forwarded by the upstream auth layer."""
    return x_user_id
