"""Pydantic models for health-related API responses."""

from pydantic import BaseModel, Field


class HealthStatusResponse(BaseModel):
    """API response model for the health API endpoint."""

    status: str = Field(
        description="The status of the API.",
        examples=["healthy"],
    )
    model_loaded: bool = Field(
        description="Whether eco-score predictions can be served.",
        examples=[True],
    )
    timestamp: str = Field(
        description="The current date and time as an ISO formated string.",
        examples=["2026-02-20T12:34:56.789012+00:00"],
    )

    model_config = {"protected_namespaces": ()}
