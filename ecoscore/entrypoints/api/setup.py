"""API setup module."""

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ecoscore.core.errors import (
    EcoScoreError,
    ModelInvocationError,
    ModelUnavailableError,
    ProfileMissingError,
    StorageError,
)
from ecoscore.core.interfaces.services.predictor import IScoreModel
from ecoscore.core.prediction.services.orchestrator import PredictionOrchestrator, utc_now
from ecoscore.core.prediction.services.predictor import EcoScoreModel
from ecoscore.core.storage.database import EcoDatabase
from ecoscore.core.storage.repository import EcoRepository
from ecoscore.entrypoints.api.endpoints.internal import prediction
from ecoscore.entrypoints.api.endpoints.metrics import health
from ecoscore.settings import Settings, settings as default_settings
from ecoscore.setup.log_config import configure_logging

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ModelUnavailableError: 503,
    ProfileMissingError: 404,
    ModelInvocationError: 500,
    StorageError: 500,
}


async def handle_eco_score_error(request: Request, exc: EcoScoreError) -> JSONResponse:
    """Translate typed core errors into JSON error responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if status_code >= 500 and not isinstance(exc, ModelUnavailableError):
        logger.error("Request to %s failed: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": exc.code},
    )


def create_app(
    app_settings: Optional[Settings] = None,
    model: Optional[IScoreModel] = None,
    repository: Optional[EcoRepository] = None,
    clock: Callable = utc_now,
) -> FastAPI:
    """Creates the FastAPI application.

    ``model`` and ``repository`` are built from settings at startup unless
    supplied; injected ones are used as-is and never closed by the app.
    """
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI):
        """Context manager for the application's lifespan."""
        database = None
        if not hasattr(fastapi_app.state, "orchestrator"):
            score_model = model or EcoScoreModel.from_settings(app_settings)
            if not score_model.is_loaded:
                logger.warning("Starting without an eco-score model; predictions disabled")
            store = repository
            if store is None:
                database = EcoDatabase(app_settings.db_path)
                database.initialize()
                store = EcoRepository(database)
            fastapi_app.state.orchestrator = PredictionOrchestrator.from_repository(
                score_model, store, model_version=app_settings.model_version, clock=clock
            )
        try:
            yield
        finally:
            if database is not None:
                database.close()

    fastapi_app = FastAPI(
        title="Eco Score API",
        description="Predicts a user's daily eco-score and recommends improvements.",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if model is not None and repository is not None:
        fastapi_app.state.orchestrator = PredictionOrchestrator.from_repository(
            model, repository, model_version=app_settings.model_version, clock=clock
        )

    fastapi_app.include_router(health.router, prefix="/health")
    fastapi_app.include_router(prediction.router, prefix="/predictions")
    fastapi_app.add_exception_handler(EcoScoreError, handle_eco_score_error)

    # CORS (Cross-Origin Resource Sharing)
    origins = ["*"]
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return fastapi_app


def entry() -> None:
    """Starts the eco-score engine."""

    configure_logging(default_settings.log_level)
    logger.info(
        "Starting %s (%s) on %s:%d",
        default_settings.application_name,
        default_settings.environment,
        default_settings.api_host,
        default_settings.api_port,
    )
    uvicorn.run(
        "ecoscore.entrypoints.api.setup:create_app",
        factory=True,
        host=default_settings.api_host,
        port=default_settings.api_port,
    )


if __name__ == "__main__":
    entry()
