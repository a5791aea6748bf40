"""Prediction endpoints exposing eco-scores and their inputs."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ecoscore.core.errors import ProfileMissingError
from ecoscore.core.prediction.domain import EcoProfile
from ecoscore.core.prediction.services.orchestrator import PredictionOrchestrator
from ecoscore.entrypoints.api.schemas.prediction import (
    ModelInfoResponse,
    PredictionDashboardResponse,
    PredictionHistoryResponse,
    PredictionInput,
    PredictionLogResponse,
    PredictionResponse,
    TrendPointResponse,
)
from ecoscore.entrypoints.api.schemas.profile import (
    DailyLogInput,
    DailyLogResponse,
    EcoProfileRequest,
    EcoProfileResponse,
    TripCreateRequest,
    TripResponse,
    WeeklyLogInput,
    WeeklyLogResponse,
)
from ecoscore.settings import settings
from ecoscore.setup.predictor import get_orchestrator, get_user_id

router = APIRouter(tags=["Prediction"])


@router.post("/predict", response_model=PredictionResponse)
async def predict(
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> PredictionResponse:
    """Predict today's eco-score from the user's stored profile and logs."""

    outcome = orchestrator.predict_for_user(user_id)
    return PredictionResponse.from_outcome(outcome, orchestrator.model_version)


@router.post("/predict/quick", response_model=PredictionResponse)
async def quick_predict(
    request: PredictionInput,
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> PredictionResponse:
    """Predict an eco-score from the request body alone; no account needed."""

    outcome = orchestrator.quick_predict(request.model_dump(exclude_none=True))
    return PredictionResponse.from_outcome(outcome, orchestrator.model_version)


@router.get("/history", response_model=PredictionHistoryResponse)
async def prediction_history(
    limit: int = Query(default=settings.history_limit, ge=1, le=200),
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> PredictionHistoryResponse:
    entries = orchestrator.history(user_id, limit)
    average = orchestrator.average_score(user_id)
    return PredictionHistoryResponse(
        average_score=round(average, 2) if average is not None else None,
        predictions=[PredictionLogResponse.from_entry(entry) for entry in entries],
    )


@router.get("/trend", response_model=List[TrendPointResponse])
async def prediction_trend(
    days: int = Query(default=7, ge=1, le=90),
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> List[TrendPointResponse]:
    return [TrendPointResponse.from_point(point) for point in orchestrator.trend(user_id, days)]


@router.get("/dashboard", response_model=PredictionDashboardResponse)
async def prediction_dashboard(
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> PredictionDashboardResponse:
    """Latest score, today's inputs and the weekly trend in one response."""

    return PredictionDashboardResponse.from_dashboard(orchestrator.dashboard(user_id))


@router.get("/model-info", response_model=ModelInfoResponse)
async def model_info(
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> ModelInfoResponse:
    return ModelInfoResponse(**orchestrator.model_info())


@router.get("/profile", response_model=EcoProfileResponse)
async def get_profile(
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> EcoProfileResponse:
    profile = orchestrator.get_profile(user_id)
    if profile is None:
        raise ProfileMissingError(user_id)
    return EcoProfileResponse.from_profile(profile)


@router.post("/profile", response_model=EcoProfileResponse)
async def save_profile(
    request: EcoProfileRequest,
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> EcoProfileResponse:
    profile = orchestrator.save_profile(EcoProfile(user_id=user_id, **request.model_dump()))
    return EcoProfileResponse.from_profile(profile)


@router.post("/daily-log", response_model=DailyLogResponse)
async def record_daily_log(
    request: DailyLogInput,
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> DailyLogResponse:
    log = orchestrator.record_daily_input(user_id, request.model_dump(exclude_none=True))
    return DailyLogResponse.from_log(log)


@router.get("/daily-logs", response_model=List[DailyLogResponse])
async def list_daily_logs(
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> List[DailyLogResponse]:
    logs = orchestrator.daily_logs(user_id, start_date, end_date)
    return [DailyLogResponse.from_log(log) for log in logs]


@router.post("/weekly-log", response_model=WeeklyLogResponse)
async def save_weekly_log(
    request: WeeklyLogInput,
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> WeeklyLogResponse:
    log = orchestrator.save_weekly_log(user_id, request.model_dump())
    return WeeklyLogResponse.from_log(log)


@router.post("/trips", response_model=TripResponse, status_code=201)
async def record_trip(
    request: TripCreateRequest,
    user_id: int = Depends(get_user_id),
    orchestrator: PredictionOrchestrator = Depends(get_orchestrator),
) -> TripResponse:
    trip = orchestrator.record_trip(
        user_id,
        request.transport_mode,
        request.start_latitude,
        request.start_longitude,
        request.end_latitude,
        request.end_longitude,
        trip_date=request.trip_date,
        start_time=request.start_time,
        end_time=request.end_time,
    )
    return TripResponse.from_trip(trip)
