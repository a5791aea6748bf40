"""Schemas for prediction API."""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ecoscore.core.prediction.domain import (
    PredictionDashboard,
    PredictionLogEntry,
    PredictionOutcome,
    TodaySummary,
    TrendPoint,
)


class PredictionInput(BaseModel):
    """The JSON request body for the quick prediction endpoint.

    Every field is optional; missing values fall back to the model defaults.
    """

    household_size: Optional[int] = Field(default=None, ge=1)

    # Travel
    car_km: Optional[float] = None
    bus_km: Optional[float] = None
    train_metro_km: Optional[float] = None
    bike_km: Optional[float] = None
    walk_km: Optional[float] = None

    # Energy
    electricity_kwh: Optional[float] = None
    natural_gas_therms: Optional[float] = None
    ac_hours: Optional[float] = None
    heating_hours: Optional[float] = None
    water_usage_liters: Optional[float] = None
    renewable_energy_percent: Optional[float] = Field(default=None, ge=0, le=100)

    # Food
    red_meat_meals: Optional[int] = None
    poultry_meals: Optional[int] = None
    fish_meals: Optional[int] = None
    vegetarian_meals: Optional[int] = None
    vegan_meals: Optional[int] = None
    grocery_bill: Optional[float] = None
    food_waste_kg: Optional[float] = None

    # Waste
    waste_bag_count: Optional[int] = None
    general_waste_kg: Optional[float] = None
    recycling_practiced: Optional[bool] = None
    recycled_waste_kg: Optional[float] = None
    composting_practiced: Optional[bool] = None

    # Lifestyle
    new_clothes_monthly: Optional[int] = None
    shower_frequency: Optional[int] = None
    tv_pc_hours: Optional[float] = None
    internet_hours: Optional[float] = None

    # Home
    uses_solar_panels: Optional[bool] = None
    smart_thermostat: Optional[bool] = None

    # Categorical
    age_group: Optional[str] = None
    lifestyle_type: Optional[str] = None
    location_type: Optional[str] = None
    vehicle_type: Optional[str] = None
    car_fuel_type: Optional[str] = None
    diet_type: Optional[str] = None
    waste_bag_size: Optional[str] = None
    social_activity: Optional[str] = None


class PredictionResponse(BaseModel):
    """The response model for the prediction endpoints."""

    predicted_score: float
    score_category: str
    recommendations: List[str]
    data_sources: Dict[str, bool]
    previous_score: Optional[float] = None
    model_version: str

    @classmethod
    def from_outcome(
        cls, outcome: PredictionOutcome, model_version: str
    ) -> "PredictionResponse":
        return cls(
            predicted_score=outcome.score,
            score_category=outcome.category.value,
            recommendations=outcome.recommendations,
            data_sources=outcome.data_sources.as_dict(),
            previous_score=outcome.previous_score,
            model_version=model_version,
        )


class PredictionLogResponse(BaseModel):
    id: Optional[int]
    input_data: dict
    predicted_score: float
    model_version: str
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: PredictionLogEntry) -> "PredictionLogResponse":
        return cls(
            id=entry.id,
            input_data=entry.raw_input,
            predicted_score=entry.predicted_score,
            model_version=entry.model_version,
            created_at=entry.created_at,
        )


class PredictionHistoryResponse(BaseModel):
    average_score: Optional[float]
    predictions: List[PredictionLogResponse]


class TrendPointResponse(BaseModel):
    day: date
    avg_score: float

    @classmethod
    def from_point(cls, point: TrendPoint) -> "TrendPointResponse":
        return cls(day=point.day, avg_score=round(point.average_score, 2))


class TodaySummaryResponse(BaseModel):
    total_distance_km: float
    meals_logged: int
    recycled: bool

    @classmethod
    def from_summary(cls, summary: TodaySummary) -> "TodaySummaryResponse":
        return cls(
            total_distance_km=summary.total_distance_km,
            meals_logged=summary.meals_logged,
            recycled=summary.recycled,
        )


class PredictionDashboardResponse(BaseModel):
    profile_complete: bool
    latest_score: Optional[float]
    today_summary: Optional[TodaySummaryResponse]
    week_trend: List[TrendPointResponse]
    total_predictions: int
    trips_today: int

    @classmethod
    def from_dashboard(
        cls, dashboard: PredictionDashboard
    ) -> "PredictionDashboardResponse":
        summary = dashboard.today_summary
        return cls(
            profile_complete=dashboard.profile_complete,
            latest_score=dashboard.latest_score,
            today_summary=TodaySummaryResponse.from_summary(summary) if summary else None,
            week_trend=[TrendPointResponse.from_point(p) for p in dashboard.week_trend],
            total_predictions=dashboard.total_predictions,
            trips_today=dashboard.trips_today,
        )


class ScoreCategoryInfo(BaseModel):
    min: int
    max: int
    label: str


class ModelInfoResponse(BaseModel):
    model_loaded: bool
    model_version: str
    features_count: int
    categorical_options: Dict[str, List[str]]
    score_categories: List[ScoreCategoryInfo]

    model_config = {"protected_namespaces": ()}
