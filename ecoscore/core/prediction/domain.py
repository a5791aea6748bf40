"""Data models shared by the orchestrator and the storage layer."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ScoreCategory(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    BELOW_AVERAGE = "Below Average"
    NEEDS_IMPROVEMENT = "Needs Improvement"


@dataclass
class EcoProfile:
    """Per-user lifestyle baseline; every authenticated prediction needs one."""

    user_id: int
    household_size: int = 1
    age_group: str = "26-35"
    lifestyle_type: str = "office_worker"
    location_type: str = "urban"
    vehicle_type: str = "none"
    car_fuel_type: str = "none"
    diet_type: str = "omnivore"
    uses_solar_panels: bool = False
    smart_thermostat: bool = False
    renewable_energy_percent: float = 0.0
    recycling_practiced: bool = False
    composting_practiced: bool = False
    waste_bag_size: str = "medium"
    social_activity: str = "sometimes"
    created_at: str = ""
    updated_at: str = ""

    def signals(self) -> Dict[str, Any]:
        """Profile fields that feed the prediction."""
        return {
            "household_size": self.household_size,
            "age_group": self.age_group,
            "lifestyle_type": self.lifestyle_type,
            "location_type": self.location_type,
            "vehicle_type": self.vehicle_type,
            "car_fuel_type": self.car_fuel_type,
            "diet_type": self.diet_type,
            "uses_solar_panels": self.uses_solar_panels,
            "smart_thermostat": self.smart_thermostat,
            "renewable_energy_percent": self.renewable_energy_percent,
            "recycling_practiced": self.recycling_practiced,
            "composting_practiced": self.composting_practiced,
            "waste_bag_size": self.waste_bag_size,
            "social_activity": self.social_activity,
        }


TRAVEL_FIELDS: Tuple[str, ...] = (
    "car_km",
    "bus_km",
    "train_metro_km",
    "bike_km",
    "walk_km",
    "num_trips",
)

DAILY_INPUT_FIELDS: Tuple[str, ...] = (
    "electricity_kwh",
    "natural_gas_therms",
    "ac_hours",
    "heating_hours",
    "water_usage_liters",
    "red_meat_meals",
    "poultry_meals",
    "fish_meals",
    "vegetarian_meals",
    "vegan_meals",
    "food_waste_kg",
    "shower_frequency",
    "tv_pc_hours",
    "internet_hours",
)


@dataclass
class DailyLog:
    """One row per user per calendar day; travel columns are a cache of trips."""

    user_id: int
    log_date: date
    car_km: float = 0.0
    bus_km: float = 0.0
    train_metro_km: float = 0.0
    bike_km: float = 0.0
    walk_km: float = 0.0
    num_trips: int = 0
    electricity_kwh: float = 0.0
    natural_gas_therms: float = 0.0
    ac_hours: float = 0.0
    heating_hours: float = 0.0
    water_usage_liters: float = 0.0
    red_meat_meals: int = 0
    poultry_meals: int = 0
    fish_meals: int = 0
    vegetarian_meals: int = 0
    vegan_meals: int = 0
    food_waste_kg: float = 0.0
    shower_frequency: int = 1
    tv_pc_hours: float = 0.0
    internet_hours: float = 0.0
    eco_score: Optional[float] = None
    score_category: str = ""
    updated_at: str = ""

    @property
    def total_distance_km(self) -> float:
        return self.car_km + self.bus_km + self.train_metro_km + self.bike_km + self.walk_km

    @property
    def meals_logged(self) -> int:
        return (
            self.red_meat_meals
            + self.poultry_meals
            + self.fish_meals
            + self.vegetarian_meals
            + self.vegan_meals
        )

    def signals(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in TRAVEL_FIELDS + DAILY_INPUT_FIELDS}


WEEKLY_FIELDS: Tuple[str, ...] = (
    "waste_bag_count",
    "grocery_bill",
    "new_clothes_monthly",
    "general_waste_kg",
    "recycled_waste_kg",
)


@dataclass
class WeeklyLog:
    """Waste and shopping totals for the week starting ``week_start`` (a Monday)."""

    user_id: int
    week_start: date
    waste_bag_count: int = 0
    general_waste_kg: float = 0.0
    recycled_waste_kg: float = 0.0
    grocery_bill: float = 0.0
    new_clothes_monthly: int = 0

    def signals(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in WEEKLY_FIELDS}


@dataclass
class Trip:
    user_id: int
    transport_mode: str
    distance_km: float
    trip_date: date
    start_latitude: Optional[float] = None
    start_longitude: Optional[float] = None
    end_latitude: Optional[float] = None
    end_longitude: Optional[float] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass
class ActivityRecord:
    user_id: int
    type_name: str
    activity_date: date
    quantity: float = 1.0
    id: Optional[int] = None


@dataclass
class PredictionLogEntry:
    """Append-only record of one prediction."""

    user_id: Optional[int]
    raw_input: Dict[str, Any]
    predicted_score: float
    model_version: str
    created_at: datetime
    id: Optional[int] = None


@dataclass(frozen=True)
class DataSources:
    profile: bool = False
    daily_log: bool = False
    activities_today: bool = False
    weekly_log: bool = False

    def as_dict(self) -> Dict[str, bool]:
        return {
            "profile": self.profile,
            "daily_log": self.daily_log,
            "activities_today": self.activities_today,
            "weekly_log": self.weekly_log,
        }


@dataclass(frozen=True)
class PredictionOutcome:
    score: float
    category: ScoreCategory
    recommendations: List[str] = field(default_factory=list)
    data_sources: DataSources = field(default_factory=DataSources)
    previous_score: Optional[float] = None


@dataclass(frozen=True)
class TrendPoint:
    day: date
    average_score: float


@dataclass(frozen=True)
class TodaySummary:
    total_distance_km: float
    meals_logged: int
    recycled: bool


@dataclass(frozen=True)
class PredictionDashboard:
    """Snapshot shown on the app's eco-score screen."""

    profile_complete: bool
    latest_score: Optional[float]
    today_summary: Optional[TodaySummary]
    week_trend: List[TrendPoint]
    total_predictions: int
    trips_today: int
