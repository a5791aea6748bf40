"""Schemas for the eco-profile, daily/weekly log and trip endpoints."""

from datetime import date, datetime, time
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ecoscore.core.prediction.domain import DailyLog, EcoProfile, Trip, WeeklyLog


class EcoProfileRequest(BaseModel):
    """The JSON body used to create or replace a user's eco-profile."""

    household_size: int = Field(default=1, ge=1)
    age_group: str = "26-35"
    lifestyle_type: str = "office_worker"
    location_type: str = "urban"
    vehicle_type: str = "none"
    car_fuel_type: str = "none"
    diet_type: str = "omnivore"
    uses_solar_panels: bool = False
    smart_thermostat: bool = False
    renewable_energy_percent: float = Field(default=0.0, ge=0, le=100)
    recycling_practiced: bool = False
    composting_practiced: bool = False
    waste_bag_size: str = "medium"
    social_activity: str = "sometimes"


class EcoProfileResponse(EcoProfileRequest):
    user_id: int
    updated_at: str

    @classmethod
    def from_profile(cls, profile: EcoProfile) -> "EcoProfileResponse":
        return cls(
            user_id=profile.user_id,
            updated_at=profile.updated_at,
            **{name: getattr(profile, name) for name in EcoProfileRequest.model_fields},
        )


class DailyLogInput(BaseModel):
    """Manually entered values for today; travel comes from recorded trips."""

    electricity_kwh: Optional[float] = Field(default=None, ge=0)
    natural_gas_therms: Optional[float] = Field(default=None, ge=0)
    ac_hours: Optional[float] = Field(default=None, ge=0, le=24)
    heating_hours: Optional[float] = Field(default=None, ge=0, le=24)
    water_usage_liters: Optional[float] = Field(default=None, ge=0)
    red_meat_meals: Optional[int] = Field(default=None, ge=0)
    poultry_meals: Optional[int] = Field(default=None, ge=0)
    fish_meals: Optional[int] = Field(default=None, ge=0)
    vegetarian_meals: Optional[int] = Field(default=None, ge=0)
    vegan_meals: Optional[int] = Field(default=None, ge=0)
    food_waste_kg: Optional[float] = Field(default=None, ge=0)
    shower_frequency: Optional[int] = Field(default=None, ge=0)
    tv_pc_hours: Optional[float] = Field(default=None, ge=0, le=24)
    internet_hours: Optional[float] = Field(default=None, ge=0, le=24)


class DailyLogResponse(BaseModel):
    log_date: date
    car_km: float
    bus_km: float
    train_metro_km: float
    bike_km: float
    walk_km: float
    total_distance_km: float
    num_trips: int
    electricity_kwh: float
    natural_gas_therms: float
    ac_hours: float
    heating_hours: float
    water_usage_liters: float
    red_meat_meals: int
    poultry_meals: int
    fish_meals: int
    vegetarian_meals: int
    vegan_meals: int
    food_waste_kg: float
    shower_frequency: int
    tv_pc_hours: float
    internet_hours: float
    eco_score: Optional[float] = None
    score_category: str = ""

    @classmethod
    def from_log(cls, log: DailyLog) -> "DailyLogResponse":
        values = {
            name: getattr(log, name)
            for name in cls.model_fields
            if name != "total_distance_km"
        }
        return cls(total_distance_km=log.total_distance_km, **values)


class WeeklyLogInput(BaseModel):
    waste_bag_count: int = Field(default=0, ge=0)
    general_waste_kg: float = Field(default=0.0, ge=0)
    recycled_waste_kg: float = Field(default=0.0, ge=0)
    grocery_bill: float = Field(default=0.0, ge=0)
    new_clothes_monthly: int = Field(default=0, ge=0)


class WeeklyLogResponse(WeeklyLogInput):
    week_start: date

    @classmethod
    def from_log(cls, log: WeeklyLog) -> "WeeklyLogResponse":
        return cls(
            week_start=log.week_start,
            **{name: getattr(log, name) for name in WeeklyLogInput.model_fields},
        )


class TripCreateRequest(BaseModel):
    transport_mode: Literal["car", "electric_car", "bus", "train", "bike", "walk"] = "walk"
    start_latitude: float = Field(ge=-90, le=90)
    start_longitude: float = Field(ge=-180, le=180)
    end_latitude: float = Field(ge=-90, le=90)
    end_longitude: float = Field(ge=-180, le=180)
    trip_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None


class TripResponse(BaseModel):
    id: Optional[int]
    transport_mode: str
    distance_km: float
    trip_date: date
    start_latitude: Optional[float]
    start_longitude: Optional[float]
    end_latitude: Optional[float]
    end_longitude: Optional[float]
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_trip(cls, trip: Trip) -> "TripResponse":
        return cls(
            id=trip.id,
            transport_mode=trip.transport_mode,
            distance_km=round(trip.distance_km, 3),
            trip_date=trip.trip_date,
            start_latitude=trip.start_latitude,
            start_longitude=trip.start_longitude,
            end_latitude=trip.end_latitude,
            end_longitude=trip.end_longitude,
            start_time=trip.start_time,
            end_time=trip.end_time,
            created_at=trip.created_at,
        )
