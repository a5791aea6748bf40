"""Prediction orchestration: gather user signals, score them, log the result.

Signals for an authenticated prediction are merged from four sources, each
overlaying the previous one:

1. the user's eco-profile (required),
2. today's daily log, after its travel columns are refreshed from trips,
3. today's discrete activities, merged through ``ACTIVITY_FEATURES``,
4. this week's waste/shopping log.
"""

import logging
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple

from ecoscore.core.errors import ModelUnavailableError, ProfileMissingError
from ecoscore.core.interfaces.repositories.stores import (
    IActivityStore,
    IDailyLogStore,
    IPredictionLogStore,
    IProfileStore,
    ITripStore,
    IWeeklyLogStore,
)
from ecoscore.core.interfaces.services.predictor import IScoreModel
from ecoscore.core.prediction.domain import (
    DAILY_INPUT_FIELDS,
    DailyLog,
    DataSources,
    EcoProfile,
    PredictionDashboard,
    PredictionLogEntry,
    PredictionOutcome,
    ScoreCategory,
    TodaySummary,
    Trip,
    TrendPoint,
    WeeklyLog,
)
from ecoscore.core.prediction.model.feature_pipeline import (
    CATEGORICAL_VOCABULARIES,
    expected_feature_count,
    prepare,
)
from ecoscore.core.prediction.model.signals import (
    BoolValue,
    NumberValue,
    RawSignalMap,
    SignalValue,
    coerce_number,
    to_plain,
    to_signal_map,
)
from ecoscore.core.prediction.services.scoring import (
    MAX_QUICK_RECOMMENDATIONS,
    MAX_RECOMMENDATIONS,
    categorize,
    clamp_score,
    finalize_score,
    generate_recommendations,
    score_bands,
)

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

TRANSPORT_MODE_FEATURES: Mapping[str, str] = {
    "car": "car_km",
    "electric_car": "car_km",
    "bus": "bus_km",
    "train": "train_metro_km",
    "bike": "bike_km",
    "walk": "walk_km",
}


class ActivityMapping(NamedTuple):
    feature: str
    additive: bool


# Activity type name -> feature. Additive mappings add the activity quantity;
# the others set a flag. Unlisted activity types do not affect the prediction.
ACTIVITY_FEATURES: Mapping[str, ActivityMapping] = {
    "Vegan Meal": ActivityMapping("vegan_meals", True),
    "Vegetarian Meal": ActivityMapping("vegetarian_meals", True),
    "Chicken Meal": ActivityMapping("poultry_meals", True),
    "Beef Meal": ActivityMapping("red_meat_meals", True),
    "AC Usage (1hr)": ActivityMapping("ac_hours", True),
    "Heating (1hr)": ActivityMapping("heating_hours", True),
    "Recycling": ActivityMapping("recycling_practiced", False),
    "Composting": ActivityMapping("composting_practiced", False),
    "Solar Power": ActivityMapping("uses_solar_panels", False),
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def week_start_for(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def haversine_km(
    start_latitude: float, start_longitude: float, end_latitude: float, end_longitude: float
) -> float:
    """Great-circle distance between two GPS coordinates, in kilometres."""
    d_lat = math.radians(end_latitude - start_latitude)
    d_lon = math.radians(end_longitude - start_longitude)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(start_latitude))
        * math.cos(math.radians(end_latitude))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def aggregate_trips(trips: List[Trip]) -> Dict[str, float]:
    """Sum trip distances per travel column; unknown modes only count as trips."""
    travel = {feature: 0.0 for feature in set(TRANSPORT_MODE_FEATURES.values())}
    for trip in trips:
        feature = TRANSPORT_MODE_FEATURES.get(trip.transport_mode)
        if feature is not None:
            travel[feature] += trip.distance_km
    travel["num_trips"] = len(trips)
    return travel


class PredictionOrchestrator:
    """Builds raw signals for a user, runs the model and records the outcome."""

    def __init__(
        self,
        model: IScoreModel,
        profiles: IProfileStore,
        daily_logs: IDailyLogStore,
        trips: ITripStore,
        activities: IActivityStore,
        weekly_logs: IWeeklyLogStore,
        prediction_log: IPredictionLogStore,
        model_version: str = "v1.0",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._model = model
        self._profiles = profiles
        self._daily_logs = daily_logs
        self._trips = trips
        self._activities = activities
        self._weekly_logs = weekly_logs
        self._prediction_log = prediction_log
        self._model_version = model_version
        self._clock = clock

    @classmethod
    def from_repository(cls, model: IScoreModel, repository, **kwargs) -> "PredictionOrchestrator":
        """Wire every store role to the same repository object."""
        return cls(
            model,
            profiles=repository,
            daily_logs=repository,
            trips=repository,
            activities=repository,
            weekly_logs=repository,
            prediction_log=repository,
            **kwargs,
        )

    @property
    def model_loaded(self) -> bool:
        return self._model.is_loaded

    @property
    def model_version(self) -> str:
        return self._model_version

    def _today(self) -> date:
        return self._clock().date()

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    def predict_for_user(self, user_id: int) -> PredictionOutcome:
        """Predict from the user's stored profile and today's logs."""
        self._require_model()
        profile = self._profiles.get_profile(user_id)
        if profile is None:
            raise ProfileMissingError(user_id)

        now = self._clock()
        raw, sources = self.gather_signals(profile, now.date())

        previous = self._prediction_log.query_history(user_id, 1)
        score, category, recommendations = self._score(
            raw, now.date(), MAX_RECOMMENDATIONS
        )

        self._record(user_id, raw, score, now)
        self._daily_logs.record_daily_score(user_id, now.date(), score, category.value)
        logger.info(
            "Eco-score prediction for user %d: %.2f (%s)", user_id, score, category.value
        )
        return PredictionOutcome(
            score=score,
            category=category,
            recommendations=recommendations,
            data_sources=sources,
            previous_score=previous[0].predicted_score if previous else None,
        )

    def quick_predict(self, signals: Mapping[str, Any]) -> PredictionOutcome:
        """Predict from caller-supplied values only; needs no stored profile."""
        self._require_model()
        raw = to_signal_map(signals)
        now = self._clock()

        score, category, recommendations = self._score(
            raw, now.date(), MAX_QUICK_RECOMMENDATIONS
        )

        self._record(None, raw, score, now)
        logger.info("Quick eco-score prediction: %.2f (%s)", score, category.value)
        return PredictionOutcome(
            score=score, category=category, recommendations=recommendations
        )

    def _require_model(self) -> None:
        if not self._model.is_loaded:
            raise ModelUnavailableError()

    def _score(
        self, raw: RawSignalMap, today: date, limit: int
    ) -> Tuple[float, ScoreCategory, List[str]]:
        vector = prepare(raw, today, self._model.feature_names)
        clamped = clamp_score(self._model.invoke(vector))
        return (
            finalize_score(clamped),
            categorize(clamped),
            generate_recommendations(raw, limit),
        )

    def _record(
        self, user_id: Optional[int], raw: RawSignalMap, score: float, now: datetime
    ) -> None:
        self._prediction_log.append(
            PredictionLogEntry(
                user_id=user_id,
                raw_input=to_plain(raw),
                predicted_score=score,
                model_version=self._model_version,
                created_at=now,
            )
        )

    # ------------------------------------------------------------------
    # Signal gathering
    # ------------------------------------------------------------------

    def gather_signals(
        self, profile: EcoProfile, today: date
    ) -> Tuple[Dict[str, SignalValue], DataSources]:
        """Merge profile, daily log, activities and weekly log into one raw map."""
        user_id = profile.user_id
        raw: Dict[str, SignalValue] = to_signal_map(profile.signals())

        daily_log = self.refresh_daily_travel(user_id, today)
        if daily_log is not None:
            raw.update(to_signal_map(daily_log.signals()))

        activities = self._activities.get_activities_for_user_on_date(user_id, today)
        for activity in activities:
            mapping = ACTIVITY_FEATURES.get(activity.type_name)
            if mapping is None:
                continue
            if mapping.additive:
                current = coerce_number(raw.get(mapping.feature), 0.0)
                raw[mapping.feature] = NumberValue(current + activity.quantity)
            else:
                raw[mapping.feature] = BoolValue(True)

        weekly_log = self._weekly_logs.get_weekly_log(user_id, week_start_for(today))
        if weekly_log is not None:
            raw.update(to_signal_map(weekly_log.signals()))

        sources = DataSources(
            profile=True,
            daily_log=daily_log is not None,
            activities_today=bool(activities),
            weekly_log=weekly_log is not None,
        )
        return raw, sources

    def refresh_daily_travel(self, user_id: int, today: date) -> Optional[DailyLog]:
        """Recompute the day's travel columns from trips, then return the log.

        Without trips the stored log is returned untouched, so manually entered
        distances survive.
        """
        trips = self._trips.get_trips_for_user_on_date(user_id, today)
        if not trips:
            return self._daily_logs.get_daily_log(user_id, today)

        travel = aggregate_trips(trips)
        logger.debug("Refreshed travel for user %d on %s: %s", user_id, today, travel)
        return self._daily_logs.upsert_daily_log(user_id, today, travel)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def history(self, user_id: int, limit: int = 20) -> List[PredictionLogEntry]:
        return self._prediction_log.query_history(user_id, limit)

    def average_score(self, user_id: int) -> Optional[float]:
        return self._prediction_log.average(user_id)

    def trend(self, user_id: int, days: int = 7) -> List[TrendPoint]:
        """Daily average scores for the last ``days`` days, today included."""
        since = self._today() - timedelta(days=max(days, 1) - 1)
        return self._prediction_log.daily_averages(user_id, since)

    def dashboard(self, user_id: int) -> PredictionDashboard:
        """Summarize the user's profile, today's inputs and recent scores."""
        today = self._today()
        profile = self._profiles.get_profile(user_id)
        latest = self._prediction_log.query_history(user_id, 1)

        summary = None
        daily_log = self._daily_logs.get_daily_log(user_id, today)
        if daily_log is not None:
            activities = self._activities.get_activities_for_user_on_date(user_id, today)
            recycled = any(a.type_name == "Recycling" for a in activities) or bool(
                profile and profile.recycling_practiced
            )
            summary = TodaySummary(
                total_distance_km=round(daily_log.total_distance_km, 2),
                meals_logged=daily_log.meals_logged,
                recycled=recycled,
            )

        return PredictionDashboard(
            profile_complete=profile is not None,
            latest_score=latest[0].predicted_score if latest else None,
            today_summary=summary,
            week_trend=self.trend(user_id, 7),
            total_predictions=self._prediction_log.count(user_id),
            trips_today=len(self._trips.get_trips_for_user_on_date(user_id, today)),
        )

    def model_info(self) -> Dict[str, Any]:
        return {
            "model_loaded": self._model.is_loaded,
            "model_version": self._model_version,
            "features_count": len(self._model.feature_names) or expected_feature_count(),
            "categorical_options": {
                category: list(options)
                for category, options in CATEGORICAL_VOCABULARIES.items()
            },
            "score_categories": score_bands(),
        }

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def get_profile(self, user_id: int) -> Optional[EcoProfile]:
        return self._profiles.get_profile(user_id)

    def save_profile(self, profile: EcoProfile) -> EcoProfile:
        return self._profiles.upsert_profile(profile)

    def record_daily_input(self, user_id: int, fields: Mapping[str, float]) -> DailyLog:
        """Store today's manually entered energy, meal and lifestyle values."""
        unknown = set(fields) - set(DAILY_INPUT_FIELDS)
        if unknown:
            raise ValueError(f"Not a daily input field: {sorted(unknown)}")
        return self._daily_logs.upsert_daily_log(user_id, self._today(), dict(fields))

    def daily_logs(
        self, user_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[DailyLog]:
        return self._daily_logs.list_daily_logs(user_id, start, end)

    def save_weekly_log(self, user_id: int, values: Mapping[str, Any]) -> WeeklyLog:
        """Upsert the waste/shopping log of the current week."""
        log = WeeklyLog(user_id=user_id, week_start=week_start_for(self._today()), **values)
        return self._weekly_logs.upsert_weekly_log(log)

    def record_trip(
        self,
        user_id: int,
        transport_mode: str,
        start_latitude: float,
        start_longitude: float,
        end_latitude: float,
        end_longitude: float,
        trip_date: Optional[date] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
    ) -> Trip:
        """Store a GPS trip; its distance feeds the next daily-log refresh."""
        trip = Trip(
            user_id=user_id,
            transport_mode=transport_mode,
            distance_km=haversine_km(
                start_latitude, start_longitude, end_latitude, end_longitude
            ),
            trip_date=trip_date or self._today(),
            start_latitude=start_latitude,
            start_longitude=start_longitude,
            end_latitude=end_latitude,
            end_longitude=end_longitude,
            start_time=start_time,
            end_time=end_time,
            created_at=self._clock(),
        )
        return self._trips.add_trip(trip)
