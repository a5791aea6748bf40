"""Storage interfaces consumed by the prediction orchestrator."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional

from ecoscore.core.prediction.domain import (
    ActivityRecord,
    DailyLog,
    EcoProfile,
    PredictionLogEntry,
    Trip,
    TrendPoint,
    WeeklyLog,
)


class IProfileStore(ABC):
    @abstractmethod
    def get_profile(self, user_id: int) -> Optional[EcoProfile]:
        raise NotImplementedError

    @abstractmethod
    def upsert_profile(self, profile: EcoProfile) -> EcoProfile:
        raise NotImplementedError


class IDailyLogStore(ABC):
    @abstractmethod
    def get_daily_log(self, user_id: int, log_date: date) -> Optional[DailyLog]:
        raise NotImplementedError

    @abstractmethod
    def upsert_daily_log(
        self, user_id: int, log_date: date, fields: Dict[str, float]
    ) -> DailyLog:
        """Create the day's row if needed, then overwrite only ``fields``."""
        raise NotImplementedError

    @abstractmethod
    def list_daily_logs(
        self, user_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[DailyLog]:
        """Logs between ``start`` and ``end`` (both inclusive), newest first."""
        raise NotImplementedError

    @abstractmethod
    def record_daily_score(
        self, user_id: int, log_date: date, score: float, category: str
    ) -> bool:
        """Store the predicted score on an existing log; False when there is none."""
        raise NotImplementedError


class ITripStore(ABC):
    @abstractmethod
    def add_trip(self, trip: Trip) -> Trip:
        raise NotImplementedError

    @abstractmethod
    def get_trips_for_user_on_date(self, user_id: int, trip_date: date) -> List[Trip]:
        raise NotImplementedError


class IActivityStore(ABC):
    @abstractmethod
    def add_activity(self, activity: ActivityRecord) -> ActivityRecord:
        raise NotImplementedError

    @abstractmethod
    def get_activities_for_user_on_date(
        self, user_id: int, activity_date: date
    ) -> List[ActivityRecord]:
        raise NotImplementedError


class IWeeklyLogStore(ABC):
    @abstractmethod
    def get_weekly_log(self, user_id: int, week_start: date) -> Optional[WeeklyLog]:
        raise NotImplementedError

    @abstractmethod
    def upsert_weekly_log(self, log: WeeklyLog) -> WeeklyLog:
        raise NotImplementedError


class IPredictionLogStore(ABC):
    """Append-only prediction history."""

    @abstractmethod
    def append(self, entry: PredictionLogEntry) -> PredictionLogEntry:
        raise NotImplementedError

    @abstractmethod
    def query_history(self, user_id: int, limit: int) -> List[PredictionLogEntry]:
        """Entries for ``user_id``, newest first."""
        raise NotImplementedError

    @abstractmethod
    def average(self, user_id: int) -> Optional[float]:
        raise NotImplementedError

    @abstractmethod
    def count(self, user_id: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def daily_averages(self, user_id: int, since: date) -> List[TrendPoint]:
        """Per-day average score from ``since`` (inclusive), oldest first."""
        raise NotImplementedError
