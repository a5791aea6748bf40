"""Eco data repository: SQLite implementations of the orchestrator's stores.

One repository object serves every store interface; the orchestrator receives
it once per role so each role can be swapped independently in tests.
"""

import json
import logging
import sqlite3
from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional

from ecoscore.core.interfaces.repositories.stores import (
    IActivityStore,
    IDailyLogStore,
    IPredictionLogStore,
    IProfileStore,
    ITripStore,
    IWeeklyLogStore,
)
from ecoscore.core.prediction.domain import (
    DAILY_INPUT_FIELDS,
    TRAVEL_FIELDS,
    WEEKLY_FIELDS,
    ActivityRecord,
    DailyLog,
    EcoProfile,
    PredictionLogEntry,
    Trip,
    TrendPoint,
    WeeklyLog,
)
from ecoscore.core.storage.database import EcoDatabase

logger = logging.getLogger(__name__)

_PROFILE_COLUMNS = (
    "household_size",
    "age_group",
    "lifestyle_type",
    "location_type",
    "vehicle_type",
    "car_fuel_type",
    "diet_type",
    "uses_solar_panels",
    "smart_thermostat",
    "renewable_energy_percent",
    "recycling_practiced",
    "composting_practiced",
    "waste_bag_size",
    "social_activity",
)
_PROFILE_FLAGS = (
    "uses_solar_panels",
    "smart_thermostat",
    "recycling_practiced",
    "composting_practiced",
)
_DAILY_COLUMNS = TRAVEL_FIELDS + DAILY_INPUT_FIELDS


def _parse_time(value: Optional[str]) -> Optional[time]:
    return time.fromisoformat(value) if value else None


class EcoRepository(
    IProfileStore,
    IDailyLogStore,
    ITripStore,
    IActivityStore,
    IWeeklyLogStore,
    IPredictionLogStore,
):
    """CRUD repository over an :class:`EcoDatabase`.

    Usage::

        db = EcoDatabase(":memory:")
        db.initialize()
        repo = EcoRepository(db)

        repo.upsert_profile(EcoProfile(user_id=1, diet_type="vegan"))
        history = repo.query_history(1, limit=20)
    """

    def __init__(self, database: EcoDatabase) -> None:
        self._db = database

    @staticmethod
    def _now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_profile(self, user_id: int) -> Optional[EcoProfile]:
        row = self._db.connection.execute(
            "SELECT * FROM eco_profiles WHERE user_id = ?", (user_id,)
        ).fetchone()
        return self._row_to_profile(row) if row else None

    def upsert_profile(self, profile: EcoProfile) -> EcoProfile:
        conn = self._db.connection
        now = self._now_iso()
        values = [getattr(profile, column) for column in _PROFILE_COLUMNS]
        assignments = ", ".join(f"{column} = excluded.{column}" for column in _PROFILE_COLUMNS)
        conn.execute(
            f"""INSERT INTO eco_profiles (user_id, {", ".join(_PROFILE_COLUMNS)},
                                          created_at, updated_at)
                VALUES ({", ".join("?" * (len(_PROFILE_COLUMNS) + 3))})
                ON CONFLICT(user_id) DO UPDATE SET {assignments},
                                                   updated_at = excluded.updated_at""",
            [profile.user_id, *values, now, now],
        )
        conn.commit()
        return self.get_profile(profile.user_id)

    @staticmethod
    def _row_to_profile(row: sqlite3.Row) -> EcoProfile:
        values = {column: row[column] for column in _PROFILE_COLUMNS}
        for flag in _PROFILE_FLAGS:
            values[flag] = bool(values[flag])
        return EcoProfile(
            user_id=row["user_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            **values,
        )

    # ------------------------------------------------------------------
    # Daily logs
    # ------------------------------------------------------------------

    def get_daily_log(self, user_id: int, log_date: date) -> Optional[DailyLog]:
        row = self._db.connection.execute(
            "SELECT * FROM daily_logs WHERE user_id = ? AND log_date = ?",
            (user_id, log_date.isoformat()),
        ).fetchone()
        return self._row_to_daily_log(row) if row else None

    def list_daily_logs(
        self, user_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[DailyLog]:
        query = "SELECT * FROM daily_logs WHERE user_id = ?"
        params: list = [user_id]
        if start is not None:
            query += " AND log_date >= ?"
            params.append(start.isoformat())
        if end is not None:
            query += " AND log_date <= ?"
            params.append(end.isoformat())
        query += " ORDER BY log_date DESC"
        rows = self._db.connection.execute(query, params).fetchall()
        return [self._row_to_daily_log(row) for row in rows]

    def record_daily_score(
        self, user_id: int, log_date: date, score: float, category: str
    ) -> bool:
        conn = self._db.connection
        cursor = conn.execute(
            """UPDATE daily_logs SET eco_score = ?, score_category = ?, updated_at = ?
               WHERE user_id = ? AND log_date = ?""",
            (score, category, self._now_iso(), user_id, log_date.isoformat()),
        )
        conn.commit()
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_daily_log(row: sqlite3.Row) -> DailyLog:
        return DailyLog(
            user_id=row["user_id"],
            log_date=date.fromisoformat(row["log_date"]),
            eco_score=row["eco_score"],
            score_category=row["score_category"],
            updated_at=row["updated_at"],
            **{column: row[column] for column in _DAILY_COLUMNS},
        )

    def upsert_daily_log(
        self, user_id: int, log_date: date, fields: Dict[str, float]
    ) -> DailyLog:
        unknown = set(fields) - set(_DAILY_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown daily log fields: {sorted(unknown)}")

        conn = self._db.connection
        now = self._now_iso()
        conn.execute(
            """INSERT OR IGNORE INTO daily_logs (user_id, log_date, updated_at)
               VALUES (?, ?, ?)""",
            (user_id, log_date.isoformat(), now),
        )
        if fields:
            assignments = ", ".join(f"{column} = ?" for column in fields)
            conn.execute(
                f"""UPDATE daily_logs SET {assignments}, updated_at = ?
                    WHERE user_id = ? AND log_date = ?""",
                [*fields.values(), now, user_id, log_date.isoformat()],
            )
        conn.commit()
        return self.get_daily_log(user_id, log_date)

    # ------------------------------------------------------------------
    # Trips
    # ------------------------------------------------------------------

    def add_trip(self, trip: Trip) -> Trip:
        conn = self._db.connection
        if trip.created_at is None:
            trip.created_at = datetime.now(timezone.utc)
        cursor = conn.execute(
            """INSERT INTO trips (user_id, transport_mode, distance_km, trip_date,
                                  start_latitude, start_longitude,
                                  end_latitude, end_longitude,
                                  start_time, end_time, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                trip.user_id,
                trip.transport_mode,
                trip.distance_km,
                trip.trip_date.isoformat(),
                trip.start_latitude,
                trip.start_longitude,
                trip.end_latitude,
                trip.end_longitude,
                trip.start_time.isoformat() if trip.start_time else None,
                trip.end_time.isoformat() if trip.end_time else None,
                trip.created_at.isoformat(),
            ),
        )
        conn.commit()
        trip.id = cursor.lastrowid
        return trip

    def get_trips_for_user_on_date(self, user_id: int, trip_date: date) -> List[Trip]:
        rows = self._db.connection.execute(
            "SELECT * FROM trips WHERE user_id = ? AND trip_date = ? ORDER BY id",
            (user_id, trip_date.isoformat()),
        ).fetchall()
        return [
            Trip(
                id=row["id"],
                user_id=row["user_id"],
                transport_mode=row["transport_mode"],
                distance_km=row["distance_km"],
                trip_date=date.fromisoformat(row["trip_date"]),
                start_latitude=row["start_latitude"],
                start_longitude=row["start_longitude"],
                end_latitude=row["end_latitude"],
                end_longitude=row["end_longitude"],
                start_time=_parse_time(row["start_time"]),
                end_time=_parse_time(row["end_time"]),
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    def add_activity(self, activity: ActivityRecord) -> ActivityRecord:
        conn = self._db.connection
        cursor = conn.execute(
            """INSERT INTO activities (user_id, type_name, quantity, activity_date)
               VALUES (?, ?, ?, ?)""",
            (
                activity.user_id,
                activity.type_name,
                activity.quantity,
                activity.activity_date.isoformat(),
            ),
        )
        conn.commit()
        activity.id = cursor.lastrowid
        return activity

    def get_activities_for_user_on_date(
        self, user_id: int, activity_date: date
    ) -> List[ActivityRecord]:
        rows = self._db.connection.execute(
            """SELECT * FROM activities WHERE user_id = ? AND activity_date = ?
               ORDER BY id""",
            (user_id, activity_date.isoformat()),
        ).fetchall()
        return [
            ActivityRecord(
                id=row["id"],
                user_id=row["user_id"],
                type_name=row["type_name"],
                quantity=row["quantity"],
                activity_date=date.fromisoformat(row["activity_date"]),
            )
            for row in rows
        ]

    # ------------------------------------------------------------------
    # Weekly logs
    # ------------------------------------------------------------------

    def get_weekly_log(self, user_id: int, week_start: date) -> Optional[WeeklyLog]:
        row = self._db.connection.execute(
            "SELECT * FROM weekly_logs WHERE user_id = ? AND week_start = ?",
            (user_id, week_start.isoformat()),
        ).fetchone()
        if row is None:
            return None
        return WeeklyLog(
            user_id=row["user_id"],
            week_start=date.fromisoformat(row["week_start"]),
            **{column: row[column] for column in WEEKLY_FIELDS},
        )

    def upsert_weekly_log(self, log: WeeklyLog) -> WeeklyLog:
        conn = self._db.connection
        values = [getattr(log, column) for column in WEEKLY_FIELDS]
        assignments = ", ".join(f"{column} = excluded.{column}" for column in WEEKLY_FIELDS)
        conn.execute(
            f"""INSERT INTO weekly_logs (user_id, week_start, {", ".join(WEEKLY_FIELDS)})
                VALUES ({", ".join("?" * (len(WEEKLY_FIELDS) + 2))})
                ON CONFLICT(user_id, week_start) DO UPDATE SET {assignments}""",
            [log.user_id, log.week_start.isoformat(), *values],
        )
        conn.commit()
        return self.get_weekly_log(log.user_id, log.week_start)

    # ------------------------------------------------------------------
    # Prediction log
    # ------------------------------------------------------------------

    def append(self, entry: PredictionLogEntry) -> PredictionLogEntry:
        conn = self._db.connection
        cursor = conn.execute(
            """INSERT INTO prediction_logs
               (user_id, input_data, predicted_score, model_version, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (
                entry.user_id,
                json.dumps(entry.raw_input, separators=(",", ":"), sort_keys=True),
                entry.predicted_score,
                entry.model_version,
                entry.created_at.isoformat(),
            ),
        )
        conn.commit()
        entry.id = cursor.lastrowid
        logger.debug("Appended prediction log %d for user %s", entry.id, entry.user_id)
        return entry

    def query_history(self, user_id: int, limit: int) -> List[PredictionLogEntry]:
        rows = self._db.connection.execute(
            """SELECT * FROM prediction_logs WHERE user_id = ?
               ORDER BY created_at DESC, id DESC LIMIT ?""",
            (user_id, limit),
        ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def average(self, user_id: int) -> Optional[float]:
        row = self._db.connection.execute(
            "SELECT AVG(predicted_score) FROM prediction_logs WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        return row[0]

    def count(self, user_id: int) -> int:
        row = self._db.connection.execute(
            "SELECT COUNT(*) FROM prediction_logs WHERE user_id = ?", (user_id,)
        ).fetchone()
        return row[0]

    def daily_averages(self, user_id: int, since: date) -> List[TrendPoint]:
        rows = self._db.connection.execute(
            """SELECT substr(created_at, 1, 10) AS day, AVG(predicted_score) AS avg_score
               FROM prediction_logs
               WHERE user_id = ? AND substr(created_at, 1, 10) >= ?
               GROUP BY day ORDER BY day""",
            (user_id, since.isoformat()),
        ).fetchall()
        return [
            TrendPoint(day=date.fromisoformat(row["day"]), average_score=row["avg_score"])
            for row in rows
        ]

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> PredictionLogEntry:
        return PredictionLogEntry(
            id=row["id"],
            user_id=row["user_id"],
            raw_input=json.loads(row["input_data"]),
            predicted_score=row["predicted_score"],
            model_version=row["model_version"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
