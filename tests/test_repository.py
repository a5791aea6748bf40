"""Tests for the SQLite database and repository."""

import sqlite3
from datetime import date, datetime, time, timezone

import pytest

from ecoscore.core.errors import StorageError
from ecoscore.core.prediction.domain import (
    ActivityRecord,
    EcoProfile,
    PredictionLogEntry,
    Trip,
    WeeklyLog,
)
from ecoscore.core.storage.database import SCHEMA_VERSION, EcoDatabase
from ecoscore.core.storage.repository import EcoRepository

DAY = date(2026, 3, 14)


class TestEcoDatabase:
    def test_connection_requires_initialize(self):
        db = EcoDatabase(":memory:")
        with pytest.raises(StorageError):
            _ = db.connection

    def test_initialize_is_idempotent(self, eco_db):
        conn = eco_db.connection
        eco_db.initialize()
        assert eco_db.connection is conn
        assert eco_db.get_schema_version() == SCHEMA_VERSION

    def test_all_tables_created(self, eco_db):
        rows = eco_db.connection.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        ).fetchall()
        names = {row["name"] for row in rows}
        assert {
            "eco_profiles",
            "daily_logs",
            "trips",
            "activities",
            "weekly_logs",
            "prediction_logs",
            "schema_version",
        } <= names

    def test_file_database_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "eco.db"
        with EcoDatabase(str(db_path)) as db:
            assert db.get_schema_version() == SCHEMA_VERSION
        assert db_path.exists()

    def test_reopening_file_database_keeps_schema_version(self, tmp_path):
        db_path = str(tmp_path / "eco.db")
        with EcoDatabase(db_path):
            pass
        with EcoDatabase(db_path) as db:
            rows = db.connection.execute("SELECT version FROM schema_version").fetchall()
        assert len(rows) == 1

    def test_close_resets_connection(self):
        db = EcoDatabase(":memory:")
        db.initialize()
        db.close()
        with pytest.raises(StorageError):
            _ = db.connection


class TestProfiles:
    def test_missing_profile(self, repository):
        assert repository.get_profile(1) is None

    def test_upsert_inserts_then_updates(self, repository):
        created = repository.upsert_profile(
            EcoProfile(user_id=1, diet_type="vegan", uses_solar_panels=True)
        )
        assert created.diet_type == "vegan"
        assert created.uses_solar_panels is True
        assert created.created_at

        updated = repository.upsert_profile(
            EcoProfile(user_id=1, diet_type="vegetarian", household_size=4)
        )
        assert updated.diet_type == "vegetarian"
        assert updated.household_size == 4
        assert updated.uses_solar_panels is False
        assert updated.created_at == created.created_at

    def test_profile_defaults_round_trip(self, repository):
        profile = repository.upsert_profile(EcoProfile(user_id=7))
        assert profile.signals() == EcoProfile(user_id=7).signals()


class TestDailyLogs:
    def test_upsert_creates_row_with_defaults(self, repository):
        log = repository.upsert_daily_log(1, DAY, {"electricity_kwh": 9.0})
        assert log.log_date == DAY
        assert log.electricity_kwh == 9.0
        assert log.car_km == 0.0
        assert log.shower_frequency == 1

    def test_upsert_only_touches_given_columns(self, repository):
        repository.upsert_daily_log(1, DAY, {"electricity_kwh": 9.0})
        log = repository.upsert_daily_log(1, DAY, {"car_km": 3.0, "num_trips": 1})
        assert log.electricity_kwh == 9.0
        assert log.car_km == 3.0
        assert log.total_distance_km == 3.0

    def test_upsert_without_fields_creates_empty_row(self, repository):
        log = repository.upsert_daily_log(1, DAY, {})
        assert log is not None
        assert log.num_trips == 0

    def test_upsert_rejects_unknown_columns(self, repository):
        with pytest.raises(ValueError):
            repository.upsert_daily_log(1, DAY, {"car_km; DROP TABLE trips": 1.0})

    def test_one_row_per_user_per_day(self, repository, eco_db):
        repository.upsert_daily_log(1, DAY, {"car_km": 1.0})
        repository.upsert_daily_log(1, DAY, {"car_km": 2.0})
        repository.upsert_daily_log(2, DAY, {"car_km": 5.0})
        count = eco_db.connection.execute("SELECT COUNT(*) FROM daily_logs").fetchone()[0]
        assert count == 2
        assert repository.get_daily_log(1, DAY).car_km == 2.0
        assert repository.get_daily_log(1, date(2026, 3, 15)) is None

    def test_list_daily_logs_bounds_are_inclusive(self, repository):
        for day in (11, 12, 13, 14):
            repository.upsert_daily_log(1, date(2026, 3, day), {})
        repository.upsert_daily_log(2, DAY, {})

        logs = repository.list_daily_logs(1, date(2026, 3, 12), date(2026, 3, 13))
        assert [log.log_date for log in logs] == [date(2026, 3, 13), date(2026, 3, 12)]
        assert len(repository.list_daily_logs(1, start=date(2026, 3, 13))) == 2
        assert len(repository.list_daily_logs(1, end=date(2026, 3, 11))) == 1
        assert repository.list_daily_logs(3) == []

    def test_record_daily_score_updates_existing_row(self, repository):
        repository.upsert_daily_log(1, DAY, {"car_km": 2.0})
        assert repository.record_daily_score(1, DAY, 64.25, "Good") is True

        log = repository.get_daily_log(1, DAY)
        assert log.eco_score == 64.25
        assert log.score_category == "Good"
        assert log.car_km == 2.0

    def test_record_daily_score_without_row(self, repository):
        assert repository.record_daily_score(1, DAY, 50.0, "Average") is False
        assert repository.get_daily_log(1, DAY) is None

    def test_new_log_has_no_score(self, repository):
        log = repository.upsert_daily_log(1, DAY, {})
        assert log.eco_score is None
        assert log.score_category == ""


class TestTripsAndActivities:
    def test_trips_filtered_by_user_and_day(self, repository):
        first = repository.add_trip(Trip(1, "car", 4.0, DAY, 1.0, 2.0, 3.0, 4.0))
        repository.add_trip(Trip(1, "bus", 2.0, date(2026, 3, 13)))
        repository.add_trip(Trip(2, "walk", 1.0, DAY))

        assert first.id is not None
        trips = repository.get_trips_for_user_on_date(1, DAY)
        assert len(trips) == 1
        assert trips[0].transport_mode == "car"
        assert trips[0].end_longitude == 4.0
        assert trips[0].start_time is None
        assert trips[0].created_at is not None

    def test_trip_times_round_trip(self, repository):
        created_at = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
        repository.add_trip(
            Trip(
                1,
                "bus",
                6.0,
                DAY,
                start_time=time(7, 45),
                end_time=time(8, 10, 30),
                created_at=created_at,
            )
        )

        [trip] = repository.get_trips_for_user_on_date(1, DAY)
        assert trip.start_time == time(7, 45)
        assert trip.end_time == time(8, 10, 30)
        assert trip.created_at == created_at

    def test_activities_filtered_by_user_and_day(self, repository):
        repository.add_activity(ActivityRecord(1, "Vegan Meal", DAY, quantity=2.0))
        repository.add_activity(ActivityRecord(1, "Recycling", DAY))
        repository.add_activity(ActivityRecord(1, "Recycling", date(2026, 3, 12)))

        activities = repository.get_activities_for_user_on_date(1, DAY)
        assert [activity.type_name for activity in activities] == ["Vegan Meal", "Recycling"]
        assert activities[0].quantity == 2.0


class TestWeeklyLogs:
    def test_upsert_replaces_week(self, repository):
        week = date(2026, 3, 9)
        repository.upsert_weekly_log(WeeklyLog(1, week, waste_bag_count=2))
        log = repository.upsert_weekly_log(WeeklyLog(1, week, grocery_bill=55.0))
        assert log.waste_bag_count == 0
        assert log.grocery_bill == 55.0
        assert repository.get_weekly_log(1, date(2026, 3, 2)) is None


class TestPredictionLog:
    def test_append_assigns_id_and_round_trips(self, repository):
        created_at = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
        entry = repository.append(
            PredictionLogEntry(
                user_id=1,
                raw_input={"car_km": 4.0, "diet_type": "vegan"},
                predicted_score=66.6,
                model_version="v1.0",
                created_at=created_at,
            )
        )
        assert entry.id is not None

        [stored] = repository.query_history(1, 5)
        assert stored.raw_input == {"car_km": 4.0, "diet_type": "vegan"}
        assert stored.created_at == created_at

    def test_same_timestamp_orders_by_insertion(self, repository):
        created_at = datetime(2026, 3, 14, tzinfo=timezone.utc)
        for score in (10.0, 20.0, 30.0):
            repository.append(PredictionLogEntry(1, {}, score, "v1.0", created_at))
        assert [e.predicted_score for e in repository.query_history(1, 2)] == [30.0, 20.0]

    def test_average_none_without_rows(self, repository):
        assert repository.average(1) is None
        assert repository.count(1) == 0

    def test_count_is_per_user(self, repository):
        created_at = datetime(2026, 3, 14, tzinfo=timezone.utc)
        for user_id in (1, 1, 2, None):
            repository.append(PredictionLogEntry(user_id, {}, 40.0, "v1.0", created_at))
        assert repository.count(1) == 2
        assert repository.count(2) == 1

    def test_anonymous_entries_not_in_user_history(self, repository):
        created_at = datetime(2026, 3, 14, tzinfo=timezone.utc)
        repository.append(PredictionLogEntry(None, {}, 50.0, "v1.0", created_at))
        assert repository.query_history(1, 10) == []

    def test_rows_are_plain_sqlite_rows(self, eco_db, repository):
        repository.upsert_profile(EcoProfile(user_id=1))
        row = eco_db.connection.execute("SELECT * FROM eco_profiles").fetchone()
        assert isinstance(row, sqlite3.Row)
        assert isinstance(EcoRepository(eco_db).get_profile(1), EcoProfile)
