"""SQLite database management for eco-score data.

Handles connection lifecycle and schema creation.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from ecoscore.core.errors import StorageError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_SCHEMA_V1 = """
CREATE TABLE IF NOT EXISTS eco_profiles (
    user_id                  INTEGER PRIMARY KEY,
    household_size           INTEGER NOT NULL DEFAULT 1,
    age_group                TEXT NOT NULL DEFAULT '26-35',
    lifestyle_type           TEXT NOT NULL DEFAULT 'office_worker',
    location_type            TEXT NOT NULL DEFAULT 'urban',
    vehicle_type             TEXT NOT NULL DEFAULT 'none',
    car_fuel_type            TEXT NOT NULL DEFAULT 'none',
    diet_type                TEXT NOT NULL DEFAULT 'omnivore',
    uses_solar_panels        INTEGER NOT NULL DEFAULT 0,
    smart_thermostat         INTEGER NOT NULL DEFAULT 0,
    renewable_energy_percent REAL NOT NULL DEFAULT 0,
    recycling_practiced      INTEGER NOT NULL DEFAULT 0,
    composting_practiced     INTEGER NOT NULL DEFAULT 0,
    waste_bag_size           TEXT NOT NULL DEFAULT 'medium',
    social_activity          TEXT NOT NULL DEFAULT 'sometimes',
    created_at               TEXT NOT NULL,
    updated_at               TEXT NOT NULL
);

-- One row per user per day; travel columns are refreshed from trips
CREATE TABLE IF NOT EXISTS daily_logs (
    user_id            INTEGER NOT NULL,
    log_date           TEXT NOT NULL,
    car_km             REAL NOT NULL DEFAULT 0,
    bus_km             REAL NOT NULL DEFAULT 0,
    train_metro_km     REAL NOT NULL DEFAULT 0,
    bike_km            REAL NOT NULL DEFAULT 0,
    walk_km            REAL NOT NULL DEFAULT 0,
    num_trips          INTEGER NOT NULL DEFAULT 0,
    electricity_kwh    REAL NOT NULL DEFAULT 0,
    natural_gas_therms REAL NOT NULL DEFAULT 0,
    ac_hours           REAL NOT NULL DEFAULT 0,
    heating_hours      REAL NOT NULL DEFAULT 0,
    water_usage_liters REAL NOT NULL DEFAULT 0,
    red_meat_meals     INTEGER NOT NULL DEFAULT 0,
    poultry_meals      INTEGER NOT NULL DEFAULT 0,
    fish_meals         INTEGER NOT NULL DEFAULT 0,
    vegetarian_meals   INTEGER NOT NULL DEFAULT 0,
    vegan_meals        INTEGER NOT NULL DEFAULT 0,
    food_waste_kg      REAL NOT NULL DEFAULT 0,
    shower_frequency   INTEGER NOT NULL DEFAULT 1,
    tv_pc_hours        REAL NOT NULL DEFAULT 0,
    internet_hours     REAL NOT NULL DEFAULT 0,
    eco_score          REAL,
    score_category     TEXT NOT NULL DEFAULT '',
    updated_at         TEXT NOT NULL,
    PRIMARY KEY (user_id, log_date)
);

CREATE TABLE IF NOT EXISTS trips (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id         INTEGER NOT NULL,
    transport_mode  TEXT NOT NULL,
    distance_km     REAL NOT NULL,
    trip_date       TEXT NOT NULL,
    start_latitude  REAL,
    start_longitude REAL,
    end_latitude    REAL,
    end_longitude   REAL,
    start_time      TEXT,
    end_time        TEXT,
    created_at      TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS activities (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id       INTEGER NOT NULL,
    type_name     TEXT NOT NULL,
    quantity      REAL NOT NULL DEFAULT 1,
    activity_date TEXT NOT NULL,
    created_at    TEXT NOT NULL DEFAULT (datetime('now'))
);

-- week_start is always a Monday
CREATE TABLE IF NOT EXISTS weekly_logs (
    user_id             INTEGER NOT NULL,
    week_start          TEXT NOT NULL,
    waste_bag_count     INTEGER NOT NULL DEFAULT 0,
    general_waste_kg    REAL NOT NULL DEFAULT 0,
    recycled_waste_kg   REAL NOT NULL DEFAULT 0,
    grocery_bill        REAL NOT NULL DEFAULT 0,
    new_clothes_monthly INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (user_id, week_start)
);

-- Append-only; rows are never updated or deleted
CREATE TABLE IF NOT EXISTS prediction_logs (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id         INTEGER,
    input_data      TEXT NOT NULL DEFAULT '{}',
    predicted_score REAL NOT NULL,
    model_version   TEXT NOT NULL,
    created_at      TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_trips_user_date      ON trips(user_id, trip_date);
CREATE INDEX IF NOT EXISTS idx_activities_user_date ON activities(user_id, activity_date);
CREATE INDEX IF NOT EXISTS idx_predictions_user_ts  ON prediction_logs(user_id, created_at);
"""


class EcoDatabase:
    """SQLite database manager.

    Supports both file-based and in-memory (`:memory:`) databases.
    In-memory mode is used for testing.

    Usage::

        db = EcoDatabase(":memory:")
        db.initialize()
        conn = db.connection
        # ... use connection ...
        db.close()
    """

    def __init__(self, db_path: str = ":memory:") -> None:
        self._db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get the active database connection.

        Raises:
            StorageError: If the database has not been initialized.
        """
        if self._conn is None:
            raise StorageError("Database not initialized. Call initialize() first.")
        return self._conn

    def initialize(self) -> None:
        """Create the connection and ensure the schema exists. Idempotent."""
        if self._conn is not None:
            return

        if self._db_path != ":memory:":
            db_file = Path(self._db_path).expanduser()
            db_file.parent.mkdir(parents=True, exist_ok=True)
            target = str(db_file)
        else:
            target = ":memory:"

        # The API serves requests from a worker thread other than the one
        # that opened the connection.
        self._conn = sqlite3.connect(target, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        if target != ":memory:":
            self._conn.execute("PRAGMA journal_mode=WAL")

        self._ensure_schema()
        logger.info("Eco database initialized: %s", self._db_path)

    def _ensure_schema(self) -> None:
        conn = self.connection
        conn.executescript(_SCHEMA_V1)

        row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
        current_version = row[0] if row[0] is not None else 0
        if current_version < SCHEMA_VERSION:
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,)
            )
            conn.commit()
            logger.info(
                "Schema updated from version %d to %d", current_version, SCHEMA_VERSION
            )

    def get_schema_version(self) -> int:
        row = self.connection.execute("SELECT MAX(version) FROM schema_version").fetchone()
        return row[0] if row[0] is not None else 0

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("Eco database closed")

    def __enter__(self) -> "EcoDatabase":
        self.initialize()
        return self

    def __exit__(self, *args) -> None:
        self.close()
