"""Feature derivation and vectorization helpers.

The pipeline runs as a chain of pure stages, each returning a fresh read-only
mapping. Order matters: derived features read overlaid values, and one-hot
encoding runs last so it never gets overwritten.

    seed_defaults -> overlay_signals -> derive_features
        -> encode_categoricals -> project_features
"""

from datetime import date
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence

import numpy as np

from .signals import RawSignalMap, coerce_category, coerce_number

FeatureMap = Mapping[str, float]

DEFAULT_VALUES: Mapping[str, float] = MappingProxyType(
    {
        "household_size": 1.0,
        "car_km": 0.0,
        "bus_km": 0.0,
        "train_metro_km": 0.0,
        "bike_km": 0.0,
        "walk_km": 0.0,
        "total_distance_km": 0.0,
        "num_trips": 0.0,
        "electricity_kwh": 10.0,
        "natural_gas_therms": 0.0,
        "ac_hours": 0.0,
        "heating_hours": 0.0,
        "water_usage_liters": 100.0,
        "renewable_energy_percent": 0.0,
        "energy_efficiency": 0.5,
        "red_meat_meals": 0.0,
        "poultry_meals": 0.0,
        "fish_meals": 0.0,
        "vegetarian_meals": 1.0,
        "vegan_meals": 0.0,
        "grocery_bill": 100.0,
        "food_waste_kg": 0.5,
        "waste_bag_count": 1.0,
        "general_waste_kg": 2.0,
        "recycling_practiced": 0.0,
        "recycled_waste_kg": 0.0,
        "composting_practiced": 0.0,
        "new_clothes_monthly": 1.0,
        "shower_frequency": 1.0,
        "tv_pc_hours": 2.0,
        "internet_hours": 2.0,
        "public_transport_usage": 0.0,
        "uses_solar_panels": 0.0,
        "smart_thermostat": 0.0,
        "travel_efficiency": 0.5,
        "energy_efficiency_score": 0.5,
        "sustainable_transport_ratio": 0.0,
        "recycling_rate": 0.0,
        "per_capita_co2": 10.0,
        "is_weekend_num": 0.0,
        "month": 1.0,
    }
)

# Vocabularies are matched by exact string; entries are kept as the model
# was trained on them, mixed casing in vehicle_type included.
CATEGORICAL_VOCABULARIES: Mapping[str, Sequence[str]] = MappingProxyType(
    {
        "age_group": ("26-35", "36-50", "50+"),
        "lifestyle_type": ("remote_worker", "retired", "self_employed", "student"),
        "location_type": ("suburban", "urban"),
        "day_of_week": ("Monday", "Saturday", "Sunday", "Thursday", "Tuesday", "Wednesday"),
        "vehicle_type": (
            "Car",
            "Electric Vehicle",
            "Walking",
            "car",
            "diesel",
            "electric",
            "hybrid",
            "lpg",
            "none",
            "petrol",
        ),
        "car_fuel_type": ("electric", "hybrid", "lpg", "none", "petrol"),
        "diet_type": ("pescatarian", "vegan", "vegetarian"),
        "waste_bag_size": ("large", "medium", "small"),
        "social_activity": ("often", "sometimes"),
        "season": ("spring", "summer", "winter"),
    }
)

# "omnivore" and "office_worker" sit outside their vocabularies, so the
# default profile encodes as an all-zero block for diet and lifestyle.
CATEGORICAL_DEFAULTS: Mapping[str, str] = MappingProxyType(
    {
        "age_group": "26-35",
        "lifestyle_type": "office_worker",
        "location_type": "urban",
        "vehicle_type": "none",
        "car_fuel_type": "none",
        "diet_type": "omnivore",
        "waste_bag_size": "medium",
        "social_activity": "sometimes",
    }
)

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

CAR_CO2_KG_PER_KM = 0.21
ELECTRICITY_CO2_KG_PER_KWH = 0.5


def _unit_interval(value: float) -> float:
    return max(0.0, min(1.0, value))


def season_for_month(month: int) -> str:
    """Bucket a calendar month into a meteorological season."""
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "fall"
    return "winter"


def day_name(reference_date: date) -> str:
    return DAY_NAMES[reference_date.weekday()]


def expected_feature_count() -> int:
    """Number of features the pipeline produces for a model trained on it."""
    return len(DEFAULT_VALUES) + sum(
        len(vocabulary) for vocabulary in CATEGORICAL_VOCABULARIES.values()
    )


def seed_defaults() -> FeatureMap:
    """Start from a copy of the default table."""
    return MappingProxyType(dict(DEFAULT_VALUES))


def overlay_signals(features: FeatureMap, raw: RawSignalMap) -> FeatureMap:
    """Overwrite known numeric features with caller-supplied values.

    Keys outside the seeded map are ignored; values that do not coerce to a
    finite number keep the current value.
    """
    merged = dict(features)
    for key, signal in raw.items():
        if key in merged:
            merged[key] = coerce_number(signal, merged[key])
    return MappingProxyType(merged)


def derive_features(features: FeatureMap, reference_date: date) -> FeatureMap:
    """Compute ratio, efficiency and calendar features from merged values."""
    f = dict(features)

    f["total_distance_km"] = (
        f["car_km"] + f["bus_km"] + f["train_metro_km"] + f["bike_km"] + f["walk_km"]
    )

    total = f["total_distance_km"]
    if total > 0:
        sustainable = f["bike_km"] + f["walk_km"] + f["bus_km"] + f["train_metro_km"]
        # Identity for non-negative distances; negative inputs cannot leave [0, 1].
        f["sustainable_transport_ratio"] = _unit_interval(sustainable / total)
        f["public_transport_usage"] = _unit_interval(
            (f["bus_km"] + f["train_metro_km"]) / total
        )
    else:
        f["sustainable_transport_ratio"] = 1.0
        f["public_transport_usage"] = 0.0

    f["travel_efficiency"] = f["sustainable_transport_ratio"]

    renewable = f["renewable_energy_percent"] / 100.0
    solar = 1.0 if f["uses_solar_panels"] > 0 else 0.0
    thermostat = 1.0 if f["smart_thermostat"] > 0 else 0.0
    f["energy_efficiency"] = (renewable + solar * 0.3 + thermostat * 0.2) / 1.5
    f["energy_efficiency_score"] = f["energy_efficiency"]

    total_waste = f["general_waste_kg"] + f["recycled_waste_kg"]
    f["recycling_rate"] = f["recycled_waste_kg"] / total_waste if total_waste > 0 else 0.0

    household = max(f["household_size"], 1.0)
    car_co2 = f["car_km"] * CAR_CO2_KG_PER_KM
    energy_co2 = f["electricity_kwh"] * ELECTRICITY_CO2_KG_PER_KWH
    f["per_capita_co2"] = (car_co2 + energy_co2) / household

    f["is_weekend_num"] = 1.0 if reference_date.weekday() >= 5 else 0.0
    f["month"] = float(reference_date.month)

    return MappingProxyType(f)


def one_hot(category: str, value: str) -> Dict[str, float]:
    """Encode ``value`` against the vocabulary of ``category``.

    A value outside the vocabulary yields an all-zero block.
    """
    return {
        f"{category}_{option}": 1.0 if option == value else 0.0
        for option in CATEGORICAL_VOCABULARIES.get(category, ())
    }


def resolve_categories(raw: RawSignalMap, reference_date: date) -> Dict[str, str]:
    """Pick the label for every categorical; calendar ones ignore the caller."""
    labels = {
        category: coerce_category(raw.get(category), fallback)
        for category, fallback in CATEGORICAL_DEFAULTS.items()
    }
    labels["day_of_week"] = day_name(reference_date)
    labels["season"] = season_for_month(reference_date.month)
    return labels


def encode_categoricals(
    features: FeatureMap, raw: RawSignalMap, reference_date: date
) -> FeatureMap:
    encoded = dict(features)
    for category, label in resolve_categories(raw, reference_date).items():
        encoded.update(one_hot(category, label))
    return MappingProxyType(encoded)


def project_features(features: FeatureMap, feature_names: Sequence[str]) -> np.ndarray:
    """Produce the model input vector in the declared feature order."""

    vector = np.zeros(len(feature_names), dtype=np.float64)
    for idx, name in enumerate(feature_names):
        vector[idx] = float(features.get(name, 0.0))
    return vector


def build_feature_map(raw: RawSignalMap, reference_date: date) -> FeatureMap:
    """Run every stage up to (not including) projection."""
    features = seed_defaults()
    features = overlay_signals(features, raw)
    features = derive_features(features, reference_date)
    return encode_categoricals(features, raw, reference_date)


def prepare(
    raw: RawSignalMap, reference_date: date, feature_names: Sequence[str]
) -> np.ndarray:
    """Build the complete, ordered feature vector for one prediction."""
    return project_features(build_feature_map(raw, reference_date), feature_names)


def all_feature_names() -> List[str]:
    """Every feature name the pipeline can emit, numeric block first."""
    names = list(DEFAULT_VALUES)
    for category, vocabulary in CATEGORICAL_VOCABULARIES.items():
        names.extend(f"{category}_{option}" for option in vocabulary)
    return names
