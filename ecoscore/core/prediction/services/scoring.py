"""Score post-processing: clamping, category bands and recommendation rules."""

from typing import Callable, List, NamedTuple, Tuple

from ecoscore.core.prediction.domain import ScoreCategory
from ecoscore.core.prediction.model.signals import RawSignalMap, coerce_number, is_truthy

MIN_SCORE = 0.0
MAX_SCORE = 100.0

MAX_RECOMMENDATIONS = 5
MAX_QUICK_RECOMMENDATIONS = 3

# Lower bound (inclusive) of each band, highest first.
SCORE_BANDS: Tuple[Tuple[float, ScoreCategory], ...] = (
    (80.0, ScoreCategory.EXCELLENT),
    (60.0, ScoreCategory.GOOD),
    (40.0, ScoreCategory.AVERAGE),
    (20.0, ScoreCategory.BELOW_AVERAGE),
)


def clamp_score(raw_score: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, raw_score))


def finalize_score(raw_score: float) -> float:
    """Clamp a raw model output to [0, 100] and round for presentation.

    Categories are assigned from the clamped value before rounding.
    """
    return round(clamp_score(raw_score), 2)


def categorize(score: float) -> ScoreCategory:
    for lower_bound, category in SCORE_BANDS:
        if score >= lower_bound:
            return category
    return ScoreCategory.NEEDS_IMPROVEMENT


def score_bands() -> List[dict]:
    """Describe the category bands as ``{min, max, label}`` rows."""
    bands = []
    upper = int(MAX_SCORE)
    for lower_bound, category in SCORE_BANDS:
        bands.append({"min": int(lower_bound), "max": upper, "label": category.value})
        upper = int(lower_bound) - 1
    bands.append(
        {"min": int(MIN_SCORE), "max": upper, "label": ScoreCategory.NEEDS_IMPROVEMENT.value}
    )
    return bands


class RecommendationRule(NamedTuple):
    applies: Callable[[RawSignalMap], bool]
    tip: str


def _number(raw: RawSignalMap, key: str) -> float:
    return coerce_number(raw.get(key), 0.0)


RECOMMENDATION_RULES: Tuple[RecommendationRule, ...] = (
    RecommendationRule(
        lambda raw: _number(raw, "car_km") > 10
        and _number(raw, "bike_km") + _number(raw, "walk_km") < 2,
        "🚴 Consider cycling or walking for short trips. Even replacing one car "
        "trip per day can save ~2kg CO2.",
    ),
    RecommendationRule(
        lambda raw: _number(raw, "car_km") > 20,
        "🚌 For longer commutes, consider public transport. Buses and trains "
        "produce 50-80% less CO2 per passenger.",
    ),
    RecommendationRule(
        lambda raw: not is_truthy(raw.get("uses_solar_panels")),
        "☀️ Installing solar panels could reduce your carbon footprint by up to "
        "1.5 tons per year.",
    ),
    RecommendationRule(
        lambda raw: _number(raw, "ac_hours") > 8,
        "❄️ Try reducing AC usage by 2 hours daily. Each hour saved can reduce "
        "emissions by ~0.5kg CO2.",
    ),
    RecommendationRule(
        lambda raw: _number(raw, "red_meat_meals") >= 2,
        "🥗 Reducing red meat by one meal per week can save ~3.5kg CO2 weekly. "
        "Try Meatless Monday!",
    ),
    RecommendationRule(
        lambda raw: not is_truthy(raw.get("recycling_practiced")),
        "♻️ Start recycling! Recycling one aluminum can saves enough energy to "
        "power a TV for 3 hours.",
    ),
    RecommendationRule(
        lambda raw: _number(raw, "food_waste_kg") > 1,
        "🍎 Plan meals to reduce food waste. The average household can save "
        "$1,500/year by reducing food waste.",
    ),
    RecommendationRule(
        lambda raw: _number(raw, "shower_frequency") > 2,
        "🚿 Shorter showers save water and energy. A 5-minute shower uses ~40 "
        "liters less than a 10-minute one.",
    ),
)


def generate_recommendations(
    raw: RawSignalMap, limit: int = MAX_RECOMMENDATIONS
) -> List[str]:
    """Collect matching tips in rule order, evaluated on caller-supplied values only."""
    tips = [rule.tip for rule in RECOMMENDATION_RULES if rule.applies(raw)]
    return tips[:limit]
